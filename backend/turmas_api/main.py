"""
Ponto de entrada principal da API de turmas.
Inicialização : uvicorn turmas_api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import turmas_api.models  # noqa: F401 (registra todos os modelos em Base.metadata antes dos routers)
from turmas_api.config import settings
from turmas_api.routers import auth, avaliacoes, campus, exports, inscricoes, presencas, speakers, turmas, users
from turmas_api.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ciclo de vida da aplicação : inicia e encerra o agendador APScheduler."""
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="Turmas API",
    description="API de inscrições, presenças e avaliações das turmas de formação de professores",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS : libera todas as portas localhost em desenvolvimento (restringir em produção).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(campus.router)
app.include_router(speakers.router)
app.include_router(turmas.router)
app.include_router(inscricoes.router)
app.include_router(presencas.router)
app.include_router(avaliacoes.router)
app.include_router(exports.router)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepta todas as exceções não tratadas para garantir que a resposta 500
    passe pelo CORSMiddleware (que injeta os headers CORS).
    """
    logger.error("Exceção não tratada : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Ocorreu um erro interno. Tente novamente."},
    )


@app.get("/api/health", tags=["Saúde"])
def health_check():
    """Verifica se a API está operacional."""
    return {"status": "ok", "service": "Turmas API", "version": "0.1.0"}
