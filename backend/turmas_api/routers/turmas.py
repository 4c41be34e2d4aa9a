"""
Router das turmas : listagem das disponíveis, detalhes, CRUD do gestor,
palestrantes, arquivos (capa e PDF) e elegibilidade do usuário atual.
"""

import uuid
import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.speaker import SpeakerResponse
from turmas_api.schemas.turma import (
    Elegibilidade,
    TurmaCreate,
    TurmaDetalhe,
    TurmaDisponivel,
    TurmaPublica,
    TurmaSpeakersAssign,
    TurmaUpdate,
)
from turmas_api.schemas.user import UserSession
from turmas_api.security import get_current_session, require_gestor
from turmas_api.services import enrollment_service, storage_service, turma_service

router = APIRouter(prefix="/api/v1/turmas", tags=["Turmas"])


@router.get("/disponiveis", response_model=List[TurmaDisponivel], summary="Listar turmas disponíveis")
def list_available(
    q: Optional[str] = None,
    periodo: Optional[List[str]] = Query(None),
    com_vagas: bool = False,
    campus_id: Optional[uuid.UUID] = None,
    db: Session = Depends(get_db),
    _: UserSession = Depends(get_current_session),
):
    """
    Turmas futuras com vagas disponíveis, total de inscritos e status efetivo.

    Filtros :
    - `q` : busca no campus, nome e local
    - `periodo` : manha, tarde e/ou noite (repetível, combinados em OU)
    - `com_vagas` : somente turmas com vagas
    - `campus_id`
    """
    if periodo:
        invalid = [p for p in periodo if p not in turma_service.PERIODOS]
        if invalid:
            raise HTTPException(status_code=422, detail=f"Período inválido : {invalid[0]}")
    return turma_service.list_available(db, campus_id=campus_id, q=q, periodos=periodo, com_vagas=com_vagas)


@router.get("", response_model=List[TurmaDisponivel], summary="Listar todas as turmas (gestor)")
def list_turmas(
    campus_id: Optional[uuid.UUID] = None,
    data_inicio: Optional[dt.date] = None,
    data_fim: Optional[dt.date] = None,
    status_efetivo: Optional[str] = None,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    return turma_service.list_turmas(
        db,
        campus_id=campus_id,
        data_inicio=data_inicio,
        data_fim=data_fim,
        status_efetivo=status_efetivo,
    )


@router.post("", response_model=TurmaDisponivel, status_code=201, summary="Criar uma turma")
def create_turma(data: TurmaCreate, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    try:
        return turma_service.create_turma(db, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{turma_id}", response_model=TurmaDetalhe, summary="Detalhe completo de uma turma")
def get_details(turma_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    """Turma, campus, palestrantes, inscrições, presenças e avaliações."""
    turma = turma_service.get_details(db, turma_id)
    if turma is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")
    return turma


@router.get("/{turma_id}/publico", response_model=TurmaPublica, summary="Detalhe público de uma turma")
def get_public_details(turma_id: uuid.UUID, db: Session = Depends(get_db)):
    turma = turma_service.get_public_details(db, turma_id)
    if turma is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")
    return turma


@router.get("/{turma_id}/elegibilidade", response_model=Elegibilidade, summary="Posso me inscrever ?")
def get_eligibility(
    turma_id: uuid.UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """
    Verificação consultiva para habilitar o botão de inscrição.
    A decisão final é sempre da inscrição (POST /turmas/{id}/inscricoes).
    """
    result = enrollment_service.get_eligibility(db, turma_id, session.user_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")
    return result


@router.put("/{turma_id}", response_model=TurmaDisponivel, summary="Editar uma turma")
def update_turma(
    turma_id: uuid.UUID,
    data: TurmaUpdate,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    try:
        turma = turma_service.update_turma(db, turma_id, data)
    except ValueError as e:
        msg = str(e)
        if "não encontrad" in msg:
            raise HTTPException(status_code=404, detail=msg)
        raise HTTPException(status_code=400, detail=msg)
    if turma is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")
    return turma


@router.delete("/{turma_id}", status_code=204, summary="Excluir uma turma")
def delete_turma(turma_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    """Exclui a turma com suas inscrições, presenças e avaliações."""
    if not turma_service.delete_turma(db, turma_id):
        raise HTTPException(status_code=404, detail="Turma não encontrada.")


@router.put("/{turma_id}/speakers", response_model=List[SpeakerResponse], summary="Definir os palestrantes")
def set_speakers(
    turma_id: uuid.UUID,
    data: TurmaSpeakersAssign,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    try:
        return turma_service.set_speakers(db, turma_id, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


async def _upload_asset(turma_id: uuid.UUID, file: UploadFile, category: str, field: str, db: Session):
    if turma_service.get_turma(db, turma_id) is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")

    content = await file.read()
    try:
        url = storage_service.save_upload(content, file.content_type, category)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return turma_service.set_asset(db, turma_id, field, url)


@router.post("/{turma_id}/capa", response_model=TurmaDisponivel, summary="Enviar a foto de capa")
async def upload_capa(
    turma_id: uuid.UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    return await _upload_asset(turma_id, file, "capas", "foto_capa", db)


@router.post("/{turma_id}/pdf", response_model=TurmaDisponivel, summary="Enviar o PDF da turma")
async def upload_pdf(
    turma_id: uuid.UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    return await _upload_asset(turma_id, file, "pdfs", "pdf_url", db)
