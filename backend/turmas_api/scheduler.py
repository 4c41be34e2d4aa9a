"""
Agendador APScheduler do ciclo de vida das turmas.

O job roda periodicamente e persiste os status : ABERTA → ENCERRADA quando o prazo
de inscrição passou, ABERTA/ENCERRADA → CONCLUIDA quando a data da turma passou.
As leituras não dependem deste job : a projeção de disponibilidade já trata o prazo.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from turmas_api.config import settings
from turmas_api.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _refresh_turma_statuses() -> None:
    """
    Tarefa agendada : atualiza os status das turmas vencidas.
    Import local para evitar imports circulares.
    """
    from turmas_api.services.turma_service import refresh_statuses

    db = SessionLocal()
    try:
        concluded, closed = refresh_statuses(db)
        if concluded or closed:
            logger.info("Status atualizados : %d turmas concluídas, %d encerradas", concluded, closed)
    except Exception as exc:
        db.rollback()
        logger.error("Erro ao atualizar os status das turmas : %s", exc, exc_info=True)
    finally:
        db.close()


def start_scheduler() -> None:
    """Inicia o agendador em segundo plano (chamado na inicialização da API)."""
    if not settings.SCHEDULER_ENABLED:
        logger.info("Agendador desativado (SCHEDULER_ENABLED=false).")
        return
    scheduler.add_job(
        _refresh_turma_statuses,
        trigger="interval",
        minutes=settings.STATUS_JOB_INTERVAL_MINUTES,
        id="turma_status_refresh",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        "Agendador iniciado, atualização de status a cada %d minutos.",
        settings.STATUS_JOB_INTERVAL_MINUTES,
    )


def stop_scheduler() -> None:
    """Encerra o agendador (chamado no desligamento da API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Agendador encerrado.")
