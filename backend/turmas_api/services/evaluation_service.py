"""
Serviço de avaliações pós-turma.

Só avalia quem teve presença confirmada, uma única vez, depois que a turma aconteceu.
As avaliações são imutáveis : não há atualização nem exclusão.
"""

import uuid
import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from turmas_api.models.avaliacao import Avaliacao
from turmas_api.models.turma import Turma
from turmas_api.models.user import User
from turmas_api.schemas.avaliacao import AvaliacaoComUsuario, AvaliacaoCreate, AvaliacaoResponse, AvaliacaoStatus
from turmas_api.services.attendance_service import was_present
from turmas_api.services.availability import CONCLUIDA

logger = logging.getLogger(__name__)

MSG_JA_AVALIOU = "Você já enviou a avaliação desta turma."


def _turma_realizada(turma: Turma, today: date) -> bool:
    return turma.status == CONCLUIDA or turma.data <= today


def has_submitted(db: Session, turma_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    return db.execute(
        select(Avaliacao.id).where(
            Avaliacao.turma_id == turma_id,
            Avaliacao.user_id == user_id,
        )
    ).scalar() is not None


def submit_evaluation(
    db: Session,
    turma_id: uuid.UUID,
    user_id: uuid.UUID,
    data: AvaliacaoCreate,
    today: Optional[date] = None,
) -> AvaliacaoResponse:
    """
    Registra a avaliação do usuário.

    Validações :
    1. A turma existe                          → ValueError
    2. O usuário teve presença confirmada      → PermissionError
    3. A turma já aconteceu                    → ValueError
    4. Nenhuma avaliação anterior              → ValueError
    """
    today = today or date.today()

    turma = db.get(Turma, turma_id)
    if turma is None:
        raise ValueError("Turma não encontrada.")

    if not was_present(db, turma_id, user_id):
        raise PermissionError("Apenas participantes com presença confirmada podem avaliar a turma.")

    if not _turma_realizada(turma, today):
        raise ValueError("A avaliação só pode ser enviada após a realização da turma.")

    if has_submitted(db, turma_id, user_id):
        raise ValueError(MSG_JA_AVALIOU)

    avaliacao = Avaliacao(
        turma_id=turma_id,
        user_id=user_id,
        respostas=data.respostas,
        nps=data.nps,
        comentario=data.comentario,
        enviada_em=datetime.now(),
    )
    db.add(avaliacao)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(MSG_JA_AVALIOU)
    db.refresh(avaliacao)

    logger.info("Avaliação recebida : turma %s, usuário %s, NPS %d", turma_id, user_id, data.nps)
    return AvaliacaoResponse.model_validate(avaliacao)


def get_status(
    db: Session,
    turma_id: uuid.UUID,
    user_id: uuid.UUID,
    today: Optional[date] = None,
) -> Optional[AvaliacaoStatus]:
    """Indica se o usuário pode avaliar a turma e se já avaliou. None se a turma não existe."""
    today = today or date.today()
    turma = db.get(Turma, turma_id)
    if turma is None:
        return None

    ja_avaliou = has_submitted(db, turma_id, user_id)
    pode_avaliar = (
        not ja_avaliou
        and _turma_realizada(turma, today)
        and was_present(db, turma_id, user_id)
    )
    return AvaliacaoStatus(pode_avaliar=pode_avaliar, ja_avaliou=ja_avaliou)


def get_turma_evaluations(db: Session, turma_id: uuid.UUID) -> list[AvaliacaoComUsuario]:
    """Avaliações da turma com nome e email do autor, das mais recentes às mais antigas."""
    rows = db.execute(
        select(Avaliacao, User.nome, User.email)
        .join(User, User.id == Avaliacao.user_id)
        .where(Avaliacao.turma_id == turma_id)
        .order_by(Avaliacao.enviada_em.desc())
    ).all()

    return [
        AvaliacaoComUsuario(
            **AvaliacaoResponse.model_validate(avaliacao).model_dump(),
            nome=nome,
            email=email,
        )
        for avaliacao, nome, email in rows
    ]
