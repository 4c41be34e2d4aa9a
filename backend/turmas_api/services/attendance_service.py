"""
Serviço de presenças.

Uma única presença por (turma, usuário) : marcar de novo sobrescreve o registro
anterior (valor, autor e horário da marcação).
"""

import uuid
import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, aliased

from turmas_api.models.presenca import Presenca
from turmas_api.models.turma import Turma
from turmas_api.models.user import User
from turmas_api.schemas.presenca import PresencaComUsuario, PresencaMark, PresencaResponse

logger = logging.getLogger(__name__)


def mark_attendance(
    db: Session,
    turma_id: uuid.UUID,
    data: PresencaMark,
    marcado_por: uuid.UUID,
) -> PresencaResponse:
    """Cria ou sobrescreve a presença de um usuário numa turma."""
    if db.get(Turma, turma_id) is None:
        raise ValueError("Turma não encontrada.")
    if db.get(User, data.user_id) is None:
        raise ValueError("Usuário não encontrado.")

    presenca = db.execute(
        select(Presenca).where(
            Presenca.turma_id == turma_id,
            Presenca.user_id == data.user_id,
        )
    ).scalar()

    if presenca is None:
        presenca = Presenca(turma_id=turma_id, user_id=data.user_id)
        db.add(presenca)

    presenca.presente = data.presente
    presenca.marcado_por = marcado_por
    presenca.marcado_em = datetime.now()

    db.commit()
    db.refresh(presenca)

    logger.info(
        "Presença marcada : turma %s, usuário %s, presente=%s (por %s)",
        turma_id, data.user_id, data.presente, marcado_por,
    )
    return PresencaResponse.model_validate(presenca)


def get_turma_attendance(db: Session, turma_id: uuid.UUID) -> list[PresencaComUsuario]:
    """Presenças da turma com o nome do usuário e de quem marcou."""
    marcador = aliased(User)
    rows = db.execute(
        select(Presenca, User.nome, User.email, marcador.nome)
        .join(User, User.id == Presenca.user_id)
        .outerjoin(marcador, marcador.id == Presenca.marcado_por)
        .where(Presenca.turma_id == turma_id)
        .order_by(User.nome)
    ).all()

    return [
        PresencaComUsuario(
            **PresencaResponse.model_validate(presenca).model_dump(),
            nome=nome,
            email=email,
            marcador_nome=marcador_nome,
        )
        for presenca, nome, email, marcador_nome in rows
    ]


def get_user_attendance(db: Session, user_id: uuid.UUID) -> list[PresencaResponse]:
    presencas = db.execute(
        select(Presenca).where(Presenca.user_id == user_id)
    ).scalars().all()
    return [PresencaResponse.model_validate(p) for p in presencas]


def was_present(db: Session, turma_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """True apenas se existe presença marcada como presente."""
    presente = db.execute(
        select(Presenca.presente).where(
            Presenca.turma_id == turma_id,
            Presenca.user_id == user_id,
        )
    ).scalar()
    return presente is True
