"""
Serviço de gestão dos campi.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from turmas_api.models.campus import Campus
from turmas_api.models.turma import Turma
from turmas_api.schemas.campus import CampusCreate, CampusResponse, CampusUpdate

logger = logging.getLogger(__name__)


def create_campus(db: Session, data: CampusCreate) -> CampusResponse:
    """Cria um campus. Levanta ValueError se o nome já existe."""
    campus = Campus(**data.model_dump())
    db.add(campus)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Já existe um campus com o nome '{data.nome}'.")
    db.refresh(campus)
    return CampusResponse.model_validate(campus)


def get_campuses(db: Session) -> list[CampusResponse]:
    """Retorna todos os campi, ordenados pelo nome."""
    campuses = db.execute(select(Campus).order_by(Campus.nome)).scalars().all()
    return [CampusResponse.model_validate(c) for c in campuses]


def get_campus(db: Session, campus_id: uuid.UUID) -> Optional[CampusResponse]:
    campus = db.get(Campus, campus_id)
    if campus is None:
        return None
    return CampusResponse.model_validate(campus)


def update_campus(db: Session, campus_id: uuid.UUID, data: CampusUpdate) -> Optional[CampusResponse]:
    campus = db.get(Campus, campus_id)
    if campus is None:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(campus, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError("Já existe um campus com este nome.")
    db.refresh(campus)
    return CampusResponse.model_validate(campus)


def delete_campus(db: Session, campus_id: uuid.UUID) -> bool:
    """
    Exclui um campus.
    Bloqueado se o campus ainda tem turmas cadastradas.
    Retorna True se excluído, False se inexistente.
    """
    campus = db.get(Campus, campus_id)
    if campus is None:
        return False

    has_turmas = db.execute(
        select(Turma.id).where(Turma.campus_id == campus_id).limit(1)
    ).scalar()

    if has_turmas:
        raise ValueError("Não é possível excluir este campus : existem turmas cadastradas nele.")

    db.delete(campus)
    db.commit()
    logger.info("Campus excluído : %s", campus_id)
    return True
