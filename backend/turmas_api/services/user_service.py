"""
Serviço de perfis de usuário.
"""

import uuid
import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from turmas_api.models.campus import Campus
from turmas_api.models.user import User
from turmas_api.schemas.user import UserResponse, UserUpdate

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: uuid.UUID) -> Optional[UserResponse]:
    user = db.get(User, user_id)
    if user is None:
        return None
    return UserResponse.model_validate(user)


def get_users(db: Session) -> list[UserResponse]:
    users = db.execute(select(User).order_by(User.nome)).scalars().all()
    return [UserResponse.model_validate(u) for u in users]


def update_profile(db: Session, user_id: uuid.UUID, data: UserUpdate) -> Optional[UserResponse]:
    """Atualiza os campos fornecidos do perfil (email e perfil de acesso não são alteráveis aqui)."""
    user = db.get(User, user_id)
    if user is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("campus_id") is not None and db.get(Campus, update_data["campus_id"]) is None:
        raise ValueError("Campus não encontrado.")

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return UserResponse.model_validate(user)


def set_role(db: Session, user_id: uuid.UUID, role: str) -> Optional[UserResponse]:
    user = db.get(User, user_id)
    if user is None:
        return None
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("Perfil do usuário %s alterado para %s", user_id, role)
    return UserResponse.model_validate(user)


def promote_by_email(db: Session, email: str) -> Optional[UserResponse]:
    """Promove a GESTOR o usuário com este email (usado pelo script create_gestor)."""
    user = db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    ).scalar()
    if user is None:
        return None
    return set_role(db, user.id, "GESTOR")
