"""
Router dos perfis de usuário.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.inscricao import InscricaoComTurma
from turmas_api.schemas.user import RoleUpdate, UserResponse, UserSession, UserUpdate
from turmas_api.security import get_current_session, require_gestor
from turmas_api.services import enrollment_service, user_service

router = APIRouter(prefix="/api/v1/users", tags=["Usuários"])


@router.put("/me", response_model=UserResponse, summary="Editar meu perfil")
def update_me(
    data: UserUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    try:
        user = user_service.update_profile(db, session.user_id, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado.")
    return user


@router.get("", response_model=List[UserResponse], summary="Listar usuários")
def list_users(db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    return user_service.get_users(db)


@router.put("/{user_id}/role", response_model=UserResponse, summary="Alterar o perfil de acesso")
def set_role(
    user_id: uuid.UUID,
    data: RoleUpdate,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    user = user_service.set_role(db, user_id, data.role)
    if user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado.")
    return user


@router.get("/{user_id}/inscricoes", response_model=List[InscricaoComTurma], summary="Inscrições de um usuário")
def list_user_enrollments(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    return enrollment_service.get_user_enrollments(db, user_id)
