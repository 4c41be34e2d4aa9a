"""
Router das presenças.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.presenca import PresencaComUsuario, PresencaMark, PresencaResponse
from turmas_api.schemas.user import UserSession
from turmas_api.security import get_current_session, require_gestor
from turmas_api.services import attendance_service

router = APIRouter(prefix="/api/v1", tags=["Presenças"])


@router.put("/turmas/{turma_id}/presencas", response_model=PresencaResponse, summary="Marcar presença")
def mark_attendance(
    turma_id: uuid.UUID,
    data: PresencaMark,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_gestor),
):
    """Cria ou sobrescreve a presença do usuário na turma."""
    try:
        return attendance_service.mark_attendance(db, turma_id, data, marcado_por=session.user_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/turmas/{turma_id}/presencas", response_model=List[PresencaComUsuario], summary="Presenças da turma")
def turma_attendance(turma_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    return attendance_service.get_turma_attendance(db, turma_id)


@router.get("/presencas/minhas", response_model=List[PresencaResponse], summary="Minhas presenças")
def my_attendance(db: Session = Depends(get_db), session: UserSession = Depends(get_current_session)):
    return attendance_service.get_user_attendance(db, session.user_id)
