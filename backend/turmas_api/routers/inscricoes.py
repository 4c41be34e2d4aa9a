"""
Router das inscrições : inscrição atômica, cancelamento e listagens.
"""

import uuid
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.inscricao import (
    EnrollmentRequest,
    EnrollmentResult,
    InscricaoComTurma,
    InscricaoComUsuario,
    InscricaoResponse,
)
from turmas_api.schemas.user import UserSession
from turmas_api.security import get_current_session, require_gestor
from turmas_api.services import enrollment_service
from turmas_api.services.eligibility import MSG_ERRO_INSCRICAO

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Inscrições"])


@router.post("/turmas/{turma_id}/inscricoes", response_model=EnrollmentResult, summary="Inscrever-se numa turma")
def enroll(
    turma_id: uuid.UUID,
    data: Optional[EnrollmentRequest] = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """
    Inscrição atômica (verificação de prazo, duplicidade e vagas na mesma transação).

    - Sucesso ou recusa de negócio (turma fechada, já inscrito, lotada) → 200 com `success`
    - Falha de infraestrutura → 503 com mensagem genérica

    Por padrão inscreve o usuário da sessão. Um gestor pode informar `user_id`.
    """
    user_id = session.user_id
    if data is not None and data.user_id is not None and data.user_id != session.user_id:
        if not session.is_gestor:
            raise HTTPException(status_code=403, detail="Você só pode inscrever a si mesmo.")
        user_id = data.user_id

    try:
        return enrollment_service.enroll(db, turma_id, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Erro ao processar inscrição (turma %s, usuário %s) : %s", turma_id, user_id, exc, exc_info=True)
        return JSONResponse(
            status_code=503,
            content=EnrollmentResult(success=False, message=MSG_ERRO_INSCRICAO).model_dump(),
        )


@router.post("/inscricoes/{inscricao_id}/cancelar", response_model=InscricaoResponse, summary="Cancelar inscrição")
def cancel(
    inscricao_id: uuid.UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Cancela a inscrição e libera a vaga. Apenas o inscrito ou um gestor."""
    try:
        return enrollment_service.cancel_enrollment(db, inscricao_id, session)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/inscricoes/minhas", response_model=List[InscricaoComTurma], summary="Minhas inscrições")
def my_enrollments(db: Session = Depends(get_db), session: UserSession = Depends(get_current_session)):
    return enrollment_service.get_user_enrollments(db, session.user_id)


@router.get("/turmas/{turma_id}/inscricoes", response_model=List[InscricaoComUsuario], summary="Inscritos da turma")
def turma_enrollments(turma_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    return enrollment_service.get_turma_enrollments(db, turma_id)
