"""
Router das avaliações pós-turma.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.avaliacao import AvaliacaoComUsuario, AvaliacaoCreate, AvaliacaoResponse, AvaliacaoStatus
from turmas_api.schemas.user import UserSession
from turmas_api.security import get_current_session, require_gestor
from turmas_api.services import evaluation_service

router = APIRouter(prefix="/api/v1/turmas", tags=["Avaliações"])


@router.post("/{turma_id}/avaliacoes", response_model=AvaliacaoResponse, status_code=201, summary="Enviar avaliação")
def submit_evaluation(
    turma_id: uuid.UUID,
    data: AvaliacaoCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """
    Envia a avaliação do usuário da sessão.
    Exige presença confirmada e turma já realizada. Uma única avaliação por turma.
    """
    try:
        return evaluation_service.submit_evaluation(db, turma_id, session.user_id, data)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        msg = str(e)
        if "não encontrad" in msg:
            raise HTTPException(status_code=404, detail=msg)
        if msg == evaluation_service.MSG_JA_AVALIOU:
            raise HTTPException(status_code=409, detail=msg)
        raise HTTPException(status_code=400, detail=msg)


@router.get("/{turma_id}/avaliacoes/status", response_model=AvaliacaoStatus, summary="Posso avaliar ?")
def evaluation_status(
    turma_id: uuid.UUID,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    status = evaluation_service.get_status(db, turma_id, session.user_id)
    if status is None:
        raise HTTPException(status_code=404, detail="Turma não encontrada.")
    return status


@router.get("/{turma_id}/avaliacoes", response_model=List[AvaliacaoComUsuario], summary="Avaliações da turma")
def turma_evaluations(turma_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    return evaluation_service.get_turma_evaluations(db, turma_id)
