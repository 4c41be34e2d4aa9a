"""
Router de gestão dos campi.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.campus import CampusCreate, CampusResponse, CampusUpdate
from turmas_api.schemas.user import UserSession
from turmas_api.security import require_gestor
from turmas_api.services import campus_service

router = APIRouter(prefix="/api/v1/campus", tags=["Campi"])


@router.get("", response_model=List[CampusResponse], summary="Listar os campi")
def list_campuses(db: Session = Depends(get_db)):
    """Lista pública (usada também no cadastro de professores)."""
    return campus_service.get_campuses(db)


@router.get("/{campus_id}", response_model=CampusResponse, summary="Detalhe de um campus")
def get_campus(campus_id: uuid.UUID, db: Session = Depends(get_db)):
    campus = campus_service.get_campus(db, campus_id)
    if campus is None:
        raise HTTPException(status_code=404, detail="Campus não encontrado.")
    return campus


@router.post("", response_model=CampusResponse, status_code=201, summary="Criar um campus")
def create_campus(data: CampusCreate, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    try:
        return campus_service.create_campus(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/{campus_id}", response_model=CampusResponse, summary="Editar um campus")
def update_campus(
    campus_id: uuid.UUID,
    data: CampusUpdate,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    try:
        campus = campus_service.update_campus(db, campus_id, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if campus is None:
        raise HTTPException(status_code=404, detail="Campus não encontrado.")
    return campus


@router.delete("/{campus_id}", status_code=204, summary="Excluir um campus")
def delete_campus(campus_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    """Bloqueado se ainda existem turmas no campus."""
    try:
        success = campus_service.delete_campus(db, campus_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not success:
        raise HTTPException(status_code=404, detail="Campus não encontrado.")
