"""
Router do catálogo de palestrantes.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.speaker import SpeakerCreate, SpeakerResponse, SpeakerUpdate
from turmas_api.schemas.user import UserSession
from turmas_api.security import require_gestor
from turmas_api.services import speaker_service, storage_service

router = APIRouter(prefix="/api/v1/speakers", tags=["Palestrantes"])


@router.get("", response_model=List[SpeakerResponse], summary="Listar palestrantes")
def list_speakers(db: Session = Depends(get_db)):
    return speaker_service.get_speakers(db)


@router.post("", response_model=SpeakerResponse, status_code=201, summary="Criar palestrante")
def create_speaker(data: SpeakerCreate, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    return speaker_service.create_speaker(db, data)


@router.put("/{speaker_id}", response_model=SpeakerResponse, summary="Editar palestrante")
def update_speaker(
    speaker_id: uuid.UUID,
    data: SpeakerUpdate,
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    speaker = speaker_service.update_speaker(db, speaker_id, data)
    if speaker is None:
        raise HTTPException(status_code=404, detail="Palestrante não encontrado.")
    return speaker


@router.delete("/{speaker_id}", status_code=204, summary="Excluir palestrante")
def delete_speaker(speaker_id: uuid.UUID, db: Session = Depends(get_db), _: UserSession = Depends(require_gestor)):
    if not speaker_service.delete_speaker(db, speaker_id):
        raise HTTPException(status_code=404, detail="Palestrante não encontrado.")


@router.post("/{speaker_id}/avatar", response_model=SpeakerResponse, summary="Enviar foto do palestrante")
async def upload_avatar(
    speaker_id: uuid.UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    _: UserSession = Depends(require_gestor),
):
    if speaker_service.get_speaker(db, speaker_id) is None:
        raise HTTPException(status_code=404, detail="Palestrante não encontrado.")

    content = await file.read()
    try:
        url = storage_service.save_upload(content, file.content_type, "speakers")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return speaker_service.set_avatar(db, speaker_id, url)
