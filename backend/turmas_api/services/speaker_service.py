"""
Serviço do catálogo global de palestrantes.
"""

import uuid
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from turmas_api.models.speaker import Speaker
from turmas_api.models.turma import TurmaSpeaker
from turmas_api.schemas.speaker import SpeakerCreate, SpeakerResponse, SpeakerUpdate


def create_speaker(db: Session, data: SpeakerCreate) -> SpeakerResponse:
    speaker = Speaker(**data.model_dump())
    db.add(speaker)
    db.commit()
    db.refresh(speaker)
    return SpeakerResponse.model_validate(speaker)


def get_speakers(db: Session) -> list[SpeakerResponse]:
    speakers = db.execute(select(Speaker).order_by(Speaker.name)).scalars().all()
    return [SpeakerResponse.model_validate(s) for s in speakers]


def update_speaker(db: Session, speaker_id: uuid.UUID, data: SpeakerUpdate) -> Optional[SpeakerResponse]:
    speaker = db.get(Speaker, speaker_id)
    if speaker is None:
        return None

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(speaker, field, value)

    db.commit()
    db.refresh(speaker)
    return SpeakerResponse.model_validate(speaker)


def set_avatar(db: Session, speaker_id: uuid.UUID, url: str) -> Optional[SpeakerResponse]:
    return update_speaker(db, speaker_id, SpeakerUpdate(avatar_url=url))


def delete_speaker(db: Session, speaker_id: uuid.UUID) -> bool:
    """Exclui o palestrante e seus vínculos com turmas."""
    speaker = db.get(Speaker, speaker_id)
    if speaker is None:
        return False

    db.execute(delete(TurmaSpeaker).where(TurmaSpeaker.speaker_id == speaker_id))
    db.delete(speaker)
    db.commit()
    return True


def get_speaker(db: Session, speaker_id: uuid.UUID) -> Optional[SpeakerResponse]:
    speaker = db.get(Speaker, speaker_id)
    if speaker is None:
        return None
    return SpeakerResponse.model_validate(speaker)
