"""
Schemas Pydantic para as presenças.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class PresencaMark(BaseModel):
    user_id: uuid.UUID
    presente: bool


class PresencaResponse(BaseModel):
    id: uuid.UUID
    turma_id: uuid.UUID
    user_id: uuid.UUID
    presente: bool
    marcado_por: Optional[uuid.UUID] = None
    marcado_em: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PresencaComUsuario(PresencaResponse):
    nome: str
    email: str
    marcador_nome: Optional[str] = None
