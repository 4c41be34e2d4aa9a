"""
Schemas Pydantic para as avaliações pós-turma.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


class AvaliacaoCreate(BaseModel):
    nps: int
    respostas: Dict[str, Any] = {}
    comentario: Optional[str] = None

    @field_validator("nps")
    @classmethod
    def nps_range(cls, v: int) -> int:
        if not 0 <= v <= 10:
            raise ValueError("O NPS deve estar entre 0 e 10.")
        return v

    @field_validator("comentario")
    @classmethod
    def strip_comentario(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class AvaliacaoResponse(BaseModel):
    id: uuid.UUID
    turma_id: uuid.UUID
    user_id: uuid.UUID
    respostas: Dict[str, Any]
    nps: int
    comentario: Optional[str] = None
    enviada_em: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AvaliacaoComUsuario(AvaliacaoResponse):
    nome: str
    email: str


class AvaliacaoStatus(BaseModel):
    """Situação do usuário atual em relação à avaliação de uma turma."""
    pode_avaliar: bool
    ja_avaliou: bool
