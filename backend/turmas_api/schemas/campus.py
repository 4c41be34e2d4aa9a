"""
Schemas Pydantic para os campi.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class CampusCreate(BaseModel):
    nome: str
    endereco: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("nome")
    @classmethod
    def nome_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("O nome do campus não pode ser vazio.")
        return v.strip()


class CampusUpdate(BaseModel):
    nome: Optional[str] = None
    endereco: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("nome")
    @classmethod
    def nome_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("O nome do campus não pode ser vazio.")
        return v.strip() if v else v

    @field_validator("nome")
    @classmethod
    def nome_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("O nome do campus não pode ser nulo.")
        return v


class CampusResponse(BaseModel):
    id: uuid.UUID
    nome: str
    endereco: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
