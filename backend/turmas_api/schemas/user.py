"""
Schemas Pydantic para usuários, autenticação e sessão.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, field_validator

VALID_ROLES = {"PROFESSOR", "GESTOR"}


class SignupRequest(BaseModel):
    """Cadastro público : sempre cria um PROFESSOR."""
    nome: str
    email: EmailStr
    telefone: str
    password: str
    campus_id: Optional[uuid.UUID] = None
    niveis_ensino: List[str] = []

    @field_validator("nome", "telefone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("O campo não pode ser vazio.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("A senha deve ter pelo menos 6 caracteres.")
        return v


class UserUpdate(BaseModel):
    nome: Optional[str] = None
    telefone: Optional[str] = None
    campus_id: Optional[uuid.UUID] = None
    niveis_ensino: Optional[List[str]] = None

    @field_validator("nome", "telefone")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("O campo não pode ser vazio.")
        return v.strip() if v else v

    @field_validator("nome", "telefone", "niveis_ensino")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("O campo não pode ser nulo.")
        return v


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def valid_role(cls, v: str) -> str:
        if v not in VALID_ROLES:
            raise ValueError(f"Perfil inválido. Valores aceitos : {VALID_ROLES}")
        return v


class UserResponse(BaseModel):
    id: uuid.UUID
    nome: str
    email: str
    telefone: str
    campus_id: Optional[uuid.UUID] = None
    niveis_ensino: List[str] = []
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserSession(BaseModel):
    """
    Sessão explícita do usuário autenticado.
    Construída a cada requisição a partir do token e passada às operações que exigem autorização.
    """
    user_id: uuid.UUID
    nome: str
    email: str
    role: str

    @property
    def is_gestor(self) -> bool:
        return self.role == "GESTOR"
