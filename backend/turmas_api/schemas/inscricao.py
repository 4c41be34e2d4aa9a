"""
Schemas Pydantic para as inscrições.
"""

import uuid
import datetime as dt
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class EnrollmentRequest(BaseModel):
    """Corpo opcional de POST /turmas/{id}/inscricoes : um gestor pode inscrever outro usuário."""
    user_id: Optional[uuid.UUID] = None


class EnrollmentResult(BaseModel):
    """Resultado discriminado da inscrição atômica. Falhas de negócio não são exceções."""
    success: bool
    message: str


class InscricaoResponse(BaseModel):
    id: uuid.UUID
    turma_id: uuid.UUID
    user_id: uuid.UUID
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UsuarioResumo(BaseModel):
    id: uuid.UUID
    nome: str
    email: str
    telefone: str = ""


class InscricaoComUsuario(BaseModel):
    """Inscrição de uma turma com os dados do inscrito (visão do gestor)."""
    id: uuid.UUID
    status: str
    created_at: Optional[datetime] = None
    user: UsuarioResumo


class InscricaoComTurma(BaseModel):
    """Inscrição do usuário com os campos da turma (página "Minhas inscrições")."""
    inscricao_id: uuid.UUID
    turma_id: uuid.UUID
    turma_nome: Optional[str] = None
    campus_nome: str
    data: dt.date
    hora_inicio: dt.time
    hora_fim: dt.time
    local: str
    status: str
    status_turma: str
    status_efetivo: str
    presente: Optional[bool] = None
    avaliada: bool = False
    created_at: Optional[datetime] = None
