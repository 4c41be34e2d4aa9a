"""
Schemas Pydantic para as turmas.

Nota : o módulo datetime é importado como dt para evitar o conflito de nomes
entre o campo `data` / `hora_inicio` e os tipos `datetime.date` / `datetime.time` no Pydantic v2.
"""

import uuid
import datetime as dt
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator, model_validator

from turmas_api.schemas.avaliacao import AvaliacaoResponse
from turmas_api.schemas.campus import CampusResponse
from turmas_api.schemas.inscricao import InscricaoComUsuario
from turmas_api.schemas.presenca import PresencaResponse
from turmas_api.schemas.speaker import SpeakerResponse

VALID_STATUSES = {"ABERTA", "ENCERRADA", "CONCLUIDA"}
DEFAULT_CAPACIDADE = 30


def validate_schedule(
    data: Optional[dt.date],
    data_limite_inscricao: Optional[dt.date],
    hora_inicio: Optional[dt.time],
    hora_fim: Optional[dt.time],
) -> None:
    """Regras entre campos, reutilizadas na criação e na atualização parcial (valores mesclados)."""
    if data is not None and data_limite_inscricao is not None and data_limite_inscricao > data:
        raise ValueError("A data limite de inscrição não pode ser posterior à data da turma.")
    if hora_inicio is not None and hora_fim is not None and hora_fim <= hora_inicio:
        raise ValueError("O horário de término deve ser posterior ao horário de início.")


class TurmaCreate(BaseModel):
    campus_id: uuid.UUID
    nome: Optional[str] = None
    sobre: Optional[str] = None
    pdf_url: Optional[str] = None
    foto_capa: Optional[str] = None
    palestrantes: Optional[str] = None
    data: dt.date
    data_limite_inscricao: Optional[dt.date] = None
    hora_inicio: dt.time
    hora_fim: dt.time
    local: str
    capacidade: int = DEFAULT_CAPACIDADE

    @field_validator("data")
    @classmethod
    def data_not_past(cls, v: dt.date) -> dt.date:
        if v < dt.date.today():
            raise ValueError("A data da turma não pode estar no passado.")
        return v

    @field_validator("capacidade")
    @classmethod
    def capacidade_positiva(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("A capacidade deve ser maior que zero.")
        return v

    @field_validator("local")
    @classmethod
    def local_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("O local não pode ser vazio.")
        return v.strip()

    @model_validator(mode="after")
    def check_schedule(self) -> "TurmaCreate":
        validate_schedule(self.data, self.data_limite_inscricao, self.hora_inicio, self.hora_fim)
        return self


class TurmaUpdate(BaseModel):
    campus_id: Optional[uuid.UUID] = None
    nome: Optional[str] = None
    sobre: Optional[str] = None
    pdf_url: Optional[str] = None
    foto_capa: Optional[str] = None
    palestrantes: Optional[str] = None
    data: Optional[dt.date] = None
    data_limite_inscricao: Optional[dt.date] = None
    hora_inicio: Optional[dt.time] = None
    hora_fim: Optional[dt.time] = None
    local: Optional[str] = None
    capacidade: Optional[int] = None
    status: Optional[str] = None

    @field_validator("capacidade")
    @classmethod
    def capacidade_positiva(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("A capacidade deve ser maior que zero.")
        return v

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in VALID_STATUSES:
            raise ValueError(f"Status inválido. Valores aceitos : {VALID_STATUSES}")
        return v

    @field_validator("local")
    @classmethod
    def local_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("O local não pode ser vazio.")
        return v.strip() if v else v

    @field_validator("campus_id", "data", "hora_inicio", "hora_fim", "local", "capacidade", "status")
    @classmethod
    def not_null(cls, v):
        # omitir o campo mantém o valor gravado, null explícito é recusado
        if v is None:
            raise ValueError("O campo não pode ser nulo.")
        return v


class TurmaResponse(BaseModel):
    id: uuid.UUID
    campus_id: uuid.UUID
    nome: Optional[str] = None
    sobre: Optional[str] = None
    pdf_url: Optional[str] = None
    foto_capa: Optional[str] = None
    palestrantes: Optional[str] = None
    data: dt.date
    data_limite_inscricao: Optional[dt.date] = None
    hora_inicio: dt.time
    hora_fim: dt.time
    local: str
    capacidade: int
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TurmaDisponivel(TurmaResponse):
    """Turma com a projeção de disponibilidade (vagas e status efetivo)."""
    campus_nome: str
    vagas_disponiveis: int
    total_inscritos: int
    status_efetivo: str
    encerrada: bool


class TurmaPublica(TurmaDisponivel):
    """Visão pública : sem inscrições, presenças nem avaliações."""
    campus: CampusResponse
    speakers: List[SpeakerResponse] = []


class TurmaDetalhe(TurmaPublica):
    """Visão completa do gestor."""
    inscricoes: List[InscricaoComUsuario] = []
    presencas: List[PresencaResponse] = []
    avaliacoes: List[AvaliacaoResponse] = []


class TurmaSpeakersAssign(BaseModel):
    """Substitui a lista de palestrantes da turma (lista vazia remove todos)."""
    speaker_ids: List[uuid.UUID]


class Elegibilidade(BaseModel):
    """Resultado consultivo : habilita ou não o botão de inscrição, sem substituir a inscrição atômica."""
    pode_inscrever: bool
    motivo: Optional[str] = None
    ja_inscrito: bool
    vagas_disponiveis: int
    status_efetivo: str
