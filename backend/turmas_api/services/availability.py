"""
Projeção de disponibilidade das turmas : vagas restantes e status efetivo.

Função pura, usada tanto pelas leituras (listagens, detalhes, elegibilidade)
quanto pela inscrição atômica, para que os dois caminhos nunca divirjam.

Regra do prazo : a data limite (ou, na falta dela, a data da turma) é o último
dia válido. A turma encerra às 00:00 do dia seguinte. A comparação é feita
por dia de calendário, nunca por horário.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from pydantic import BaseModel

ABERTA = "ABERTA"
ENCERRADA = "ENCERRADA"
CONCLUIDA = "CONCLUIDA"

ATIVA = "ATIVA"
CANCELADA = "CANCELADA"


class Availability(BaseModel):
    vagas_disponiveis: int
    active_count: int
    effective_deadline: date
    is_closed: bool
    effective_status: str


def _as_date(value) -> date:
    # datetime é subclasse de date : truncar antes de comparar
    if isinstance(value, datetime):
        return value.date()
    return value


def effective_deadline(turma) -> date:
    """Data limite de inscrição, ou a data da própria turma se não houver."""
    return _as_date(turma.data_limite_inscricao or turma.data)


def is_past_deadline(turma, today: Optional[date] = None) -> bool:
    today = _as_date(today or date.today())
    return today > effective_deadline(turma)


def availability_from_count(turma, active_count: int, today: Optional[date] = None) -> Availability:
    """
    Calcula a disponibilidade a partir do número de inscrições ativas.
    Aceita qualquer objeto com capacidade, status, data e data_limite_inscricao (modelo ORM ou schema).
    """
    is_closed = turma.status != ABERTA or is_past_deadline(turma, today)
    return Availability(
        vagas_disponiveis=max(0, turma.capacidade - active_count),
        active_count=active_count,
        effective_deadline=effective_deadline(turma),
        is_closed=is_closed,
        effective_status=ENCERRADA if is_closed else ABERTA,
    )


def compute_availability(turma, enrollments: Iterable, today: Optional[date] = None) -> Availability:
    """Mesma projeção, a partir do conjunto de inscrições da turma (a ordem é irrelevante)."""
    active_count = sum(1 for inscricao in enrollments if inscricao.status == ATIVA)
    return availability_from_count(turma, active_count, today)
