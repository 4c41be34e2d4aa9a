"""
Serviço de gestão das turmas : CRUD do gestor, listagem das turmas disponíveis,
detalhes (completo e público), palestrantes e ciclo de vida dos status.
"""

import uuid
import logging
import datetime as dt
from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from turmas_api.models.avaliacao import Avaliacao
from turmas_api.models.campus import Campus
from turmas_api.models.inscricao import Inscricao
from turmas_api.models.presenca import Presenca
from turmas_api.models.speaker import Speaker
from turmas_api.models.turma import Turma, TurmaSpeaker
from turmas_api.schemas.avaliacao import AvaliacaoResponse
from turmas_api.schemas.campus import CampusResponse
from turmas_api.schemas.presenca import PresencaResponse
from turmas_api.schemas.speaker import SpeakerResponse
from turmas_api.schemas.turma import (
    TurmaCreate,
    TurmaDetalhe,
    TurmaDisponivel,
    TurmaPublica,
    TurmaResponse,
    TurmaSpeakersAssign,
    TurmaUpdate,
    validate_schedule,
)
from turmas_api.services.availability import ABERTA, CONCLUIDA, ENCERRADA, availability_from_count
from turmas_api.services.enrollment_service import active_counts, count_active, get_turma_enrollments

logger = logging.getLogger(__name__)

PERIODOS = {"manha", "tarde", "noite"}


def periodo_do_horario(hora: dt.time) -> str:
    """Manhã das 6h às 12h, tarde das 12h às 18h, noite no restante."""
    if 6 <= hora.hour < 12:
        return "manha"
    if 12 <= hora.hour < 18:
        return "tarde"
    return "noite"


def filter_turmas(
    turmas: Iterable[TurmaDisponivel],
    q: Optional[str] = None,
    periodos: Optional[List[str]] = None,
    com_vagas: bool = False,
) -> list[TurmaDisponivel]:
    """
    Filtros rápidos da listagem :
    - q : busca sem distinção de maiúsculas no campus, nome e local
    - periodos : combinados em OU (manhã, tarde, noite), pelo horário de início
    - com_vagas : apenas turmas com pelo menos uma vaga
    """
    termo = q.strip().lower() if q else ""
    result = []
    for turma in turmas:
        if termo:
            campos = (turma.campus_nome, turma.nome or "", turma.local or "")
            if not any(termo in campo.lower() for campo in campos):
                continue
        if periodos and periodo_do_horario(turma.hora_inicio) not in periodos:
            continue
        if com_vagas and turma.vagas_disponiveis <= 0:
            continue
        result.append(turma)
    return result


def create_turma(db: Session, data: TurmaCreate) -> TurmaDisponivel:
    """Cria uma turma ABERTA. Levanta ValueError se o campus não existe."""
    if db.get(Campus, data.campus_id) is None:
        raise ValueError("Campus não encontrado.")

    turma = Turma(**data.model_dump(), status=ABERTA)
    db.add(turma)
    db.commit()
    db.refresh(turma)

    logger.info("Turma criada : %s (%s, capacidade %d)", turma.id, turma.data, turma.capacidade)
    return _to_disponivel(db, turma)


def list_turmas(
    db: Session,
    campus_id: Optional[uuid.UUID] = None,
    data_inicio: Optional[dt.date] = None,
    data_fim: Optional[dt.date] = None,
    status_efetivo: Optional[str] = None,
    today: Optional[dt.date] = None,
) -> list[TurmaDisponivel]:
    """Todas as turmas (inclusive encerradas e concluídas), para o painel do gestor."""
    query = select(Turma).order_by(Turma.data, Turma.hora_inicio)
    if campus_id is not None:
        query = query.where(Turma.campus_id == campus_id)
    if data_inicio is not None:
        query = query.where(Turma.data >= data_inicio)
    if data_fim is not None:
        query = query.where(Turma.data <= data_fim)

    turmas = [_to_disponivel(db, t, today) for t in db.execute(query).scalars().all()]
    if status_efetivo is not None:
        turmas = [t for t in turmas if t.status_efetivo == status_efetivo]
    return turmas


def list_available(
    db: Session,
    campus_id: Optional[uuid.UUID] = None,
    q: Optional[str] = None,
    periodos: Optional[List[str]] = None,
    com_vagas: bool = False,
    today: Optional[dt.date] = None,
) -> list[TurmaDisponivel]:
    """
    Turmas futuras não concluídas, com o número de vagas e o status efetivo.
    As turmas com prazo vencido continuam listadas, marcadas como encerradas.
    """
    today = today or dt.date.today()

    ativos = active_counts()

    query = (
        select(Turma, Campus.nome, func.coalesce(ativos.c.total, 0))
        .join(Campus, Campus.id == Turma.campus_id)
        .outerjoin(ativos, ativos.c.turma_id == Turma.id)
        .where(Turma.status != CONCLUIDA, Turma.data >= today)
        .order_by(Turma.data, Turma.hora_inicio)
    )
    if campus_id is not None:
        query = query.where(Turma.campus_id == campus_id)

    turmas = [
        _build_disponivel(turma, campus_nome, total or 0, today)
        for turma, campus_nome, total in db.execute(query).all()
    ]
    return filter_turmas(turmas, q=q, periodos=periodos, com_vagas=com_vagas)


def get_turma(db: Session, turma_id: uuid.UUID) -> Optional[TurmaDisponivel]:
    turma = db.get(Turma, turma_id)
    if turma is None:
        return None
    return _to_disponivel(db, turma)


def get_public_details(db: Session, turma_id: uuid.UUID) -> Optional[TurmaPublica]:
    """Detalhes públicos : turma, campus e palestrantes."""
    turma = db.get(Turma, turma_id)
    if turma is None:
        return None
    base = _to_disponivel(db, turma)
    return TurmaPublica(
        **base.model_dump(),
        campus=CampusResponse.model_validate(db.get(Campus, turma.campus_id)),
        speakers=_get_speakers(db, turma_id),
    )


def get_details(db: Session, turma_id: uuid.UUID) -> Optional[TurmaDetalhe]:
    """Detalhes completos (gestor) : inscrições com usuário, presenças e avaliações."""
    publica = get_public_details(db, turma_id)
    if publica is None:
        return None

    presencas = db.execute(
        select(Presenca).where(Presenca.turma_id == turma_id)
    ).scalars().all()
    avaliacoes = db.execute(
        select(Avaliacao).where(Avaliacao.turma_id == turma_id).order_by(Avaliacao.enviada_em.desc())
    ).scalars().all()

    return TurmaDetalhe(
        **publica.model_dump(),
        inscricoes=get_turma_enrollments(db, turma_id),
        presencas=[PresencaResponse.model_validate(p) for p in presencas],
        avaliacoes=[AvaliacaoResponse.model_validate(a) for a in avaliacoes],
    )


def update_turma(db: Session, turma_id: uuid.UUID, data: TurmaUpdate) -> Optional[TurmaDisponivel]:
    """
    Atualiza os campos fornecidos. As regras entre campos (prazo ≤ data, término > início)
    são verificadas sobre os valores mesclados com os já gravados.
    """
    turma = db.get(Turma, turma_id)
    if turma is None:
        return None

    update_data = data.model_dump(exclude_unset=True)
    if "campus_id" in update_data and db.get(Campus, update_data["campus_id"]) is None:
        raise ValueError("Campus não encontrado.")

    merged = {
        field: update_data.get(field, getattr(turma, field))
        for field in ("data", "data_limite_inscricao", "hora_inicio", "hora_fim")
    }
    validate_schedule(**merged)

    for field, value in update_data.items():
        setattr(turma, field, value)

    db.commit()
    db.refresh(turma)
    return _to_disponivel(db, turma)


def delete_turma(db: Session, turma_id: uuid.UUID) -> bool:
    """
    Exclui a turma e, em cascata, inscrições, presenças, avaliações e vínculos com palestrantes.
    Retorna True se excluída, False se inexistente.
    """
    turma = db.get(Turma, turma_id)
    if turma is None:
        return False

    for model in (Avaliacao, Presenca, Inscricao, TurmaSpeaker):
        db.execute(delete(model).where(model.turma_id == turma_id))
    db.delete(turma)
    db.commit()

    logger.info("Turma excluída : %s", turma_id)
    return True


def set_speakers(db: Session, turma_id: uuid.UUID, data: TurmaSpeakersAssign) -> list[SpeakerResponse]:
    """Substitui os palestrantes da turma pelos informados (duplicados ignorados)."""
    if db.get(Turma, turma_id) is None:
        raise ValueError("Turma não encontrada.")

    speaker_ids = list(dict.fromkeys(data.speaker_ids))
    if speaker_ids:
        found = set(db.execute(
            select(Speaker.id).where(Speaker.id.in_(speaker_ids))
        ).scalars().all())
        missing = [sid for sid in speaker_ids if sid not in found]
        if missing:
            raise ValueError(f"Palestrante não encontrado : {missing[0]}")

    db.execute(delete(TurmaSpeaker).where(TurmaSpeaker.turma_id == turma_id))
    if speaker_ids:
        db.bulk_insert_mappings(TurmaSpeaker, [
            {"turma_id": turma_id, "speaker_id": sid}
            for sid in speaker_ids
        ])
    db.commit()
    return _get_speakers(db, turma_id)


def set_asset(db: Session, turma_id: uuid.UUID, field: str, url: str) -> Optional[TurmaDisponivel]:
    """Grava a URL de um arquivo enviado (foto_capa ou pdf_url)."""
    turma = db.get(Turma, turma_id)
    if turma is None:
        return None
    setattr(turma, field, url)
    db.commit()
    db.refresh(turma)
    return _to_disponivel(db, turma)


def refresh_statuses(db: Session, today: Optional[dt.date] = None) -> tuple[int, int]:
    """
    Persiste o ciclo de vida : turmas cuja data já passou → CONCLUIDA,
    turmas ABERTA com prazo vencido → ENCERRADA.
    Retorna (concluídas, encerradas).
    """
    today = today or dt.date.today()

    concluded = db.execute(
        update(Turma)
        .where(Turma.status != CONCLUIDA, Turma.data < today)
        .values(status=CONCLUIDA)
        .execution_options(synchronize_session=False)
    ).rowcount

    closed = db.execute(
        update(Turma)
        .where(
            Turma.status == ABERTA,
            func.coalesce(Turma.data_limite_inscricao, Turma.data) < today,
        )
        .values(status=ENCERRADA)
        .execution_options(synchronize_session=False)
    ).rowcount

    db.commit()
    return concluded or 0, closed or 0


def _get_speakers(db: Session, turma_id: uuid.UUID) -> list[SpeakerResponse]:
    speakers = db.execute(
        select(Speaker)
        .join(TurmaSpeaker, TurmaSpeaker.speaker_id == Speaker.id)
        .where(TurmaSpeaker.turma_id == turma_id)
        .order_by(Speaker.name)
    ).scalars().all()
    return [SpeakerResponse.model_validate(s) for s in speakers]


def _build_disponivel(turma: Turma, campus_nome: str, total: int, today: Optional[dt.date] = None) -> TurmaDisponivel:
    availability = availability_from_count(turma, total, today)
    return TurmaDisponivel(
        **TurmaResponse.model_validate(turma).model_dump(),
        campus_nome=campus_nome,
        vagas_disponiveis=availability.vagas_disponiveis,
        total_inscritos=total,
        status_efetivo=availability.effective_status,
        encerrada=availability.is_closed,
    )


def _to_disponivel(db: Session, turma: Turma, today: Optional[dt.date] = None) -> TurmaDisponivel:
    """Constrói a resposta com o nome do campus e a contagem de inscrições ativas."""
    campus_nome = db.execute(
        select(Campus.nome).where(Campus.id == turma.campus_id)
    ).scalar() or ""

    return _build_disponivel(turma, campus_nome, count_active(db, turma.id), today)
