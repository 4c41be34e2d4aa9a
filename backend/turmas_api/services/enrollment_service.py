"""
Serviço de inscrições : inscrição atômica, cancelamento e consultas.

A inscrição é a única operação que cria ou reativa uma inscrição. Ela trava a
linha da turma (SELECT ... FOR UPDATE) antes de contar as inscrições ativas,
de modo que duas requisições simultâneas para a última vaga sejam serializadas :
a segunda só lê a contagem depois do commit da primeira e recebe "turma lotada".
"""

import uuid
import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from turmas_api.models.avaliacao import Avaliacao
from turmas_api.models.campus import Campus
from turmas_api.models.inscricao import Inscricao
from turmas_api.models.presenca import Presenca
from turmas_api.models.turma import Turma
from turmas_api.models.user import User
from turmas_api.schemas.inscricao import (
    EnrollmentResult,
    InscricaoComTurma,
    InscricaoComUsuario,
    InscricaoResponse,
    UsuarioResumo,
)
from turmas_api.schemas.turma import Elegibilidade
from turmas_api.schemas.user import UserSession
from turmas_api.services.availability import ATIVA, CANCELADA, availability_from_count
from turmas_api.services.eligibility import (
    MSG_INSCRICAO_OK,
    MSG_JA_INSCRITO,
    MSG_TURMA_FECHADA,
    MSG_USUARIO_INEXISTENTE,
    check_eligibility,
)

logger = logging.getLogger(__name__)


def active_counts():
    """Subconsulta (turma_id, total) com o número de inscrições ativas por turma."""
    return (
        select(Inscricao.turma_id, func.count().label("total"))
        .where(Inscricao.status == ATIVA)
        .group_by(Inscricao.turma_id)
        .subquery()
    )


def count_active(db: Session, turma_id: uuid.UUID) -> int:
    return db.execute(
        select(func.count())
        .select_from(Inscricao)
        .where(Inscricao.turma_id == turma_id, Inscricao.status == ATIVA)
    ).scalar() or 0


def enroll(
    db: Session,
    turma_id: uuid.UUID,
    user_id: uuid.UUID,
    today: Optional[date] = None,
) -> EnrollmentResult:
    """
    Inscreve um usuário numa turma, numa única transação.

    Verificações, na ordem :
    1. A turma existe e está efetivamente aberta (status e prazo)
    2. O usuário não tem inscrição ATIVA nesta turma
    3. Ainda há vaga (contagem feita com a turma travada)

    Em caso de sucesso, reativa a inscrição CANCELADA existente ou cria uma nova.
    Falhas de negócio retornam success=False, nunca levantam exceção.
    Erros de infraestrutura (SQLAlchemyError) são propagados ao chamador.
    """
    turma = db.execute(
        select(Turma).where(Turma.id == turma_id).with_for_update()
    ).scalar()

    if turma is None:
        db.rollback()
        logger.warning("Inscrição recusada : turma %s inexistente (usuário %s)", turma_id, user_id)
        return EnrollmentResult(success=False, message=MSG_TURMA_FECHADA)

    if db.get(User, user_id) is None:
        db.rollback()
        logger.warning("Inscrição recusada : usuário %s inexistente (turma %s)", user_id, turma_id)
        return EnrollmentResult(success=False, message=MSG_USUARIO_INEXISTENTE)

    existing = db.execute(
        select(Inscricao).where(
            Inscricao.turma_id == turma_id,
            Inscricao.user_id == user_id,
        )
    ).scalar()

    availability = availability_from_count(turma, count_active(db, turma_id), today)
    eligibility = check_eligibility(
        availability,
        already_enrolled=existing is not None and existing.status == ATIVA,
    )

    if not eligibility.pode_inscrever:
        db.rollback()
        logger.warning(
            "Inscrição recusada : turma %s, usuário %s : %s",
            turma_id, user_id, eligibility.motivo,
        )
        return EnrollmentResult(success=False, message=eligibility.motivo)

    if existing is not None:
        existing.status = ATIVA
        existing.updated_at = datetime.now()
    else:
        db.add(Inscricao(turma_id=turma_id, user_id=user_id, status=ATIVA))

    try:
        db.commit()
    except IntegrityError:
        # Outra transação criou a linha (turma_id, user_id) entre a leitura e o insert
        db.rollback()
        return EnrollmentResult(success=False, message=MSG_JA_INSCRITO)

    logger.info(
        "Inscrição %s : turma %s, usuário %s (%d vagas restantes)",
        "reativada" if existing is not None else "criada",
        turma_id, user_id, availability.vagas_disponiveis - 1,
    )
    return EnrollmentResult(success=True, message=MSG_INSCRICAO_OK)


def cancel_enrollment(db: Session, inscricao_id: uuid.UUID, session: UserSession) -> InscricaoResponse:
    """
    Cancela uma inscrição (ATIVA → CANCELADA), liberando uma vaga.
    Apenas o próprio inscrito ou um gestor pode cancelar.
    Cancelar uma inscrição já cancelada não altera nada.
    """
    inscricao = db.get(Inscricao, inscricao_id)
    if inscricao is None:
        raise ValueError("Inscrição não encontrada.")

    if inscricao.user_id != session.user_id and not session.is_gestor:
        raise PermissionError("Você não pode cancelar a inscrição de outro usuário.")

    if inscricao.status != CANCELADA:
        inscricao.status = CANCELADA
        db.commit()
        db.refresh(inscricao)
        logger.info(
            "Inscrição %s cancelada por %s (turma %s)",
            inscricao.id, session.user_id, inscricao.turma_id,
        )

    return InscricaoResponse.model_validate(inscricao)


def get_eligibility(
    db: Session,
    turma_id: uuid.UUID,
    user_id: uuid.UUID,
    today: Optional[date] = None,
) -> Optional[Elegibilidade]:
    """Verificação consultiva para o usuário atual. Retorna None se a turma não existe."""
    turma = db.get(Turma, turma_id)
    if turma is None:
        return None

    already_enrolled = db.execute(
        select(Inscricao.id).where(
            Inscricao.turma_id == turma_id,
            Inscricao.user_id == user_id,
            Inscricao.status == ATIVA,
        )
    ).scalar() is not None

    availability = availability_from_count(turma, count_active(db, turma_id), today)
    return check_eligibility(availability, already_enrolled)


def get_user_enrollments(
    db: Session,
    user_id: uuid.UUID,
    today: Optional[date] = None,
) -> list[InscricaoComTurma]:
    """
    Retorna as inscrições do usuário (ativas e canceladas) com os dados da turma,
    a presença registrada e se a avaliação já foi enviada. Ordenadas pela data da turma.
    """
    ativos = active_counts()
    rows = db.execute(
        select(Inscricao, Turma, Campus.nome, func.coalesce(ativos.c.total, 0), Presenca.presente, Avaliacao.id)
        .join(Turma, Turma.id == Inscricao.turma_id)
        .join(Campus, Campus.id == Turma.campus_id)
        .outerjoin(ativos, ativos.c.turma_id == Turma.id)
        .outerjoin(
            Presenca,
            (Presenca.turma_id == Inscricao.turma_id) & (Presenca.user_id == Inscricao.user_id),
        )
        .outerjoin(
            Avaliacao,
            (Avaliacao.turma_id == Inscricao.turma_id) & (Avaliacao.user_id == Inscricao.user_id),
        )
        .where(Inscricao.user_id == user_id)
        .order_by(Turma.data, Turma.hora_inicio)
    ).all()

    result = []
    for inscricao, turma, campus_nome, total, presente, avaliacao_id in rows:
        availability = availability_from_count(turma, total or 0, today)
        result.append(InscricaoComTurma(
            inscricao_id=inscricao.id,
            turma_id=turma.id,
            turma_nome=turma.nome,
            campus_nome=campus_nome,
            data=turma.data,
            hora_inicio=turma.hora_inicio,
            hora_fim=turma.hora_fim,
            local=turma.local,
            status=inscricao.status,
            status_turma=turma.status,
            status_efetivo=availability.effective_status,
            presente=presente,
            avaliada=avaliacao_id is not None,
            created_at=inscricao.created_at,
        ))
    return result


def get_turma_enrollments(db: Session, turma_id: uuid.UUID) -> list[InscricaoComUsuario]:
    """Inscrições de uma turma com os dados do inscrito, das mais recentes às mais antigas."""
    rows = db.execute(
        select(Inscricao, User)
        .join(User, User.id == Inscricao.user_id)
        .where(Inscricao.turma_id == turma_id)
        .order_by(Inscricao.created_at.desc())
    ).all()

    return [
        InscricaoComUsuario(
            id=inscricao.id,
            status=inscricao.status,
            created_at=inscricao.created_at,
            user=UsuarioResumo(id=user.id, nome=user.nome, email=user.email, telefone=user.telefone or ""),
        )
        for inscricao, user in rows
    ]
