"""
Testes do serviço de inscrições sobre SQLite (transações reais).
Inclui a inscrição concorrente na fronteira da capacidade.
"""

import threading
import uuid
from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from turmas_api.models.inscricao import Inscricao
from turmas_api.services.eligibility import (
    MSG_INSCRICAO_OK,
    MSG_JA_INSCRITO,
    MSG_TURMA_FECHADA,
    MSG_TURMA_LOTADA,
    MSG_USUARIO_INEXISTENTE,
)
from turmas_api.services.enrollment_service import (
    cancel_enrollment,
    count_active,
    enroll,
    get_eligibility,
    get_turma_enrollments,
    get_user_enrollments,
)
from turmas_api.services.turma_service import get_turma

from conftest import make_session


def _inscricao_id(db, turma_id, user_id):
    return db.execute(
        select(Inscricao.id).where(Inscricao.turma_id == turma_id, Inscricao.user_id == user_id)
    ).scalar()


# --- enroll ---

def test_cenario_capacidade_dois(db, make_turma, make_user):
    """capacidade=2 : dois inscritos, terceiro recusado, cancelamento libera a vaga."""
    turma_id = make_turma(capacidade=2)
    u1, u2, u3 = make_user(), make_user(), make_user()

    assert enroll(db, turma_id, u1).success is True
    assert enroll(db, turma_id, u2).success is True
    assert get_turma(db, turma_id).vagas_disponiveis == 0

    result = enroll(db, turma_id, u3)
    assert result.success is False
    assert result.message == MSG_TURMA_LOTADA

    cancel_enrollment(db, _inscricao_id(db, turma_id, u1), make_session(user_id=u1))
    assert get_turma(db, turma_id).vagas_disponiveis == 1

    result = enroll(db, turma_id, u3)
    assert result.success is True
    assert result.message == MSG_INSCRICAO_OK
    assert get_turma(db, turma_id).vagas_disponiveis == 0


def test_enroll_duplicado_recusado(db, make_turma, make_user):
    turma_id = make_turma(capacidade=5)
    user_id = make_user()

    assert enroll(db, turma_id, user_id).success is True
    result = enroll(db, turma_id, user_id)

    assert result.success is False
    assert result.message == MSG_JA_INSCRITO
    assert count_active(db, turma_id) == 1


def test_reinscricao_reativa_a_mesma_linha(db, make_turma, make_user):
    turma_id = make_turma(capacidade=5)
    user_id = make_user()

    enroll(db, turma_id, user_id)
    original_id = _inscricao_id(db, turma_id, user_id)
    cancel_enrollment(db, original_id, make_session(user_id=user_id))
    assert count_active(db, turma_id) == 0

    assert enroll(db, turma_id, user_id).success is True

    rows = db.execute(
        select(Inscricao).where(Inscricao.turma_id == turma_id, Inscricao.user_id == user_id)
    ).scalars().all()
    assert len(rows) == 1
    assert rows[0].id == original_id
    assert rows[0].status == "ATIVA"
    assert count_active(db, turma_id) == 1


def test_enroll_turma_inexistente(db, make_user):
    result = enroll(db, uuid.uuid4(), make_user())
    assert result.success is False
    assert result.message == MSG_TURMA_FECHADA


def test_enroll_usuario_inexistente(db, make_turma):
    """Um user_id desconhecido não é confundido com uma inscrição já existente."""
    turma_id = make_turma()

    result = enroll(db, turma_id, uuid.uuid4())

    assert result.success is False
    assert result.message == MSG_USUARIO_INEXISTENTE
    assert count_active(db, turma_id) == 0


def test_enroll_prazo_vencido_com_status_aberta(db, make_turma, make_user):
    turma_id = make_turma(data_limite_inscricao=date.today() - timedelta(days=1))
    result = enroll(db, turma_id, make_user())
    assert result.success is False
    assert result.message == MSG_TURMA_FECHADA
    assert count_active(db, turma_id) == 0


def test_enroll_turma_encerrada_manualmente(db, make_turma, make_user):
    turma_id = make_turma(status="ENCERRADA")
    result = enroll(db, turma_id, make_user())
    assert result.message == MSG_TURMA_FECHADA


def test_enroll_conflito_de_unicidade_vira_ja_inscrito():
    """Se outra transação inseriu a mesma linha, o commit falha e a resposta é 'já inscrito'."""
    turma = MagicMock(status="ABERTA", capacidade=10, data=date.today() + timedelta(days=5), data_limite_inscricao=None)
    db = MagicMock()
    db.execute.return_value.scalar.side_effect = [turma, None, 0]
    db.commit.side_effect = IntegrityError("duplicate", None, None)

    result = enroll(db, uuid.uuid4(), uuid.uuid4())

    assert result.success is False
    assert result.message == MSG_JA_INSCRITO
    db.rollback.assert_called_once()


def test_enroll_concorrente_nunca_excede_a_capacidade(db, session_factory, make_turma, make_user):
    """N inscrições simultâneas para R vagas : exatamente R sucessos, os demais 'lotada'."""
    capacidade = 3
    turma_id = make_turma(capacidade=capacidade)
    user_ids = [make_user() for _ in range(8)]

    barrier = threading.Barrier(len(user_ids))
    results = []
    lock = threading.Lock()

    def worker(user_id):
        session = session_factory()
        try:
            barrier.wait()
            result = enroll(session, turma_id, user_id)
        finally:
            session.close()
        with lock:
            results.append(result)

    threads = [threading.Thread(target=worker, args=(uid,)) for uid in user_ids]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == len(user_ids)
    assert sum(1 for r in results if r.success) == capacidade
    assert all(r.message == MSG_TURMA_LOTADA for r in results if not r.success)
    assert count_active(db, turma_id) == capacidade


def test_enroll_concorrente_mesmo_usuario(db, session_factory, make_turma, make_user):
    """Duplo clique : duas chamadas simultâneas do mesmo usuário criam uma única inscrição."""
    turma_id = make_turma(capacidade=10)
    user_id = make_user()
    barrier = threading.Barrier(2)
    results = []

    def worker():
        session = session_factory()
        try:
            barrier.wait()
            results.append(enroll(session, turma_id, user_id))
        finally:
            session.close()

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(r.success for r in results) == [False, True]
    assert count_active(db, turma_id) == 1


# --- cancel_enrollment ---

def test_cancel_por_outro_professor_proibido(db, make_turma, make_user):
    turma_id = make_turma()
    owner, other = make_user(), make_user()
    enroll(db, turma_id, owner)

    with pytest.raises(PermissionError):
        cancel_enrollment(db, _inscricao_id(db, turma_id, owner), make_session(user_id=other))
    assert count_active(db, turma_id) == 1


def test_cancel_por_gestor_permitido(db, make_turma, make_user):
    turma_id = make_turma()
    owner = make_user()
    enroll(db, turma_id, owner)

    result = cancel_enrollment(db, _inscricao_id(db, turma_id, owner), make_session("GESTOR"))
    assert result.status == "CANCELADA"


def test_cancel_ja_cancelada_nao_altera(db, make_turma, make_user):
    turma_id = make_turma()
    owner = make_user()
    enroll(db, turma_id, owner)
    inscricao_id = _inscricao_id(db, turma_id, owner)
    session = make_session(user_id=owner)

    cancel_enrollment(db, inscricao_id, session)
    result = cancel_enrollment(db, inscricao_id, session)
    assert result.status == "CANCELADA"


def test_cancel_inexistente(db):
    with pytest.raises(ValueError, match="não encontrada"):
        cancel_enrollment(db, uuid.uuid4(), make_session())


# --- Consultas ---

def test_eligibility_do_usuario(db, make_turma, make_user):
    turma_id = make_turma(capacidade=1)
    user_id = make_user()

    assert get_eligibility(db, turma_id, user_id).pode_inscrever is True
    enroll(db, turma_id, user_id)

    result = get_eligibility(db, turma_id, user_id)
    assert result.pode_inscrever is False
    assert result.ja_inscrito is True
    assert result.motivo == MSG_JA_INSCRITO


def test_eligibility_turma_inexistente(db, make_user):
    assert get_eligibility(db, uuid.uuid4(), make_user()) is None


def test_user_enrollments_com_dados_da_turma(db, make_turma, make_user, make_campus, make_presenca):
    campus_id = make_campus("Campus Centro")
    proxima = make_turma(campus_id=campus_id, data=date.today() + timedelta(days=3), local="Sala 1")
    depois = make_turma(campus_id=campus_id, data=date.today() + timedelta(days=10), local="Sala 2")
    user_id = make_user()
    enroll(db, depois, user_id)
    enroll(db, proxima, user_id)
    make_presenca(proxima, user_id, presente=True)

    result = get_user_enrollments(db, user_id)

    assert [r.turma_id for r in result] == [proxima, depois]
    assert result[0].campus_nome == "Campus Centro"
    assert result[0].local == "Sala 1"
    assert result[0].status == "ATIVA"
    assert result[0].presente is True
    assert result[1].presente is None
    assert result[1].avaliada is False


def test_turma_enrollments_com_usuario(db, make_turma, make_user):
    turma_id = make_turma()
    user_id = make_user(nome="Beatriz Lima")
    enroll(db, turma_id, user_id)

    result = get_turma_enrollments(db, turma_id)
    assert len(result) == 1
    assert result[0].user.nome == "Beatriz Lima"
    assert result[0].status == "ATIVA"


def test_user_enrollments_vagas_por_turma(db, make_turma, make_user):
    """O status efetivo de cada linha usa a contagem de inscrições ativas da própria turma."""
    cheia = make_turma(capacidade=1, data=date.today() + timedelta(days=2))
    livre = make_turma(capacidade=5, data=date.today() + timedelta(days=4))
    user_id, outro = make_user(), make_user()
    enroll(db, cheia, user_id)
    enroll(db, livre, user_id)
    enroll(db, livre, outro)

    result = get_user_enrollments(db, user_id)

    assert [r.turma_id for r in result] == [cheia, livre]
    assert all(r.status_efetivo == "ABERTA" for r in result)
