"""
Testes de presenças (marcação idempotente) e avaliações pós-turma.
"""

import uuid
import datetime as dt

import pytest
from sqlalchemy import func, select

from turmas_api.models.presenca import Presenca
from turmas_api.schemas.avaliacao import AvaliacaoCreate
from turmas_api.schemas.presenca import PresencaMark
from turmas_api.services.attendance_service import get_turma_attendance, mark_attendance, was_present
from turmas_api.services.evaluation_service import (
    MSG_JA_AVALIOU,
    get_status,
    get_turma_evaluations,
    submit_evaluation,
)

TODAY = dt.date.today()
ONTEM = TODAY - dt.timedelta(days=1)


def test_marcar_presenca_sobrescreve(db, make_turma, make_user):
    turma_id = make_turma()
    user_id = make_user()
    gestor_id = make_user(role="GESTOR", nome="Carlos Gestor")

    mark_attendance(db, turma_id, PresencaMark(user_id=user_id, presente=True), marcado_por=gestor_id)
    result = mark_attendance(db, turma_id, PresencaMark(user_id=user_id, presente=False), marcado_por=gestor_id)

    assert result.presente is False
    assert db.execute(select(func.count()).select_from(Presenca)).scalar() == 1
    assert was_present(db, turma_id, user_id) is False

    [linha] = get_turma_attendance(db, turma_id)
    assert linha.marcador_nome == "Carlos Gestor"


def test_marcar_presenca_turma_inexistente(db, make_user):
    with pytest.raises(ValueError, match="Turma não encontrada"):
        mark_attendance(db, uuid.uuid4(), PresencaMark(user_id=make_user(), presente=True), marcado_por=uuid.uuid4())


def test_marcar_presenca_usuario_inexistente(db, make_turma):
    with pytest.raises(ValueError, match="Usuário não encontrado"):
        mark_attendance(db, make_turma(), PresencaMark(user_id=uuid.uuid4(), presente=True), marcado_por=uuid.uuid4())


def test_avaliacao_sucesso(db, make_turma, make_user, make_presenca):
    turma_id = make_turma(data=ONTEM)
    user_id = make_user(nome="Beatriz Lima")
    make_presenca(turma_id, user_id, presente=True)

    result = submit_evaluation(
        db, turma_id, user_id,
        AvaliacaoCreate(nps=9, respostas={"conteudo": 5}, comentario="  Muito boa  "),
    )

    assert result.nps == 9
    assert result.comentario == "Muito boa"
    assert get_turma_evaluations(db, turma_id)[0].nome == "Beatriz Lima"


def test_avaliacao_sem_presenca_recusada(db, make_turma, make_user, make_presenca):
    turma_id = make_turma(data=ONTEM)
    ausente = make_user()
    make_presenca(turma_id, ausente, presente=False)

    with pytest.raises(PermissionError):
        submit_evaluation(db, turma_id, ausente, AvaliacaoCreate(nps=8))
    with pytest.raises(PermissionError):
        submit_evaluation(db, turma_id, make_user(), AvaliacaoCreate(nps=8))


def test_avaliacao_turma_futura_recusada(db, make_turma, make_user, make_presenca):
    turma_id = make_turma(data=TODAY + dt.timedelta(days=2))
    user_id = make_user()
    make_presenca(turma_id, user_id)

    with pytest.raises(ValueError, match="após a realização"):
        submit_evaluation(db, turma_id, user_id, AvaliacaoCreate(nps=7))


def test_avaliacao_turma_concluida_aceita(db, make_turma, make_user, make_presenca):
    turma_id = make_turma(data=TODAY + dt.timedelta(days=2), status="CONCLUIDA")
    user_id = make_user()
    make_presenca(turma_id, user_id)

    assert submit_evaluation(db, turma_id, user_id, AvaliacaoCreate(nps=10)).nps == 10


def test_avaliacao_duplicada_recusada(db, make_turma, make_user, make_presenca):
    turma_id = make_turma(data=ONTEM)
    user_id = make_user()
    make_presenca(turma_id, user_id)
    submit_evaluation(db, turma_id, user_id, AvaliacaoCreate(nps=6))

    with pytest.raises(ValueError, match=MSG_JA_AVALIOU):
        submit_evaluation(db, turma_id, user_id, AvaliacaoCreate(nps=10))


def test_nps_fora_do_intervalo():
    with pytest.raises(ValueError, match="NPS"):
        AvaliacaoCreate(nps=11)


def test_status_da_avaliacao(db, make_turma, make_user, make_presenca):
    turma_id = make_turma(data=ONTEM)
    user_id = make_user()

    status = get_status(db, turma_id, user_id)
    assert (status.pode_avaliar, status.ja_avaliou) == (False, False)

    make_presenca(turma_id, user_id)
    assert get_status(db, turma_id, user_id).pode_avaliar is True

    submit_evaluation(db, turma_id, user_id, AvaliacaoCreate(nps=8))
    status = get_status(db, turma_id, user_id)
    assert (status.pode_avaliar, status.ja_avaliou) == (False, True)


def test_status_turma_inexistente(db, make_user):
    assert get_status(db, uuid.uuid4(), make_user()) is None
