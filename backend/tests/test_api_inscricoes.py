"""
Tests de integração da API de inscrições.
Testam POST /api/v1/turmas/{turma_id}/inscricoes
       POST /api/v1/inscricoes/{inscricao_id}/cancelar
       GET  /api/v1/inscricoes/minhas
       GET  /api/v1/turmas/{turma_id}/inscricoes
"""

import uuid
from datetime import date, datetime, time
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from turmas_api.schemas.inscricao import EnrollmentResult, InscricaoComTurma, InscricaoResponse
from turmas_api.services.eligibility import (
    MSG_ERRO_INSCRICAO,
    MSG_INSCRICAO_OK,
    MSG_TURMA_LOTADA,
)


# --- Helpers ---

def make_inscricao_response(**kwargs) -> InscricaoResponse:
    return InscricaoResponse(
        id=kwargs.get("id", uuid.uuid4()),
        turma_id=kwargs.get("turma_id", uuid.uuid4()),
        user_id=kwargs.get("user_id", uuid.uuid4()),
        status=kwargs.get("status", "ATIVA"),
        created_at=datetime.now(),
        updated_at=datetime.now(),
    )


# ============================================================
# POST /api/v1/turmas/{turma_id}/inscricoes
# ============================================================

def test_inscricao_sucesso(client, professor_session):
    """Inscrição do próprio usuário → 200 com success=True."""
    turma_id = uuid.uuid4()
    with patch("turmas_api.routers.inscricoes.enrollment_service.enroll") as mock:
        mock.return_value = EnrollmentResult(success=True, message=MSG_INSCRICAO_OK)
        response = client.post(f"/api/v1/turmas/{turma_id}/inscricoes")

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": MSG_INSCRICAO_OK}
    _, called_turma, called_user = mock.call_args[0]
    assert called_turma == turma_id
    assert called_user == professor_session.user_id


def test_inscricao_lotada_retorna_resultado(client):
    """Recusa de negócio → 200 com success=False e o motivo."""
    with patch("turmas_api.routers.inscricoes.enrollment_service.enroll") as mock:
        mock.return_value = EnrollmentResult(success=False, message=MSG_TURMA_LOTADA)
        response = client.post(f"/api/v1/turmas/{uuid.uuid4()}/inscricoes")

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["message"] == MSG_TURMA_LOTADA


def test_inscricao_erro_de_banco_retorna_503(client, mock_db):
    """Falha de infraestrutura → 503 com mensagem genérica, sem detalhes internos."""
    with patch("turmas_api.routers.inscricoes.enrollment_service.enroll") as mock:
        mock.side_effect = OperationalError("SELECT ...", {}, Exception("connection lost"))
        response = client.post(f"/api/v1/turmas/{uuid.uuid4()}/inscricoes")

    assert response.status_code == 503
    assert response.json() == {"success": False, "message": MSG_ERRO_INSCRICAO}
    mock_db.rollback.assert_called_once()


def test_professor_nao_inscreve_outro_usuario(client):
    """Professor informando outro user_id → 403."""
    with patch("turmas_api.routers.inscricoes.enrollment_service.enroll") as mock:
        response = client.post(
            f"/api/v1/turmas/{uuid.uuid4()}/inscricoes",
            json={"user_id": str(uuid.uuid4())},
        )

    assert response.status_code == 403
    mock.assert_not_called()


def test_gestor_inscreve_outro_usuario(gestor_client):
    """Gestor pode inscrever um professor informando user_id."""
    user_id = uuid.uuid4()
    with patch("turmas_api.routers.inscricoes.enrollment_service.enroll") as mock:
        mock.return_value = EnrollmentResult(success=True, message=MSG_INSCRICAO_OK)
        response = gestor_client.post(
            f"/api/v1/turmas/{uuid.uuid4()}/inscricoes",
            json={"user_id": str(user_id)},
        )

    assert response.status_code == 200
    assert mock.call_args[0][2] == user_id


def test_inscricao_sem_token_retorna_401(anon_client):
    response = anon_client.post(f"/api/v1/turmas/{uuid.uuid4()}/inscricoes")
    assert response.status_code == 401


def test_inscricao_turma_id_invalido(client):
    response = client.post("/api/v1/turmas/nao-e-uuid/inscricoes")
    assert response.status_code == 422


# ============================================================
# POST /api/v1/inscricoes/{inscricao_id}/cancelar
# ============================================================

def test_cancelar_sucesso(client):
    inscricao_id = uuid.uuid4()
    with patch("turmas_api.routers.inscricoes.enrollment_service.cancel_enrollment") as mock:
        mock.return_value = make_inscricao_response(id=inscricao_id, status="CANCELADA")
        response = client.post(f"/api/v1/inscricoes/{inscricao_id}/cancelar")

    assert response.status_code == 200
    assert response.json()["status"] == "CANCELADA"


def test_cancelar_inscricao_de_outro_retorna_403(client):
    with patch("turmas_api.routers.inscricoes.enrollment_service.cancel_enrollment") as mock:
        mock.side_effect = PermissionError("Você não pode cancelar a inscrição de outro usuário.")
        response = client.post(f"/api/v1/inscricoes/{uuid.uuid4()}/cancelar")

    assert response.status_code == 403


def test_cancelar_inexistente_retorna_404(client):
    with patch("turmas_api.routers.inscricoes.enrollment_service.cancel_enrollment") as mock:
        mock.side_effect = ValueError("Inscrição não encontrada.")
        response = client.post(f"/api/v1/inscricoes/{uuid.uuid4()}/cancelar")

    assert response.status_code == 404
    assert response.json()["detail"] == "Inscrição não encontrada."


# ============================================================
# Listagens
# ============================================================

def test_minhas_inscricoes(client, professor_session):
    item = InscricaoComTurma(
        inscricao_id=uuid.uuid4(),
        turma_id=uuid.uuid4(),
        turma_nome="Turma de IA",
        campus_nome="Campus Centro",
        data=date(2026, 11, 5),
        hora_inicio=time(9, 0),
        hora_fim=time(12, 0),
        local="Auditório",
        status="ATIVA",
        status_turma="ABERTA",
        status_efetivo="ABERTA",
        presente=None,
        avaliada=False,
        created_at=datetime.now(),
    )
    with patch("turmas_api.routers.inscricoes.enrollment_service.get_user_enrollments") as mock:
        mock.return_value = [item]
        response = client.get("/api/v1/inscricoes/minhas")

    assert response.status_code == 200
    assert response.json()[0]["campus_nome"] == "Campus Centro"
    assert mock.call_args[0][1] == professor_session.user_id


def test_inscritos_da_turma_restrito_ao_gestor(client):
    response = client.get(f"/api/v1/turmas/{uuid.uuid4()}/inscricoes")
    assert response.status_code == 403


def test_inscritos_da_turma_gestor(gestor_client):
    with patch("turmas_api.routers.inscricoes.enrollment_service.get_turma_enrollments") as mock:
        mock.return_value = []
        response = gestor_client.get(f"/api/v1/turmas/{uuid.uuid4()}/inscricoes")

    assert response.status_code == 200
    assert response.json() == []
