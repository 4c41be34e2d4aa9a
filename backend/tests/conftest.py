"""
Configuração compartilhada por todos os testes.

- client / gestor_client / anon_client : TestClient com o banco mockado (MagicMock)
  e a sessão do usuário substituída, sem conexão real ao PostgreSQL.
- db : sessão sobre um SQLite em arquivo temporário, para os testes de serviço
  que precisam de transações reais (inscrição atômica, concorrência).
"""

import os

os.environ.setdefault("SCHEDULER_ENABLED", "false")

import datetime as dt
import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

import turmas_api.models  # noqa: F401
from turmas_api.database import Base, get_db
from turmas_api.main import app
from turmas_api.models.campus import Campus
from turmas_api.models.presenca import Presenca
from turmas_api.models.turma import Turma
from turmas_api.models.user import User
from turmas_api.schemas.user import UserSession
from turmas_api.security import get_current_session


def make_session(role: str = "PROFESSOR", user_id=None) -> UserSession:
    return UserSession(
        user_id=user_id or uuid.uuid4(),
        nome="Ana Souza" if role == "PROFESSOR" else "Carlos Gestor",
        email="ana@escola.br" if role == "PROFESSOR" else "gestor@escola.br",
        role=role,
    )


@pytest.fixture
def professor_session():
    return make_session("PROFESSOR")


@pytest.fixture
def gestor_session():
    return make_session("GESTOR")


@pytest.fixture
def mock_db():
    return MagicMock()


def _test_client(mock_db, session=None):
    app.dependency_overrides[get_db] = lambda: mock_db
    if session is not None:
        app.dependency_overrides[get_current_session] = lambda: session
    return TestClient(app)


@pytest.fixture
def client(mock_db, professor_session):
    """Cliente HTTP autenticado como professor, banco mockado."""
    with _test_client(mock_db, professor_session) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def gestor_client(mock_db, gestor_session):
    """Cliente HTTP autenticado como gestor, banco mockado."""
    with _test_client(mock_db, gestor_session) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(mock_db):
    """Cliente HTTP sem token."""
    with _test_client(mock_db) as c:
        yield c
    app.dependency_overrides.clear()


# --- SQLite ---

@pytest.fixture
def engine(tmp_path):
    """
    SQLite em arquivo com BEGIN IMMEDIATE : cada transação trava o banco para escrita
    desde o início, o que serializa as transações concorrentes como o FOR UPDATE no PostgreSQL.
    As chaves estrangeiras são verificadas, como no PostgreSQL.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'turmas.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )

    @event.listens_for(engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def _persist(db, obj) -> uuid.UUID:
    # id lido antes do commit : evita um refresh que abriria nova transação
    db.add(obj)
    db.flush()
    obj_id = obj.id
    db.commit()
    return obj_id


@pytest.fixture
def make_campus(db):
    def _make(nome: str = None) -> uuid.UUID:
        return _persist(db, Campus(nome=nome or f"Campus {uuid.uuid4().hex[:6]}"))
    return _make


@pytest.fixture
def make_user(db):
    def _make(role: str = "PROFESSOR", nome: str = None) -> uuid.UUID:
        suffix = uuid.uuid4().hex[:8]
        return _persist(db, User(
            nome=nome or f"Professor {suffix}",
            email=f"prof.{suffix}@escola.br",
            telefone="51999990000",
            niveis_ensino=["Fundamental"],
            role=role,
            password_hash="not-a-real-hash",
        ))
    return _make


@pytest.fixture
def make_turma(db, make_campus):
    def _make(campus_id=None, **kwargs) -> uuid.UUID:
        values = {
            "nome": "Turma de IA - Manhã",
            "data": dt.date.today() + dt.timedelta(days=30),
            "hora_inicio": dt.time(9, 0),
            "hora_fim": dt.time(12, 0),
            "local": "Auditório",
            "capacidade": 30,
            "status": "ABERTA",
        }
        values.update(kwargs)
        return _persist(db, Turma(campus_id=campus_id or make_campus(), **values))
    return _make


@pytest.fixture
def make_presenca(db):
    def _make(turma_id, user_id, presente: bool = True) -> uuid.UUID:
        return _persist(db, Presenca(turma_id=turma_id, user_id=user_id, presente=presente))
    return _make
