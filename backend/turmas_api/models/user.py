"""
Modelo SQLAlchemy para os usuários (professores e gestores).
"""

import uuid
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, func
from sqlalchemy.dialects.postgresql import UUID

from turmas_api.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    nome = Column(String(150), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    telefone = Column(String(30), nullable=False, default="")
    campus_id = Column(UUID(as_uuid=True), ForeignKey("campus.id", ondelete="SET NULL"), nullable=True)
    niveis_ensino = Column(JSON, nullable=False, default=list)
    role = Column(String(20), nullable=False, default="PROFESSOR")  # PROFESSOR, GESTOR
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
