"""
Modelo SQLAlchemy para as presenças (uma linha por usuário e turma, sobrescrita a cada marcação).
"""

import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from turmas_api.database import Base


class Presenca(Base):
    __tablename__ = "presencas"
    __table_args__ = (
        UniqueConstraint("turma_id", "user_id", name="uq_presencas_turma_user"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    turma_id = Column(UUID(as_uuid=True), ForeignKey("turmas.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    presente = Column(Boolean, nullable=False, default=False)
    marcado_por = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    marcado_em = Column(DateTime, server_default=func.now(), nullable=False)
