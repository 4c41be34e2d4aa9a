"""
Modelo SQLAlchemy para as avaliações pós-turma (imutáveis após o envio).
"""

import uuid
from sqlalchemy import JSON, CheckConstraint, Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from turmas_api.database import Base


class Avaliacao(Base):
    __tablename__ = "avaliacoes"
    __table_args__ = (
        UniqueConstraint("turma_id", "user_id", name="uq_avaliacoes_turma_user"),
        CheckConstraint("nps >= 0 AND nps <= 10", name="ck_avaliacoes_nps"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    turma_id = Column(UUID(as_uuid=True), ForeignKey("turmas.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    respostas = Column(JSON, nullable=False, default=dict)
    nps = Column(Integer, nullable=False)
    comentario = Column(Text, nullable=True)
    enviada_em = Column(DateTime, server_default=func.now(), nullable=False)
