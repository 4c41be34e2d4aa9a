"""
Modelos SQLAlchemy para as turmas e seus palestrantes.
"""

import uuid
from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, Text, Time, func
from sqlalchemy.dialects.postgresql import UUID

from turmas_api.database import Base


class Turma(Base):
    __tablename__ = "turmas"
    __table_args__ = (
        CheckConstraint("capacidade > 0", name="ck_turmas_capacidade_positiva"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    campus_id = Column(UUID(as_uuid=True), ForeignKey("campus.id", ondelete="CASCADE"), nullable=False)
    nome = Column(String(200), nullable=True)
    sobre = Column(Text, nullable=True)
    pdf_url = Column(String(500), nullable=True)
    foto_capa = Column(String(500), nullable=True)
    palestrantes = Column(Text, nullable=True)             # Texto livre legado
    data = Column(Date, nullable=False)
    data_limite_inscricao = Column(Date, nullable=True)    # Se ausente, vale a própria data
    hora_inicio = Column(Time, nullable=False)
    hora_fim = Column(Time, nullable=False)
    local = Column(String(255), nullable=False)
    capacidade = Column(Integer, nullable=False, default=30)
    status = Column(String(20), nullable=False, default="ABERTA")  # ABERTA, ENCERRADA, CONCLUIDA
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class TurmaSpeaker(Base):
    """Associação turma ↔ palestrantes."""
    __tablename__ = "turma_speakers"

    turma_id = Column(UUID(as_uuid=True), ForeignKey("turmas.id", ondelete="CASCADE"), primary_key=True)
    speaker_id = Column(UUID(as_uuid=True), ForeignKey("speakers.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, server_default=func.now())
