"""
Modelo SQLAlchemy para os campi onde as turmas acontecem.
"""

import uuid
from sqlalchemy import Column, DateTime, Float, String, func
from sqlalchemy.dialects.postgresql import UUID

from turmas_api.database import Base


class Campus(Base):
    __tablename__ = "campus"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    nome = Column(String(150), unique=True, nullable=False)
    endereco = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)    # Usados pela visualização em mapa
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
