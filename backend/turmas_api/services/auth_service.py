"""
Serviço de autenticação : hash de senha, emissão e leitura de tokens JWT,
carregamento da sessão explícita do usuário.
"""

import uuid
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from turmas_api.config import settings
from turmas_api.models.user import User
from turmas_api.schemas.user import SignupRequest, TokenResponse, UserResponse, UserSession

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: uuid.UUID, role: str, expires_minutes: Optional[int] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[uuid.UUID]:
    """Retorna o id do usuário contido no token, ou None se o token é inválido ou expirou."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return uuid.UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        return None


def signup(db: Session, data: SignupRequest) -> UserResponse:
    """Cria uma conta de PROFESSOR. Levanta ValueError se o email já está em uso."""
    user = User(
        nome=data.nome,
        email=data.email.lower(),
        telefone=data.telefone,
        campus_id=data.campus_id,
        niveis_ensino=data.niveis_ensino,
        role="PROFESSOR",
        password_hash=hash_password(data.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValueError("Já existe uma conta com este email.")
    db.refresh(user)

    logger.info("Conta criada : %s (%s)", user.id, user.email)
    return UserResponse.model_validate(user)


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = db.execute(
        select(User).where(func.lower(User.email) == email.strip().lower())
    ).scalar()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def login(db: Session, email: str, password: str) -> Optional[TokenResponse]:
    """Retorna o token e o perfil, ou None se as credenciais são inválidas."""
    user = authenticate(db, email, password)
    if user is None:
        logger.warning("Falha de login para %s", email)
        return None
    return TokenResponse(
        access_token=create_access_token(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


def load_session(db: Session, user_id: uuid.UUID) -> Optional[UserSession]:
    """
    Carrega a sessão a partir do banco (e não do token), para que uma mudança
    de perfil tenha efeito já na próxima requisição.
    """
    user = db.get(User, user_id)
    if user is None:
        return None
    return UserSession(user_id=user.id, nome=user.nome, email=user.email, role=user.role)
