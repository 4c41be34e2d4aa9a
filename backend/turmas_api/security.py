"""
Dependências FastAPI de autenticação e autorização.

Não há usuário global : cada rota protegida recebe uma UserSession explícita,
carregada do banco a partir do token Bearer da requisição.
"""

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.user import UserSession
from turmas_api.services import auth_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def get_current_session(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> UserSession:
    """Valida o token e carrega a sessão. 401 se o token é inválido ou o usuário não existe mais."""
    credentials_error = HTTPException(
        status_code=401,
        detail="Sessão inválida ou expirada.",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = auth_service.decode_access_token(token)
    if user_id is None:
        raise credentials_error

    session = auth_service.load_session(db, user_id)
    if session is None:
        raise credentials_error
    return session


def require_gestor(session: UserSession = Depends(get_current_session)) -> UserSession:
    """Restringe a rota aos gestores."""
    if not session.is_gestor:
        raise HTTPException(status_code=403, detail="Acesso restrito a gestores.")
    return session
