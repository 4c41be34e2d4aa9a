"""
Router de autenticação : cadastro, login e recarga da sessão.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from turmas_api.database import get_db
from turmas_api.schemas.user import SignupRequest, TokenResponse, UserResponse, UserSession
from turmas_api.security import get_current_session
from turmas_api.services import auth_service, user_service

router = APIRouter(prefix="/api/v1/auth", tags=["Autenticação"])


@router.post("/signup", response_model=UserResponse, status_code=201, summary="Criar conta de professor")
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    try:
        return auth_service.signup(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/login", response_model=TokenResponse, summary="Entrar")
def login(form: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """Login OAuth2 (formulário username/password) : username é o email."""
    token = auth_service.login(db, form.username, form.password)
    if token is None:
        raise HTTPException(
            status_code=401,
            detail="Email ou senha inválidos.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


@router.get("/me", response_model=UserResponse, summary="Recarregar a sessão")
def me(session: UserSession = Depends(get_current_session), db: Session = Depends(get_db)):
    """Retorna o perfil atualizado do usuário da sessão."""
    user = user_service.get_user(db, session.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Sessão inválida ou expirada.")
    return user
