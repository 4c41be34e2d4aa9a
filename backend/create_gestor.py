"""
Script utilitário : promove um usuário já cadastrado ao perfil GESTOR.

Uso : python create_gestor.py email@escola.br
"""

import sys

from turmas_api.database import SessionLocal
from turmas_api.services.user_service import promote_by_email


def main(email: str) -> int:
    db = SessionLocal()
    try:
        user = promote_by_email(db, email)
    finally:
        db.close()

    if user is None:
        print(f"Usuário '{email}' não encontrado. Ele precisa criar a conta antes.")
        return 1

    print(f"O usuário '{user.email}' agora é GESTOR. Um novo login atualiza a sessão.")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Uso : python create_gestor.py email@escola.br")
        sys.exit(2)
    sys.exit(main(sys.argv[1].strip()))
