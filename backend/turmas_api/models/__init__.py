# Importa todos os modelos para registrar suas tabelas em Base.metadata
# antes que o SQLAlchemy tente resolver as chaves estrangeiras entre modelos.
# Sem este import, FKs como inscricoes.user_id → users.id falham com
# NoReferencedTableError se user.py não tiver sido carregado antes.

from turmas_api.models.campus import Campus  # noqa: F401  (deve preceder user e turma)
from turmas_api.models.user import User  # noqa: F401
from turmas_api.models.speaker import Speaker  # noqa: F401
from turmas_api.models.turma import Turma, TurmaSpeaker  # noqa: F401
from turmas_api.models.inscricao import Inscricao  # noqa: F401
from turmas_api.models.presenca import Presenca  # noqa: F401
from turmas_api.models.avaliacao import Avaliacao  # noqa: F401
