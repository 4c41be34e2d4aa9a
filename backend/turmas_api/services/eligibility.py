"""
Verificação de elegibilidade para inscrição.

As mesmas regras, na mesma ordem, servem à verificação consultiva (habilitar o
botão "Inscrever-se") e à inscrição atômica, que as reaplica dentro da transação.
A verificação consultiva pode estar desatualizada : só a inscrição atômica decide.
"""

from turmas_api.schemas.turma import Elegibilidade
from turmas_api.services.availability import Availability

MSG_TURMA_FECHADA = "Turma não está aberta para inscrições."
MSG_JA_INSCRITO = "Você já está inscrito nesta turma."
MSG_TURMA_LOTADA = "Turma lotada. Não há vagas disponíveis."
MSG_INSCRICAO_OK = "Inscrição realizada com sucesso!"
MSG_USUARIO_INEXISTENTE = "Usuário não encontrado."
MSG_ERRO_INSCRICAO = "Erro ao processar inscrição. Tente novamente."


def check_eligibility(availability: Availability, already_enrolled: bool) -> Elegibilidade:
    """
    Ordem das verificações :
    1. Turma aberta (status e prazo)
    2. Usuário ainda não inscrito
    3. Vaga disponível
    """
    motivo = None
    if availability.is_closed:
        motivo = MSG_TURMA_FECHADA
    elif already_enrolled:
        motivo = MSG_JA_INSCRITO
    elif availability.vagas_disponiveis <= 0:
        motivo = MSG_TURMA_LOTADA

    return Elegibilidade(
        pode_inscrever=motivo is None,
        motivo=motivo,
        ja_inscrito=already_enrolled,
        vagas_disponiveis=availability.vagas_disponiveis,
        status_efetivo=availability.effective_status,
    )
