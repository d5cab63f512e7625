"""
Exceptions for Raceman.

All errors are RegistrationError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class RegistrationError(Exception):
    """
    Structured exception for registration, bib and kit operations.

    Usage:
        try:
            registration.update_delivery_status(order.pk, 'Problema', obs)
        except RegistrationError as e:
            if e.code == 'OBSERVATION_REQUIRED':
                print(f"Mínimo de {e.data['min_length']} caracteres")

    Codes by family:
        INVALID_TRANSITION      status change not permitted from current state
        TERMINAL_STATE          order already delivered (Entregue)
        DUPLICATE_ASSIGNMENT    same team member on two identification slots
        MISSING_PREFIX, PREFIX_CONFLICT, ALREADY_GENERATED,
        NOTHING_TO_GENERATE     bib generation preconditions
        NOT_FOUND, INELIGIBLE,
        ALREADY_CLAIMED         kit withdrawal

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INVALID_TRANSITION': 'Transição de status não permitida',
        'TERMINAL_STATE': 'Pedido já entregue; o status não pode mais ser alterado',
        'DUPLICATE_ASSIGNMENT': 'O mesmo atleta foi atribuído a mais de uma inscrição',
        'MISSING_PREFIX': 'Modalidade sem prefixo de número de peito definido',
        'PREFIX_CONFLICT': 'Múltiplas modalidades usam o mesmo prefixo',
        'ALREADY_GENERATED': 'Os números de peito já foram gerados para este evento',
        'NOTHING_TO_GENERATE': 'Não há atletas identificados para gerar números',
        'SEQUENCE_OVERFLOW': 'Modalidade excede a capacidade da numeração',
        'NOT_FOUND': 'Código não encontrado neste evento',
        'INELIGIBLE': 'Pagamento pendente ou inscrição bloqueada',
        'ALREADY_CLAIMED': 'Kit já retirado',
        'PARTICIPANT_NOT_FOUND': 'Inscrição não encontrada',
        'ORDER_NOT_FOUND': 'Pedido não encontrado',
        'RACE_NOT_FOUND': 'Evento não encontrado',
        'TEAM_MEMBER_NOT_FOUND': 'Membro da equipe não encontrado',
        'OBSERVATION_REQUIRED': 'A observação é obrigatória e deve ter no mínimo 10 caracteres',
        'NOT_HOME_DELIVERY': 'Este pedido não é para entrega em domicílio',
        'INVALID_PROFILE': 'Dados do atleta incompletos',
        'RACE_UNAVAILABLE': 'Inscrições encerradas para este evento',
        'RACE_FULL': 'Não há vagas suficientes para este evento',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser positiva)',
        'OPTION_NOT_FOUND': 'Modalidade não encontrada neste evento',
        'NO_ACTIVE_LOT': 'Nenhum lote ativo para esta modalidade',
        'COUPON_NOT_FOUND': 'Cupom não encontrado',
        'COUPON_INACTIVE': 'Este cupom não está ativo',
        'COUPON_NOT_STARTED': 'Este cupom ainda não é válido',
        'COUPON_EXPIRED': 'Este cupom expirou',
        'COUPON_EXHAUSTED': 'Este cupom atingiu o limite de usos',
        'DELIVERY_UNAVAILABLE': 'Entrega em domicílio indisponível para este evento',
        'INVALID_EMAIL_TYPE': 'Tipo de e-mail inválido',
    }

    def __init__(self, code: str, message: str | None = None, /, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"RegistrationError({self.code!r}, {self.message!r})"

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
