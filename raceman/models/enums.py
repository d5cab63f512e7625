"""
Enums for Raceman models.

Stored values are the wire contract shared with the storefront
(Portuguese status strings); member names are English.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class RaceStatus(models.TextChoices):
    """Race publication status."""
    DRAFT = 'draft', _('Rascunho')
    PUBLISHED = 'published', _('Publicado')
    CLOSED = 'closed', _('Encerrado')


class ParticipantStatus(models.TextChoices):
    """
    Participant identification lifecycle.

    PENDING ──identify()──► IDENTIFIED ──mark_validated()──► VALIDATED
                              │  ▲
                              └──┘ identify() (edit)

    Any status ──block()──► BLOCKED
    """
    PENDING = 'PENDENTE_IDENTIFICACAO', _('Pendente')
    IDENTIFIED = 'IDENTIFICADA', _('Identificado')
    VALIDATED = 'VALIDADA', _('Validado')
    BLOCKED = 'BLOQUEADA', _('Bloqueado')


# Eligible for kit pickup and bib assignment
ELIGIBLE_STATUSES = (ParticipantStatus.IDENTIFIED, ParticipantStatus.VALIDATED)

# identify() is accepted from these
IDENTIFIABLE_STATUSES = (ParticipantStatus.PENDING, ParticipantStatus.IDENTIFIED)


class KitStatus(models.TextChoices):
    """Counter pickup status for a participant's kit."""
    PENDING = 'pendente', _('Pendente')
    WITHDRAWN = 'retirado', _('Retirado')


class DeliveryMethod(models.TextChoices):
    PICKUP = 'pickup', _('Retirada')
    HOME = 'home', _('Entrega em domicílio')


class KitDeliveryStatus(models.TextChoices):
    """
    Home delivery lifecycle (orders with delivery_method=home).

    PENDING ──print──► PRINTED
    PENDING|PRINTED|NOT_ATTENDED|PROBLEM ──outcome──► DELIVERED | NOT_ATTENDED | PROBLEM

    DELIVERED is terminal.
    """
    PENDING = 'Pendente', _('Pendente')
    PRINTED = 'Impresso', _('Impresso')
    DELIVERED = 'Entregue', _('Entregue')
    NOT_ATTENDED = 'NaoAtendido', _('Não Atendido')
    PROBLEM = 'Problema', _('Problema')


# Outcomes a delivery agent can record (DeliveryAttempt.status)
DELIVERY_OUTCOMES = (
    KitDeliveryStatus.DELIVERED,
    KitDeliveryStatus.NOT_ATTENDED,
    KitDeliveryStatus.PROBLEM,
)


class ValidationStatus(models.TextChoices):
    """Kit validator classification."""
    VALID = 'VALIDO', _('Válido')
    WITHDRAWN = 'RETIRADO', _('Retirado')
    INVALID = 'INVALIDO', _('Inválido')


class DocumentType(models.TextChoices):
    CPF = 'CPF', _('CPF')
    RG = 'RG', _('RG')
    PASSPORT = 'Passaporte', _('Passaporte')


class Gender(models.TextChoices):
    MALE = 'Masculino', _('Masculino')
    FEMALE = 'Feminino', _('Feminino')
    OTHER = 'Outro', _('Outro')


class DiscountType(models.TextChoices):
    PERCENTAGE = 'percentage', _('Percentual')
    FIXED = 'fixed', _('Valor fixo')


class EmailLogType(models.TextChoices):
    ABANDONED_CART = 'abandonedCart', _('Carrinho abandonado')
    PENDING_REGISTRATION = 'pendingRegistration', _('Identificação pendente')


class EmailLogStatus(models.TextChoices):
    SENT = 'sent', _('Enviado')
    FAILED = 'failed', _('Falhou')


class DeliveryScanStatus(models.TextChoices):
    """Outcome of scanning an order number at the delivery screen."""
    NOT_FOUND = 'NOT_FOUND', _('Pedido não encontrado neste evento')
    NOT_HOME_DELIVERY = 'NOT_HOME_DELIVERY', _('Entrega não aplicável')
    ALREADY_DELIVERED = 'ALREADY_DELIVERED', _('Kit já foi entregue')
    DELIVERED = 'DELIVERED', _('Entrega confirmada')


class CartStatus(models.TextChoices):
    """
    Storefront cart lifecycle.

    ACTIVE ──create_order(cart_id=...)──► CONVERTED
    Only ACTIVE carts receive abandoned-cart reminders.
    """
    ACTIVE = 'ACTIVE', _('Ativo')
    ABANDONED = 'ABANDONED', _('Abandonado')
    CONVERTED = 'CONVERTED', _('Convertido')
    ARCHIVED = 'ARCHIVED', _('Arquivado')


class CartStep(models.TextChoices):
    """Last checkout step the buyer reached."""
    CART = 'CART', _('Carrinho')
    IDENTIFICATION = 'IDENTIFICATION', _('Identificação')
    DELIVERY = 'DELIVERY', _('Entrega')
    PAYMENT = 'PAYMENT', _('Pagamento')
