"""
Delivery lifecycle — home delivery status of orders.

    Pendente ──mark_printed──► Impresso
    Pendente|Impresso|NaoAtendido|Problema ──outcome──► Entregue | NaoAtendido | Problema

Entregue is terminal. Every outcome appends a DeliveryAttempt.
"""

import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone
from django.utils.http import urlencode

from raceman import signals
from raceman.conf import raceman_settings
from raceman.exceptions import RegistrationError
from raceman.models.delivery import DeliveryAttempt
from raceman.models.enums import DELIVERY_OUTCOMES, DeliveryScanStatus, KitDeliveryStatus
from raceman.models.order import Order

logger = logging.getLogger('raceman')


def _pk(value):
    return getattr(value, 'pk', value)


def _lock_order(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=_pk(order_id))
    except (Order.DoesNotExist, ValueError):
        raise RegistrationError('ORDER_NOT_FOUND', order_id=_pk(order_id)) from None


def _agent_name(agent, agent_name: str) -> str:
    if agent_name:
        return agent_name
    if agent is not None and hasattr(agent, 'get_full_name'):
        name = agent.get_full_name()
        if name:
            return name
    return raceman_settings.DEFAULT_AGENT_NAME


def _record_outcome(order: Order, status: str, observation: str, agent, agent_name: str) -> DeliveryAttempt:
    """Set the order status and append the attempt. Caller holds the row lock."""
    previous = order.current_delivery_status
    order.kit_delivery_status = status
    order.save(update_fields=['kit_delivery_status', 'updated_at'])

    attempt = DeliveryAttempt.objects.create(
        order=order,
        agent=agent,
        agent_name=_agent_name(agent, agent_name),
        status=status,
        observation=observation,
    )
    logger.info(
        "raceman.delivery.outcome",
        extra={
            "order": order.order_number,
            "previous": previous,
            "status": status,
            "agent": attempt.agent_name,
        },
    )
    signals.send_on_commit(
        signals.delivery_status_changed,
        sender=Order,
        order=order,
        previous=previous,
        status=status,
    )
    return attempt


@dataclass(frozen=True)
class DeliveryScanResult:
    """Result of validate_delivery()."""

    status: str
    order: Order | None = None

    @property
    def delivered(self) -> bool:
        return self.status == DeliveryScanStatus.DELIVERED

    @property
    def message(self) -> str:
        return str(DeliveryScanStatus(self.status).label)


class DeliveryLifecycle:
    """Order kit delivery transitions."""

    @classmethod
    def update_delivery_status(cls, order_id, new_status: str, observation: str = '',
                               agent=None, agent_name: str = '') -> Order:
        """
        Record a delivery outcome.

        Args:
            order_id: Order or its pk
            new_status: Entregue, NaoAtendido or Problema
            observation: Required (min. MIN_OBSERVATION_LENGTH chars)
                unless new_status is Entregue
            agent: User recording the outcome
            agent_name: Display name (defaults to agent's name, then DEFAULT_AGENT_NAME)

        Raises:
            RegistrationError('INVALID_TRANSITION'): new_status is not an outcome
            RegistrationError('OBSERVATION_REQUIRED'): Observation too short
            RegistrationError('ORDER_NOT_FOUND' | 'NOT_HOME_DELIVERY')
            RegistrationError('TERMINAL_STATE'): Order already Entregue
        """
        if new_status not in DELIVERY_OUTCOMES:
            raise RegistrationError(
                'INVALID_TRANSITION',
                requested=new_status,
                expected=list(DELIVERY_OUTCOMES),
            )

        observation = (observation or '').strip()
        min_length = raceman_settings.MIN_OBSERVATION_LENGTH
        if new_status != KitDeliveryStatus.DELIVERED and len(observation) < min_length:
            raise RegistrationError(
                'OBSERVATION_REQUIRED',
                f'A observação é obrigatória e deve ter no mínimo {min_length} caracteres',
                min_length=min_length,
            )

        with transaction.atomic():
            order = _lock_order(order_id)

            if not order.is_home_delivery:
                raise RegistrationError('NOT_HOME_DELIVERY', order=order.order_number)
            if order.current_delivery_status == KitDeliveryStatus.DELIVERED:
                raise RegistrationError(
                    'TERMINAL_STATE',
                    order=order.order_number,
                    current=KitDeliveryStatus.DELIVERED,
                )

            _record_outcome(order, new_status, observation, agent, agent_name)
            return order

    @classmethod
    def mark_printed(cls, order_id) -> Order:
        """
        Mark the delivery label as printed.

        Transition: Pendente -> Impresso, stamping first_printed_at.
        Reprinting in any other status changes nothing.
        """
        with transaction.atomic():
            order = _lock_order(order_id)

            if not order.is_home_delivery:
                raise RegistrationError('NOT_HOME_DELIVERY', order=order.order_number)

            if order.current_delivery_status == KitDeliveryStatus.PENDING:
                order.kit_delivery_status = KitDeliveryStatus.PRINTED
                if order.first_printed_at is None:
                    order.first_printed_at = timezone.now()
                order.save(update_fields=['kit_delivery_status', 'first_printed_at', 'updated_at'])
                logger.info(
                    "raceman.delivery.printed",
                    extra={"order": order.order_number},
                )
            return order

    @classmethod
    def label_url(cls, order: Order) -> str:
        """Query-string URL of the printable delivery label."""
        query = urlencode({
            'orderNumber': order.order_number,
            'name': order.responsible_name or '',
            'address': order.delivery_address or 'Endereço não informado',
            'phone': order.responsible_phone or 'N/A',
            'eventName': order.race.name or 'Evento',
            'items': order.participants.count(),
        })
        return f"{raceman_settings.LABEL_PRINT_PATH}?{query}"

    @classmethod
    def validate_delivery(cls, code: str, race_id, agent=None, agent_name: str = '') -> DeliveryScanResult:
        """
        Confirm a delivery by scanning the order number.

        Never raises for a bad scan: the outcome is reported in the result.
        An already delivered order is reported without being touched.
        """
        order_number = (code or '').strip()

        with transaction.atomic():
            order = Order.objects.select_for_update().filter(
                race_id=_pk(race_id),
                order_number=order_number,
            ).first() if order_number else None

            if order is None:
                result = DeliveryScanResult(DeliveryScanStatus.NOT_FOUND)
            elif not order.is_home_delivery:
                result = DeliveryScanResult(DeliveryScanStatus.NOT_HOME_DELIVERY, order)
            elif order.current_delivery_status == KitDeliveryStatus.DELIVERED:
                result = DeliveryScanResult(DeliveryScanStatus.ALREADY_DELIVERED, order)
            else:
                _record_outcome(order, KitDeliveryStatus.DELIVERED, '', agent, agent_name)
                return DeliveryScanResult(DeliveryScanStatus.DELIVERED, order)

        logger.warning(
            "raceman.delivery.scan_rejected",
            extra={"code": order_number, "race": _pk(race_id), "status": result.status},
        )
        return result
