"""
Order model — one checkout transaction, possibly several registrations.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.models.enums import DeliveryMethod, KitDeliveryStatus


class Order(models.Model):
    """
    Checkout transaction.

    kit_delivery_status is only meaningful for home delivery; pickup
    orders keep it empty. Status changes go through the registration
    service, which also appends to delivery_attempts.
    """

    order_number = models.CharField(
        max_length=20,
        unique=True,
        verbose_name=_('Número do pedido'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='race_orders',
        verbose_name=_('Usuário'),
    )
    race = models.ForeignKey(
        'raceman.Race',
        on_delete=models.PROTECT,
        related_name='orders',
        verbose_name=_('Evento'),
    )

    order_status = models.CharField(max_length=30, default='PAGO', verbose_name=_('Status do pedido'))
    order_status_detail = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Detalhe'))

    responsible_name = models.CharField(max_length=200, verbose_name=_('Responsável'))
    responsible_email = models.EmailField(verbose_name=_('E-mail do responsável'))
    responsible_phone = models.CharField(max_length=30, blank=True, default='', verbose_name=_('Telefone'))

    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Total'),
    )

    delivery_method = models.CharField(
        max_length=10,
        choices=DeliveryMethod.choices,
        default=DeliveryMethod.PICKUP,
        verbose_name=_('Forma de entrega'),
    )
    delivery_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Taxa de entrega'),
    )
    delivery_address = models.TextField(blank=True, default='', verbose_name=_('Endereço de entrega'))
    kit_delivery_status = models.CharField(
        max_length=20,
        choices=KitDeliveryStatus.choices,
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Status da entrega'),
    )
    first_printed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Etiqueta impressa em'))

    coupon = models.ForeignKey(
        'raceman.Coupon',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
        verbose_name=_('Cupom'),
    )
    coupon_code = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Código do cupom'))
    discount_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Desconto'),
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Pedido')
        verbose_name_plural = _('Pedidos')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['race', 'delivery_method'], name='raceman_ord_race_delivery_idx'),
        ]

    @property
    def is_home_delivery(self) -> bool:
        return self.delivery_method == DeliveryMethod.HOME

    @property
    def current_delivery_status(self) -> str | None:
        """Delivery status, reading an unset home-delivery status as Pendente."""
        if not self.is_home_delivery:
            return None
        return self.kit_delivery_status or KitDeliveryStatus.PENDING

    @property
    def participant_ids(self) -> list:
        return list(self.participants.values_list('pk', flat=True))

    def __str__(self) -> str:
        return f"Pedido #{self.order_number}"
