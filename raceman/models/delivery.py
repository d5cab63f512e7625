"""
DeliveryAttempt model — append-only log of home delivery outcomes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.models.enums import DELIVERY_OUTCOMES, KitDeliveryStatus


class DeliveryAttempt(models.Model):
    """
    Immutable record of a delivery outcome.

    Rules:
    - NEVER update() or delete()
    - A later outcome is a new attempt, the log is only extended
    """

    order = models.ForeignKey(
        'raceman.Order',
        on_delete=models.PROTECT,
        related_name='delivery_attempts',
        verbose_name=_('Pedido'),
    )
    agent = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name=_('Entregador'),
    )
    agent_name = models.CharField(max_length=200, verbose_name=_('Nome do entregador'))
    status = models.CharField(
        max_length=20,
        choices=[(s.value, s.label) for s in DELIVERY_OUTCOMES],
        verbose_name=_('Resultado'),
    )
    observation = models.TextField(blank=True, default='', verbose_name=_('Observação'))
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    class Meta:
        verbose_name = _('Tentativa de entrega')
        verbose_name_plural = _('Tentativas de entrega')
        ordering = ['timestamp', 'pk']
        indexes = [
            models.Index(fields=['order', 'timestamp'], name='raceman_att_order_ts_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError(
                "Tentativas de entrega são imutáveis. "
                "Registre uma nova tentativa."
            )
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Tentativas de entrega são imutáveis.")

    def __str__(self) -> str:
        label = KitDeliveryStatus(self.status).label
        return f"{self.agent_name}: {label} ({self.timestamp:%d/%m/%y %H:%M})"
