"""
AbandonedCart model — storefront cart snapshot for recovery e-mails.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.models.enums import CartStatus, CartStep


class AbandonedCartQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status=CartStatus.ACTIVE)

    def idle_since(self, before):
        """Active carts with no activity after `before`."""
        return self.active().filter(last_activity_at__lte=before)


class AbandonedCart(models.Model):
    """
    Cart kept by the storefront while the buyer checks out.

    The storefront writes items and last_activity_at on every step;
    create_order(cart_id=...) marks it CONVERTED. The reverse relation
    cart.email_logs is its reminder history.

    items: [{"raceId", "raceName", "distance", "quantity", "price"}, ...]
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='abandoned_carts',
        verbose_name=_('Usuário'),
    )
    customer_email = models.EmailField(db_index=True, verbose_name=_('E-mail'))
    customer_name = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Nome'))
    items = models.JSONField(default=list, blank=True, verbose_name=_('Itens'))
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Total'),
    )
    coupon_code = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Cupom'))
    status = models.CharField(
        max_length=20,
        choices=CartStatus.choices,
        default=CartStatus.ACTIVE,
        verbose_name=_('Status'),
    )
    last_step = models.CharField(
        max_length=20,
        choices=CartStep.choices,
        default=CartStep.CART,
        verbose_name=_('Última etapa'),
    )
    created_at = models.DateTimeField(default=timezone.now)
    last_activity_at = models.DateTimeField(default=timezone.now, verbose_name=_('Última atividade'))

    objects = AbandonedCartQuerySet.as_manager()

    class Meta:
        verbose_name = _('Carrinho abandonado')
        verbose_name_plural = _('Carrinhos abandonados')
        ordering = ['-last_activity_at']
        indexes = [
            models.Index(fields=['status', 'last_activity_at'], name='raceman_cart_status_idx'),
        ]

    @property
    def race_name(self) -> str:
        """Race of the first item, as shown in the reminder."""
        first = self.items[0] if self.items else {}
        return first.get('raceName') or 'seu evento'

    def __str__(self) -> str:
        return f"{self.customer_email} ({self.status})"
