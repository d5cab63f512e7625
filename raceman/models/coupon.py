"""
Coupon model — discount codes applied at checkout.
"""

from decimal import Decimal

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.exceptions import RegistrationError
from raceman.models.enums import DiscountType


class Coupon(models.Model):
    """Discount coupon with optional validity window and usage cap."""

    title = models.CharField(max_length=200, verbose_name=_('Título'))
    code = models.CharField(max_length=50, unique=True, verbose_name=_('Código'))
    discount_type = models.CharField(
        max_length=20,
        choices=DiscountType.choices,
        default=DiscountType.PERCENTAGE,
        verbose_name=_('Tipo de desconto'),
    )
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_('Valor'))
    start_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Início'))
    end_date = models.DateTimeField(null=True, blank=True, verbose_name=_('Fim'))
    max_uses = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Limite de usos'),
        help_text=_('Vazio = ilimitado'),
    )
    current_uses = models.PositiveIntegerField(default=0, verbose_name=_('Usos'))
    is_active = models.BooleanField(default=True, verbose_name=_('Ativo'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Cupom')
        verbose_name_plural = _('Cupons')
        ordering = ['-created_at']

    def check_usable(self, now=None) -> None:
        """
        Raise if the coupon cannot be applied right now.

        Raises:
            RegistrationError('COUPON_INACTIVE' | 'COUPON_NOT_STARTED' |
                              'COUPON_EXPIRED' | 'COUPON_EXHAUSTED')
        """
        now = now or timezone.now()
        if not self.is_active:
            raise RegistrationError('COUPON_INACTIVE', code=self.code)
        if self.start_date and now < self.start_date:
            raise RegistrationError('COUPON_NOT_STARTED', code=self.code)
        if self.end_date and now > self.end_date:
            raise RegistrationError('COUPON_EXPIRED', code=self.code)
        if self.max_uses is not None and self.current_uses >= self.max_uses:
            raise RegistrationError('COUPON_EXHAUSTED', code=self.code)

    def discount_for(self, amount: Decimal) -> Decimal:
        """Discount on the given amount, never more than the amount itself."""
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = (amount * self.discount_value / Decimal('100')).quantize(Decimal('0.01'))
        else:
            discount = self.discount_value
        return min(discount, amount)

    def __str__(self) -> str:
        return self.code
