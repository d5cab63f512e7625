"""
Combo model — catalog bundle of modalities sold together.
"""

from django.db import models
from django.db.models import Sum
from django.utils.translation import gettext_lazy as _


class Combo(models.Model):
    """Bundle of (modality, quantity) pairs for one race, with its own price."""

    race = models.ForeignKey(
        'raceman.Race',
        on_delete=models.CASCADE,
        related_name='combos',
        verbose_name=_('Evento'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Nome'))
    description = models.TextField(blank=True, default='', verbose_name=_('Descrição'))
    price = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_('Preço'))
    active = models.BooleanField(default=True, verbose_name=_('Ativo'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Combo')
        verbose_name_plural = _('Combos')
        ordering = ['race', 'name']

    @property
    def total_quantity(self) -> int:
        """Registration slots in the bundle."""
        return self.items.aggregate(t=Sum('quantity'))['t'] or 0

    def __str__(self) -> str:
        return self.name


class ComboItem(models.Model):
    combo = models.ForeignKey(
        Combo,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Combo'),
    )
    modality = models.CharField(max_length=50, verbose_name=_('Modalidade'))
    quantity = models.PositiveIntegerField(default=1, verbose_name=_('Quantidade'))

    class Meta:
        verbose_name = _('Item do combo')
        verbose_name_plural = _('Itens do combo')

    def __str__(self) -> str:
        return f"{self.quantity}x {self.modality}"
