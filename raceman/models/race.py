"""
Race model — event definition, modalities and price lots.
"""

from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.models.enums import RaceStatus


class Race(models.Model):
    """
    Race event.

    Status lifecycle: draft → published → closed.
    A published race is also treated as closed once its date has passed
    (see effective_status); an explicit draft never closes by date.
    """

    name = models.CharField(max_length=200, verbose_name=_('Nome'))
    date = models.DateField(db_index=True, verbose_name=_('Data'))
    location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Local'))
    description = models.TextField(blank=True, default='', verbose_name=_('Descrição'))

    capacity = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Vagas'),
        help_text=_('Vazio = ilimitado'),
    )
    status = models.CharField(
        max_length=20,
        choices=RaceStatus.choices,
        default=RaceStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )

    # Kit pickup / delivery
    kit_pickup_enabled = models.BooleanField(default=True, verbose_name=_('Retirada de kit'))
    kit_pickup_location = models.CharField(max_length=200, blank=True, default='', verbose_name=_('Local de retirada'))
    kit_pickup_details = models.TextField(blank=True, default='', verbose_name=_('Detalhes da retirada'))
    kit_delivery_enabled = models.BooleanField(default=False, verbose_name=_('Entrega em domicílio'))
    kit_delivery_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Taxa de entrega'),
    )
    kit_items = models.JSONField(
        default=list,
        blank=True,
        verbose_name=_('Itens do kit'),
        help_text=_('Lista de {"name": ..., "brand": ...}'),
    )
    show_kit_items = models.BooleanField(default=False, verbose_name=_('Exibir itens do kit'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Evento')
        verbose_name_plural = _('Eventos')
        ordering = ['-date']

    @property
    def effective_status(self) -> str:
        """Stored status, with published races closing after their date."""
        if self.status == RaceStatus.DRAFT:
            return RaceStatus.DRAFT
        if self.status == RaceStatus.CLOSED or self.date < timezone.localdate():
            return RaceStatus.CLOSED
        return self.status

    @property
    def is_closed(self) -> bool:
        return self.effective_status == RaceStatus.CLOSED

    @property
    def is_open_for_registration(self) -> bool:
        return self.effective_status == RaceStatus.PUBLISHED

    def __str__(self) -> str:
        return f"{self.name} ({self.date})"


class RaceOption(models.Model):
    """
    Modality of a race (5K, 10K, ...).

    bib_prefix is required before bib numbers can be generated and
    must be unique among the options of one race.
    """

    race = models.ForeignKey(
        Race,
        on_delete=models.CASCADE,
        related_name='options',
        verbose_name=_('Evento'),
    )
    distance = models.CharField(
        max_length=50,
        verbose_name=_('Modalidade'),
        help_text=_('Ex: 5K, 10K, Caminhada'),
    )
    bib_prefix = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Prefixo do número de peito'),
    )
    position = models.PositiveSmallIntegerField(default=0, verbose_name=_('Ordem'))

    class Meta:
        verbose_name = _('Modalidade')
        verbose_name_plural = _('Modalidades')
        ordering = ['race', 'position', 'pk']
        constraints = [
            models.UniqueConstraint(
                fields=['race', 'distance'],
                name='unique_race_option_distance',
            ),
            models.UniqueConstraint(
                fields=['race', 'bib_prefix'],
                condition=Q(bib_prefix__isnull=False),
                name='unique_bib_prefix_per_race',
            ),
        ]

    def clean(self):
        """Freeze the prefix once the race has numbered participants."""
        if self._state.adding or not self.race_id:
            return
        stored = RaceOption.objects.filter(pk=self.pk).values_list('bib_prefix', flat=True).first()
        if stored == self.bib_prefix:
            return
        if self.race.participants.filter(bib_number__isnull=False).exists():
            raise ValidationError({
                'bib_prefix': _('Os números de peito já foram gerados; o prefixo não pode mudar.'),
            })

    def current_lot(self, on: date | None = None):
        """Lot whose validity window contains the given date (None = today)."""
        target = on or timezone.localdate()
        return self.lots.filter(
            start_date__lte=target,
            end_date__gte=target,
        ).order_by('start_date', 'pk').first()

    def __str__(self) -> str:
        prefix = f" [{self.bib_prefix}]" if self.bib_prefix is not None else ""
        return f"{self.distance}{prefix}"


class Lot(models.Model):
    """Price lot with a validity window."""

    option = models.ForeignKey(
        RaceOption,
        on_delete=models.CASCADE,
        related_name='lots',
        verbose_name=_('Modalidade'),
    )
    name = models.CharField(max_length=100, verbose_name=_('Nome'))
    price = models.DecimalField(max_digits=10, decimal_places=2, verbose_name=_('Preço'))
    start_date = models.DateField(verbose_name=_('Início'))
    end_date = models.DateField(verbose_name=_('Fim'))

    class Meta:
        verbose_name = _('Lote')
        verbose_name_plural = _('Lotes')
        ordering = ['option', 'start_date']

    def __str__(self) -> str:
        return f"{self.name}: R$ {self.price}"
