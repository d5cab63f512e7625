"""
Participant model — one purchased registration slot.
"""

import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.models.enums import ELIGIBLE_STATUSES, KitStatus, ParticipantStatus


class ParticipantQuerySet(models.QuerySet):
    """Custom QuerySet for Participant with lifecycle filters."""

    def for_race(self, race):
        return self.filter(race=race)

    def pending(self):
        return self.filter(status=ParticipantStatus.PENDING)

    def eligible(self):
        """Identified or validated: may pick up a kit and receive a bib."""
        return self.filter(status__in=ELIGIBLE_STATUSES)

    def with_bib(self):
        return self.filter(bib_number__isnull=False)

    def withdrawn(self):
        return self.filter(kit_status=KitStatus.WITHDRAWN)


class Participant(models.Model):
    """
    Registration slot, bound to an athlete once identified.

    The primary key is the kit pickup QR payload.

    Invariants:
    - bib_number, once set, never changes (enforced on save)
    - bib_number is unique within the race
    - identification edits never reset bib_number or kit_status
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    race = models.ForeignKey(
        'raceman.Race',
        on_delete=models.PROTECT,
        related_name='participants',
        verbose_name=_('Evento'),
    )
    order = models.ForeignKey(
        'raceman.Order',
        on_delete=models.CASCADE,
        related_name='participants',
        verbose_name=_('Pedido'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='registrations',
        verbose_name=_('Responsável'),
    )
    modality = models.CharField(
        max_length=50,
        verbose_name=_('Modalidade'),
        help_text=_('Igual ao campo distance de uma modalidade do evento'),
    )

    status = models.CharField(
        max_length=30,
        choices=ParticipantStatus.choices,
        default=ParticipantStatus.PENDING,
        db_index=True,
        verbose_name=_('Status'),
    )
    user_profile = models.JSONField(
        null=True,
        blank=True,
        verbose_name=_('Dados do atleta'),
        help_text=_('Cópia dos dados no momento da identificação'),
    )
    bib_number = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Número de peito'),
    )

    kit_status = models.CharField(
        max_length=20,
        choices=KitStatus.choices,
        default=KitStatus.PENDING,
        db_index=True,
        verbose_name=_('Status do kit'),
    )
    shirt_size = models.CharField(max_length=10, blank=True, default='', verbose_name=_('Camiseta'))
    kit_type = models.CharField(max_length=50, blank=True, default='', verbose_name=_('Tipo de kit'))
    kit_withdrawn_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Retirado em'))
    kit_withdrawn_by = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Retirado por'),
        help_text=_('Preenchido quando quem retira não é o atleta'),
    )
    kit_observation = models.TextField(blank=True, default='', verbose_name=_('Observação da retirada'))

    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ParticipantQuerySet.as_manager()

    class Meta:
        verbose_name = _('Inscrição')
        verbose_name_plural = _('Inscrições')
        ordering = ['created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['race', 'bib_number'],
                condition=Q(bib_number__isnull=False),
                name='unique_bib_number_per_race',
            ),
        ]
        indexes = [
            models.Index(fields=['race', 'status'], name='raceman_ptc_race_status_idx'),
            models.Index(fields=['race', 'modality'], name='raceman_ptc_race_modality_idx'),
        ]

    def save(self, *args, **kwargs):
        """
        Save participant, refusing to rewrite an assigned bib number.

        The stored value is read back from the database, so instances
        loaded before bib generation cannot clear or replace the bib.
        Saves restricted to update_fields without bib_number skip the check.
        """
        update_fields = kwargs.get('update_fields')
        if not self._state.adding and (update_fields is None or 'bib_number' in update_fields):
            stored = Participant.objects.filter(pk=self.pk).values_list('bib_number', flat=True).first()
            if stored is not None and self.bib_number != stored:
                raise ValueError(
                    "Número de peito é imutável após a geração "
                    f"({stored} → {self.bib_number})."
                )
        super().save(*args, **kwargs)

    @property
    def full_name(self) -> str:
        return (self.user_profile or {}).get('full_name', '')

    @property
    def is_eligible(self) -> bool:
        return self.status in ELIGIBLE_STATUSES

    @property
    def kit_withdrawn(self) -> bool:
        return self.kit_status == KitStatus.WITHDRAWN

    def __str__(self) -> str:
        name = self.full_name or _('Pendente')
        bib = f"#{self.bib_number} " if self.bib_number else ""
        return f"{bib}{name} ({self.modality})"
