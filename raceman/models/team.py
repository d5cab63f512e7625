"""
TeamMember model — athletes a user registers on behalf of.
"""

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.cpf import is_valid_cpf
from raceman.models.enums import DocumentType, Gender

# Fields copied onto Participant.user_profile at identification
PROFILE_FIELDS = (
    'full_name',
    'birth_date',
    'document_type',
    'document_number',
    'gender',
    'email',
    'mobile_phone',
)


class TeamMember(models.Model):
    """Saved athlete profile owned by a user (family, team, club)."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='team_members',
        verbose_name=_('Usuário'),
    )
    full_name = models.CharField(max_length=200, verbose_name=_('Nome completo'))
    birth_date = models.DateField(null=True, blank=True, verbose_name=_('Nascimento'))
    document_type = models.CharField(
        max_length=20,
        choices=DocumentType.choices,
        default=DocumentType.CPF,
        verbose_name=_('Tipo de documento'),
    )
    document_number = models.CharField(max_length=30, verbose_name=_('Documento'))
    gender = models.CharField(max_length=20, choices=Gender.choices, verbose_name=_('Gênero'))
    email = models.EmailField(verbose_name=_('E-mail'))
    mobile_phone = models.CharField(max_length=30, verbose_name=_('Celular'))
    shirt_size = models.CharField(max_length=10, blank=True, default='', verbose_name=_('Camiseta'))
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = _('Membro da equipe')
        verbose_name_plural = _('Membros da equipe')
        ordering = ['owner', 'full_name']

    def clean(self):
        if self.document_type == DocumentType.CPF and not is_valid_cpf(self.document_number):
            raise ValidationError({'document_number': _('CPF inválido.')})

    def as_profile(self) -> dict:
        """Snapshot stored on a participant when this member is assigned."""
        profile = {field: getattr(self, field) for field in PROFILE_FIELDS}
        if profile['birth_date'] is not None:
            profile['birth_date'] = profile['birth_date'].isoformat()
        return profile

    def __str__(self) -> str:
        return self.full_name
