"""
EmailLog model — automated e-mail attempts.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from raceman.models.enums import EmailLogStatus, EmailLogType


class EmailLogQuerySet(models.QuerySet):

    def sent(self):
        return self.filter(status=EmailLogStatus.SENT)

    def sent_since(self, since):
        return self.sent().filter(timestamp__gte=since)


class EmailLog(models.Model):
    """
    One automated e-mail attempt.

    When tied to a participant or a cart, the reverse relation email_logs
    on it is that participant's or cart's e-mail history.
    """

    recipient_email = models.EmailField(db_index=True, verbose_name=_('Destinatário'))
    type = models.CharField(max_length=30, choices=EmailLogType.choices, verbose_name=_('Tipo'))
    status = models.CharField(
        max_length=10,
        choices=EmailLogStatus.choices,
        default=EmailLogStatus.SENT,
        verbose_name=_('Status'),
    )
    error = models.TextField(blank=True, default='', verbose_name=_('Erro'))
    participant = models.ForeignKey(
        'raceman.Participant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='email_logs',
        verbose_name=_('Inscrição'),
    )
    abandoned_cart = models.ForeignKey(
        'raceman.AbandonedCart',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='email_logs',
        verbose_name=_('Carrinho'),
    )
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Data/Hora'))

    objects = EmailLogQuerySet.as_manager()

    class Meta:
        verbose_name = _('Envio de e-mail')
        verbose_name_plural = _('Envios de e-mail')
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['recipient_email', 'status', 'timestamp'], name='raceman_log_recipient_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.type} → {self.recipient_email} ({self.status})"
