"""
Identification reminders — e-mail buyers whose slots are still anonymous.

One e-mail per order, addressed to the order's responsible person.
"""

import logging
from datetime import timedelta

from django.utils import timezone

from raceman.conf import raceman_settings
from raceman.emails import send_email
from raceman.exceptions import RegistrationError
from raceman.models.email_log import EmailLog
from raceman.models.enums import EmailLogStatus, EmailLogType
from raceman.models.participant import Participant
from raceman.models.race import Race

logger = logging.getLogger('raceman')

EMAIL_TYPE = 'identificationPending'


def _group_by_order(participants) -> list[tuple]:
    """[(order, [participants])] preserving first-seen order."""
    groups = {}
    for participant in participants:
        groups.setdefault(participant.order_id, (participant.order, []))[1].append(participant)
    return list(groups.values())


def _reminder_data(order, participants) -> dict:
    race = participants[0].race
    return {
        'customerName': order.responsible_name,
        'raceName': race.name or 'seu evento',
        'pendingCount': len(participants),
        'dashboardUrl': f"{raceman_settings.SITE_URL}/dashboard/subscriptions",
    }


class IdentificationReminders:
    """Reminder e-mails for PENDENTE_IDENTIFICACAO slots."""

    @classmethod
    def remind_pending(cls, race_id) -> tuple[int, int]:
        """
        Send one reminder per order with pending slots in the race (admin action).

        Delivery failures are logged and counted, never raised.

        Returns:
            (sent, failed)
        """
        race = Race.objects.filter(pk=getattr(race_id, 'pk', race_id)).first()
        if race is None:
            raise RegistrationError('RACE_NOT_FOUND', race_id=getattr(race_id, 'pk', race_id))

        pending = Participant.objects.for_race(race).pending().select_related('order', 'race')

        sent = failed = 0
        for order, participants in _group_by_order(pending):
            try:
                send_email(order.responsible_email, EMAIL_TYPE, _reminder_data(order, participants))
            except Exception as e:
                failed += 1
                logger.warning(
                    "raceman.reminder.failed",
                    extra={"order": order.order_number, "error": str(e)},
                )
                continue
            sent += 1

        logger.info(
            "raceman.reminder.race",
            extra={"race": race.pk, "sent": sent, "failed": failed},
        )
        return sent, failed

    @classmethod
    def send_pending_reminders(cls, now=None, dry_run: bool = False) -> tuple[int, int]:
        """
        Periodic job: remind buyers of old pending slots, within rate limits.

        An order is skipped when any of its slots got a reminder within
        PENDING_MIN_HOURS_BETWEEN_EMAILS, or when its recipient already
        reached MAX_EMAILS_PER_DAY sent e-mails today. Each attempt is
        recorded as one EmailLog per slot.

        Args:
            now: Reference time (None = timezone.now())
            dry_run: Count what would be sent without sending or logging

        Returns:
            (sent, skipped) order counts; failed sends count as neither
        """
        now = now or timezone.now()
        created_before = now - timedelta(hours=raceman_settings.PENDING_MIN_HOURS_SINCE_CREATION)
        recent_since = now - timedelta(hours=raceman_settings.PENDING_MIN_HOURS_BETWEEN_EMAILS)
        day_start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
        max_per_day = raceman_settings.MAX_EMAILS_PER_DAY

        pending = Participant.objects.pending().filter(
            created_at__lte=created_before,
        ).select_related('order', 'race').order_by('created_at', 'pk')

        sent = skipped = 0
        for order, participants in _group_by_order(pending):
            recipient = order.responsible_email

            recently_reminded = EmailLog.objects.sent_since(recent_since).filter(
                participant__in=participants,
                type=EmailLogType.PENDING_REGISTRATION,
            ).exists()
            if recently_reminded:
                skipped += 1
                continue

            sent_today = EmailLog.objects.sent_since(day_start).filter(recipient_email=recipient).count()
            if sent_today >= max_per_day:
                skipped += 1
                continue

            if dry_run:
                sent += 1
                continue

            try:
                send_email(recipient, EMAIL_TYPE, _reminder_data(order, participants))
            except Exception as e:
                logger.warning(
                    "raceman.reminder.failed",
                    extra={"order": order.order_number, "error": str(e)},
                )
                EmailLog.objects.bulk_create([
                    EmailLog(
                        recipient_email=recipient,
                        type=EmailLogType.PENDING_REGISTRATION,
                        status=EmailLogStatus.FAILED,
                        error=str(e),
                        participant=participant,
                        timestamp=now,
                    )
                    for participant in participants
                ])
                continue

            EmailLog.objects.bulk_create([
                EmailLog(
                    recipient_email=recipient,
                    type=EmailLogType.PENDING_REGISTRATION,
                    status=EmailLogStatus.SENT,
                    participant=participant,
                    timestamp=now,
                )
                for participant in participants
            ])
            sent += 1

        logger.info(
            "raceman.reminder.job",
            extra={"sent": sent, "skipped": skipped, "dry_run": dry_run},
        )
        return sent, skipped
