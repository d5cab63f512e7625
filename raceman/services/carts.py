"""
Abandoned-cart reminders — nudge buyers who left checkout unfinished.
"""

import logging
from datetime import timedelta

from django.utils import timezone

from raceman.conf import raceman_settings
from raceman.emails import send_email
from raceman.models.cart import AbandonedCart
from raceman.models.email_log import EmailLog
from raceman.models.enums import EmailLogStatus, EmailLogType

logger = logging.getLogger('raceman')

EMAIL_TYPE = 'abandonedCart'


def _cart_data(cart) -> dict:
    return {
        'customerName': cart.customer_name or 'Atleta',
        'raceName': cart.race_name,
        'checkoutUrl': f"{raceman_settings.SITE_URL}/cart",
    }


class CartReminders:
    """Reminder e-mails for ACTIVE carts that went idle."""

    @classmethod
    def send_abandoned_cart_reminders(cls, now=None, dry_run: bool = False) -> tuple[int, int]:
        """
        Periodic job: remind owners of idle carts, within rate limits.

        A cart is eligible when ACTIVE and idle for at least
        ABANDONED_CART_MIN_HOURS_SINCE_UPDATE. It is skipped when it got a
        reminder within ABANDONED_CART_MIN_HOURS_BETWEEN_EMAILS, or when its
        recipient already reached MAX_EMAILS_PER_DAY sent e-mails today.

        Args:
            now: Reference time (None = timezone.now())
            dry_run: Count what would be sent without sending or logging

        Returns:
            (sent, skipped) cart counts; failed sends count as neither
        """
        now = now or timezone.now()
        idle_before = now - timedelta(hours=raceman_settings.ABANDONED_CART_MIN_HOURS_SINCE_UPDATE)
        recent_since = now - timedelta(hours=raceman_settings.ABANDONED_CART_MIN_HOURS_BETWEEN_EMAILS)
        day_start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
        max_per_day = raceman_settings.MAX_EMAILS_PER_DAY

        carts = AbandonedCart.objects.idle_since(idle_before).order_by('last_activity_at', 'pk')

        sent = skipped = 0
        for cart in carts:
            recipient = cart.customer_email

            recently_reminded = cart.email_logs.sent_since(recent_since).filter(
                type=EmailLogType.ABANDONED_CART,
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
                send_email(recipient, EMAIL_TYPE, _cart_data(cart))
            except Exception as e:
                logger.warning(
                    "raceman.cart_reminder.failed",
                    extra={"cart": cart.pk, "error": str(e)},
                )
                EmailLog.objects.create(
                    recipient_email=recipient,
                    type=EmailLogType.ABANDONED_CART,
                    status=EmailLogStatus.FAILED,
                    error=str(e),
                    abandoned_cart=cart,
                    timestamp=now,
                )
                continue

            EmailLog.objects.create(
                recipient_email=recipient,
                type=EmailLogType.ABANDONED_CART,
                status=EmailLogStatus.SENT,
                abandoned_cart=cart,
                timestamp=now,
            )
            sent += 1

        logger.info(
            "raceman.cart_reminder.job",
            extra={"sent": sent, "skipped": skipped, "dry_run": dry_run},
        )
        return sent, skipped
