"""
Tests for abandoned-cart reminder e-mails.
"""

from datetime import timedelta
from io import StringIO

import pytest
from django.core import mail
from django.core.management import call_command
from django.test import override_settings

from raceman import registration
from raceman.models import AbandonedCart, EmailLog
from raceman.models.enums import CartStatus, EmailLogStatus, EmailLogType
from raceman.tests.test_reminders import later


pytestmark = pytest.mark.django_db


@pytest.fixture
def make_cart(user):
    """Factory for an active cart on the Corrida da Primavera."""
    def _make(**fields):
        defaults = {
            'user': user,
            'customer_email': 'maria@exemplo.com.br',
            'customer_name': 'Maria Souza',
            'items': [{'raceName': 'Corrida da Primavera', 'distance': '5K', 'quantity': 1}],
        }
        defaults.update(fields)
        return AbandonedCart.objects.create(**defaults)
    return _make


class TestAbandonedCart:

    def test_race_name(self, make_cart):
        assert make_cart().race_name == 'Corrida da Primavera'
        assert make_cart(items=[]).race_name == 'seu evento'
        assert make_cart(items=[{'distance': '5K'}]).race_name == 'seu evento'


class TestSendAbandonedCartReminders:
    """Tests for registration.send_abandoned_cart_reminders()."""

    def test_sends_and_logs_on_cart(self, make_cart):
        cart = make_cart()

        sent, skipped = registration.send_abandoned_cart_reminders(now=later(hours=3))

        assert (sent, skipped) == (1, 0)
        assert mail.outbox[0].to == ['maria@exemplo.com.br']
        assert mail.outbox[0].subject == 'Finalize sua inscrição para Corrida da Primavera'
        log = cart.email_logs.get()
        assert log.type == EmailLogType.ABANDONED_CART
        assert log.status == EmailLogStatus.SENT
        assert log.participant is None

    def test_defaults_for_anonymous_cart(self, make_cart):
        make_cart(customer_name='', items=[])

        registration.send_abandoned_cart_reminders(now=later(hours=3))

        html = mail.outbox[0].alternatives[0][0]
        assert 'Olá, <strong>Atleta</strong>' in html
        assert '<strong>seu evento</strong>' in html
        assert 'https://www.exemplo.com.br/cart' in html

    def test_recent_activity_not_reminded(self, make_cart):
        make_cart()

        assert registration.send_abandoned_cart_reminders(now=later(hours=1)) == (0, 0)
        assert mail.outbox == []

    @pytest.mark.parametrize('status', [CartStatus.CONVERTED, CartStatus.ABANDONED, CartStatus.ARCHIVED])
    def test_only_active_carts(self, make_cart, status):
        make_cart(status=status)

        assert registration.send_abandoned_cart_reminders(now=later()) == (0, 0)

    def test_interval_between_reminders(self, make_cart):
        make_cart()
        now = later(hours=3)
        registration.send_abandoned_cart_reminders(now=now)

        assert registration.send_abandoned_cart_reminders(now=now + timedelta(hours=23)) == (0, 1)
        assert registration.send_abandoned_cart_reminders(now=now + timedelta(hours=25)) == (1, 0)
        assert len(mail.outbox) == 2

    @override_settings(RACEMAN={'MAX_EMAILS_PER_DAY': 1})
    def test_daily_cap_shared_with_identification_reminders(self, make_cart):
        """E-mails of any automated type count toward the recipient's cap."""
        make_cart()
        now = later(hours=3)
        EmailLog.objects.create(
            recipient_email='maria@exemplo.com.br',
            type=EmailLogType.PENDING_REGISTRATION,
            timestamp=now,
        )

        assert registration.send_abandoned_cart_reminders(now=now) == (0, 1)
        assert mail.outbox == []

    def test_dry_run(self, make_cart):
        make_cart()

        assert registration.send_abandoned_cart_reminders(now=later(hours=3), dry_run=True) == (1, 0)
        assert mail.outbox == []
        assert not EmailLog.objects.exists()

    @override_settings(RACEMAN={'EMAIL_DISPATCHER': 'raceman.tests.test_reminders.FailingDispatcher'})
    def test_failure_logged_and_retried(self, make_cart):
        cart = make_cart()
        now = later(hours=3)

        assert registration.send_abandoned_cart_reminders(now=now) == (0, 0)

        log = cart.email_logs.get()
        assert log.status == EmailLogStatus.FAILED
        assert 'SMTP indisponível' in log.error
        assert registration.send_abandoned_cart_reminders(now=now + timedelta(minutes=5)) == (0, 0)
        assert cart.email_logs.count() == 2


class TestSendAbandonedCartRemindersCommand:

    def test_dry_run(self, make_cart):
        cart = make_cart()
        AbandonedCart.objects.filter(pk=cart.pk).update(last_activity_at=later(hours=-3))
        out = StringIO()

        call_command('send_abandoned_cart_reminders', '--dry-run', stdout=out)

        assert mail.outbox == []
        assert '1 lembrete(s) seria(m) enviado(s), 0 carrinho(s) ignorado(s)' in out.getvalue()

    def test_sends(self, make_cart):
        cart = make_cart()
        AbandonedCart.objects.filter(pk=cart.pk).update(last_activity_at=later(hours=-3))
        out = StringIO()

        call_command('send_abandoned_cart_reminders', stdout=out)

        assert len(mail.outbox) == 1
        assert '1 lembrete(s) enviado(s), 0 carrinho(s) ignorado(s)' in out.getvalue()
