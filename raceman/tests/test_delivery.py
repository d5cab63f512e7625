"""
Tests for home delivery status, labels and delivery scans.
"""

import pytest
from django.test import override_settings

from raceman import registration, RegistrationError
from raceman.models import DeliveryAttempt
from raceman.models.enums import DeliveryScanStatus, KitDeliveryStatus
from raceman.signals import delivery_status_changed


pytestmark = pytest.mark.django_db


class TestUpdateDeliveryStatus:
    """Tests for registration.update_delivery_status()."""

    def test_delivered_without_observation(self, home_order, staff):
        """Entregue needs no observation; attempt is logged with agent name."""
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED, agent=staff)

        home_order.refresh_from_db()
        assert home_order.kit_delivery_status == KitDeliveryStatus.DELIVERED
        attempt = home_order.delivery_attempts.get()
        assert attempt.status == KitDeliveryStatus.DELIVERED
        assert attempt.agent_name == 'Joana Entregadora'
        assert attempt.observation == ''

    def test_not_attended_requires_observation(self, home_order):
        """Short observation is rejected and nothing is logged."""
        with pytest.raises(RegistrationError) as exc:
            registration.update_delivery_status(home_order.pk, KitDeliveryStatus.NOT_ATTENDED, 'ninguém')

        assert exc.value.code == 'OBSERVATION_REQUIRED'
        assert exc.value.data['min_length'] == 10
        assert not DeliveryAttempt.objects.exists()

    def test_whitespace_does_not_count(self, home_order):
        """Observation length is measured after trimming."""
        with pytest.raises(RegistrationError) as exc:
            registration.update_delivery_status(home_order.pk, KitDeliveryStatus.PROBLEM, '   curto     ')

        assert exc.value.code == 'OBSERVATION_REQUIRED'

    @override_settings(RACEMAN={'MIN_OBSERVATION_LENGTH': 3})
    def test_min_length_from_settings(self, home_order):
        """MIN_OBSERVATION_LENGTH is configurable."""
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.PROBLEM, 'cão')

        home_order.refresh_from_db()
        assert home_order.kit_delivery_status == KitDeliveryStatus.PROBLEM

    def test_attempts_accumulate(self, home_order):
        """Not attended, then delivered: two attempts in order."""
        registration.update_delivery_status(
            home_order.pk, KitDeliveryStatus.NOT_ATTENDED, 'Ninguém em casa às 14h',
            agent_name='Pedro',
        )
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED, agent_name='Pedro')

        statuses = list(home_order.delivery_attempts.values_list('status', flat=True))
        assert statuses == [KitDeliveryStatus.NOT_ATTENDED, KitDeliveryStatus.DELIVERED]

    def test_delivered_is_terminal(self, home_order):
        """No outcome is accepted after Entregue."""
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED)

        with pytest.raises(RegistrationError) as exc:
            registration.update_delivery_status(
                home_order.pk, KitDeliveryStatus.PROBLEM, 'Endereço não existe',
            )

        assert exc.value.code == 'TERMINAL_STATE'
        assert home_order.delivery_attempts.count() == 1

    def test_printed_is_not_an_outcome(self, home_order):
        """Only Entregue, NaoAtendido and Problema are outcomes."""
        with pytest.raises(RegistrationError) as exc:
            registration.update_delivery_status(home_order.pk, KitDeliveryStatus.PRINTED)

        assert exc.value.code == 'INVALID_TRANSITION'

    def test_pickup_order_rejected(self, order):
        """Pickup orders have no delivery status."""
        with pytest.raises(RegistrationError) as exc:
            registration.update_delivery_status(order.pk, KitDeliveryStatus.DELIVERED)

        assert exc.value.code == 'NOT_HOME_DELIVERY'

    def test_default_agent_name(self, home_order):
        """Without agent or name, the configured default is recorded."""
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED)

        assert home_order.delivery_attempts.get().agent_name == 'Entregador'

    def test_signal_on_commit(self, home_order, django_capture_on_commit_callbacks):
        """delivery_status_changed carries previous and new status."""
        received = []

        def receiver(sender, order, previous, status, **kwargs):
            received.append((previous, status))

        delivery_status_changed.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED)
        finally:
            delivery_status_changed.disconnect(receiver)

        assert received == [(KitDeliveryStatus.PENDING, KitDeliveryStatus.DELIVERED)]


class TestDeliveryAttemptImmutability:
    """Delivery attempts are append-only."""

    def test_cannot_update(self, home_order):
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED)
        attempt = home_order.delivery_attempts.get()

        attempt.observation = 'alterado'
        with pytest.raises(ValueError):
            attempt.save()

    def test_cannot_delete(self, home_order):
        registration.update_delivery_status(home_order.pk, KitDeliveryStatus.DELIVERED)

        with pytest.raises(ValueError):
            home_order.delivery_attempts.get().delete()


class TestMarkPrinted:
    """Tests for registration.mark_printed()."""

    def test_pending_becomes_printed(self, home_order):
        registration.mark_printed(home_order.pk)

        home_order.refresh_from_db()
        assert home_order.kit_delivery_status == KitDeliveryStatus.PRINTED
        assert home_order.first_printed_at is not None

    def test_reprint_keeps_status(self, home_order):
        """Reprinting after an outcome does not move the status back."""
        registration.update_delivery_status(
            home_order.pk, KitDeliveryStatus.NOT_ATTENDED, 'Portão fechado, sem interfone',
        )

        registration.mark_printed(home_order.pk)

        home_order.refresh_from_db()
        assert home_order.kit_delivery_status == KitDeliveryStatus.NOT_ATTENDED
        assert home_order.first_printed_at is None

    def test_pickup_rejected(self, order):
        with pytest.raises(RegistrationError) as exc:
            registration.mark_printed(order.pk)

        assert exc.value.code == 'NOT_HOME_DELIVERY'


class TestLabelUrl:
    """Tests for registration.label_url()."""

    def test_label_fields(self, home_order, make_participant):
        make_participant('Ana Lima', order=home_order)
        make_participant('Beatriz Costa', order=home_order)

        url = registration.label_url(home_order)

        assert url.startswith('/admin/delivery/print?')
        assert 'orderNumber=PEDIDO0002' in url
        assert 'name=Maria+Souza' in url
        assert 'phone=11999990000' in url
        assert 'eventName=Corrida+da+Primavera' in url
        assert 'items=2' in url

    def test_missing_address_placeholder(self, home_order):
        home_order.delivery_address = ''

        url = registration.label_url(home_order)

        assert 'address=Endere%C3%A7o+n%C3%A3o+informado' in url


class TestValidateDelivery:
    """Tests for registration.validate_delivery()."""

    def test_scan_confirms_delivery(self, race, home_order, staff):
        result = registration.validate_delivery(' PEDIDO0002 ', race.pk, agent=staff)

        assert result.delivered
        assert result.status == DeliveryScanStatus.DELIVERED
        assert result.order == home_order
        home_order.refresh_from_db()
        assert home_order.kit_delivery_status == KitDeliveryStatus.DELIVERED
        assert home_order.delivery_attempts.get().agent_name == 'Joana Entregadora'

    def test_second_scan_reports_already_delivered(self, race, home_order):
        registration.validate_delivery('PEDIDO0002', race.pk)

        result = registration.validate_delivery('PEDIDO0002', race.pk)

        assert not result.delivered
        assert result.status == DeliveryScanStatus.ALREADY_DELIVERED
        assert result.message == 'Kit já foi entregue'
        assert home_order.delivery_attempts.count() == 1

    def test_unknown_code(self, race, home_order):
        result = registration.validate_delivery('PEDIDO9999', race.pk)

        assert result.status == DeliveryScanStatus.NOT_FOUND
        assert result.order is None

    def test_other_race(self, closed_race, home_order):
        """Order numbers are only looked up within the given race."""
        result = registration.validate_delivery('PEDIDO0002', closed_race.pk)

        assert result.status == DeliveryScanStatus.NOT_FOUND

    def test_pickup_order(self, race, order):
        result = registration.validate_delivery('PEDIDO0001', race.pk)

        assert result.status == DeliveryScanStatus.NOT_HOME_DELIVERY
        assert result.order == order

    def test_empty_code(self, race):
        result = registration.validate_delivery('', race.pk)

        assert result.status == DeliveryScanStatus.NOT_FOUND
