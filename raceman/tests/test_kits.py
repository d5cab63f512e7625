"""
Tests for kit pickup validation and withdrawal.
"""

import pytest

from raceman import registration, RegistrationError
from raceman.models import Participant
from raceman.models.enums import KitStatus, ParticipantStatus, ValidationStatus
from raceman.services.kits import KitValidationResult, KitValidator
from raceman.signals import kit_withdrawn
from raceman.tests.conftest import CPF_ANA


pytestmark = pytest.mark.django_db


@pytest.fixture
def ana(make_participant):
    """Identified participant with CPF typed unformatted and a bib."""
    return make_participant('Ana Lima', document=CPF_ANA, email='ana.lima@exemplo.com.br', bib_number='5001')


class TestResolveParticipant:
    """Tests for registration.resolve_participant()."""

    def test_by_qr_code(self, race, ana):
        assert registration.resolve_participant(str(ana.pk), race.pk) == ana

    def test_by_bib(self, race, ana):
        assert registration.resolve_participant('5001', race.pk) == ana

    def test_by_cpf_formatted_or_not(self, race, ana):
        """Stored unformatted, found either way."""
        assert registration.resolve_participant('529.982.247-25', race.pk) == ana
        assert registration.resolve_participant(CPF_ANA, race.pk) == ana

    def test_formatted_cpf_stored(self, race, make_participant):
        """Stored formatted, found by plain digits."""
        participant = make_participant('Beatriz Costa', document='111.444.777-35')

        assert registration.resolve_participant('11144477735', race.pk) == participant

    def test_by_name_and_email(self, race, ana):
        assert registration.resolve_participant('Ana Lima', race.pk) == ana
        assert registration.resolve_participant('ana.lima@exemplo.com.br', race.pk) == ana

    def test_by_other_document(self, race, make_participant):
        participant = make_participant('Carlos Dias', document='MG-12.345.678')

        assert registration.resolve_participant('MG-12.345.678', race.pk) == participant

    def test_scoped_to_race(self, closed_race, ana):
        assert registration.resolve_participant(str(ana.pk), closed_race.pk) is None
        assert registration.resolve_participant('5001', closed_race.pk) is None

    def test_blank_code(self, race, ana):
        assert registration.resolve_participant('   ', race.pk) is None


class TestValidateKit:
    """Tests for registration.validate_kit()."""

    def test_valid(self, race, ana):
        result = registration.validate_kit(' 5001 ', race.pk)

        assert result.status == ValidationStatus.VALID
        assert result.participant == ana
        assert result.race == race
        assert result.error_code is None
        ana.refresh_from_db()
        assert ana.kit_status == KitStatus.PENDING

    def test_unknown_code(self, race, ana):
        result = registration.validate_kit('INVALIDCODE123', race.pk)

        assert result.status == ValidationStatus.INVALID
        assert result.participant is None
        assert result.error_code == 'NOT_FOUND'
        assert result.message == 'Código não encontrado neste evento'

    def test_pending_identification_is_invalid(self, race, make_participant):
        participant = make_participant()

        result = registration.validate_kit(str(participant.pk), race.pk)

        assert result.status == ValidationStatus.INVALID
        assert result.participant == participant
        assert result.error_code == 'INELIGIBLE'

    def test_blocked_is_invalid(self, race, make_participant):
        participant = make_participant('Ana Lima', status=ParticipantStatus.BLOCKED, bib_number='5001')

        result = registration.validate_kit('5001', race.pk)

        assert result.status == ValidationStatus.INVALID
        assert result.participant == participant

    def test_withdrawn(self, race, make_participant):
        make_participant('Ana Lima', bib_number='5001', kit_status=KitStatus.WITHDRAWN)

        result = registration.validate_kit('5001', race.pk)

        assert result.status == ValidationStatus.WITHDRAWN
        assert result.error_code == 'ALREADY_CLAIMED'

    def test_unknown_race(self, ana):
        result = registration.validate_kit('5001', 999999)

        assert result.status == ValidationStatus.INVALID
        assert result.race is None

    def test_malformed_race_id(self, ana):
        result = registration.validate_kit('5001', 'abc')

        assert result.status == ValidationStatus.INVALID
        assert result.race is None


class TestRedeemKit:
    """Tests for registration.redeem_kit()."""

    def test_redeem_once(self, race, ana):
        """First scan withdraws, second reports RETIRADO."""
        first = registration.redeem_kit(str(ana.pk), race.pk)
        second = registration.redeem_kit(str(ana.pk), race.pk)

        assert first.status == ValidationStatus.VALID
        assert first.just_withdrawn
        assert first.message == 'Kit retirado com sucesso'
        assert second.status == ValidationStatus.WITHDRAWN
        assert not second.just_withdrawn
        ana.refresh_from_db()
        assert ana.kit_status == KitStatus.WITHDRAWN
        assert ana.kit_withdrawn_at is not None

    def test_invalid_writes_nothing(self, race, make_participant):
        participant = make_participant()

        result = registration.redeem_kit(str(participant.pk), race.pk)

        assert result.status == ValidationStatus.INVALID
        participant.refresh_from_db()
        assert participant.kit_status == KitStatus.PENDING

    def test_signal_on_commit(self, race, ana, django_capture_on_commit_callbacks):
        received = []

        def receiver(sender, participant, self_service, **kwargs):
            received.append((participant.pk, self_service))

        kit_withdrawn.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                registration.redeem_kit('5001', race.pk)
        finally:
            kit_withdrawn.disconnect(receiver)

        assert received == [(ana.pk, True)]

    def test_concurrent_scan_loses(self, race, ana, monkeypatch, django_capture_on_commit_callbacks):
        """Kit taken between classification and UPDATE: report RETIRADO, no signal."""
        stale = Participant.objects.get(pk=ana.pk)
        Participant.objects.filter(pk=ana.pk).update(kit_status=KitStatus.WITHDRAWN)
        monkeypatch.setattr(
            KitValidator,
            'validate_kit',
            classmethod(lambda cls, raw_code, race_id: KitValidationResult(ValidationStatus.VALID, stale, race)),
        )
        received = []

        def receiver(sender, **kwargs):
            received.append(kwargs)

        kit_withdrawn.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                result = registration.redeem_kit(str(ana.pk), race.pk)
        finally:
            kit_withdrawn.disconnect(receiver)

        assert result.status == ValidationStatus.WITHDRAWN
        assert not result.just_withdrawn
        assert result.participant.kit_status == KitStatus.WITHDRAWN
        assert received == []
        ana.refresh_from_db()
        assert ana.kit_withdrawn_at is None


class TestConfirmWithdrawal:
    """Tests for registration.confirm_withdrawal()."""

    def test_confirm(self, ana, staff):
        participant = registration.confirm_withdrawal(
            ana.pk,
            responsible_name=' Maria Souza ',
            observation='Retirado pela mãe',
            user=staff,
        )

        assert participant.kit_status == KitStatus.WITHDRAWN
        ana.refresh_from_db()
        assert ana.kit_withdrawn_by == 'Maria Souza'
        assert ana.kit_observation == 'Retirado pela mãe'
        assert ana.kit_withdrawn_at is not None

    def test_already_claimed(self, ana):
        registration.confirm_withdrawal(ana.pk)

        with pytest.raises(RegistrationError) as exc:
            registration.confirm_withdrawal(ana.pk)

        assert exc.value.code == 'ALREADY_CLAIMED'

    def test_ineligible(self, make_participant):
        participant = make_participant()

        with pytest.raises(RegistrationError) as exc:
            registration.confirm_withdrawal(participant.pk)

        assert exc.value.code == 'INELIGIBLE'

    def test_not_found(self, db):
        with pytest.raises(RegistrationError) as exc:
            registration.confirm_withdrawal('nao-existe')

        assert exc.value.code == 'NOT_FOUND'
