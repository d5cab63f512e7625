"""
Tests for participant identification and validation.
"""

import pytest
from django.test import override_settings

from raceman import registration, RegistrationError
from raceman.models import Participant
from raceman.models.enums import KitStatus, ParticipantStatus
from raceman.signals import participant_identified
from raceman.tests.conftest import CPF_ANA, profile


pytestmark = pytest.mark.django_db


class TestIdentify:
    """Tests for registration.identify()."""

    def test_identify_pending(self, make_participant):
        """Pending slot becomes IDENTIFICADA with profile and shirt size."""
        participant = make_participant()

        result = registration.identify(participant.pk, profile('Ana Lima', CPF_ANA), 'P')

        participant.refresh_from_db()
        assert result.status == ParticipantStatus.IDENTIFIED
        assert participant.status == ParticipantStatus.IDENTIFIED
        assert participant.full_name == 'Ana Lima'
        assert participant.shirt_size == 'P'
        assert participant.kit_type == 'Padrão'

    def test_reidentify_keeps_bib_and_kit(self, make_participant):
        """Editing an identified participant keeps bib number and kit status."""
        participant = make_participant(
            'Ana Lima',
            bib_number='5001',
            kit_status=KitStatus.WITHDRAWN,
        )

        registration.identify(participant, profile('Ana Lima Souza', CPF_ANA), 'M')

        participant.refresh_from_db()
        assert participant.status == ParticipantStatus.IDENTIFIED
        assert participant.user_profile['full_name'] == 'Ana Lima Souza'
        assert participant.shirt_size == 'M'
        assert participant.bib_number == '5001'
        assert participant.kit_status == KitStatus.WITHDRAWN

    def test_identify_blocked_rejected(self, make_participant):
        """Blocked participants cannot be identified."""
        participant = make_participant(status=ParticipantStatus.BLOCKED)

        with pytest.raises(RegistrationError) as exc:
            registration.identify(participant.pk, profile('Ana Lima', CPF_ANA), 'P')

        assert exc.value.code == 'INVALID_TRANSITION'
        participant.refresh_from_db()
        assert participant.user_profile is None

    def test_identify_validated_rejected(self, make_participant):
        """Validated participants are no longer editable."""
        participant = make_participant('Ana Lima', status=ParticipantStatus.VALIDATED)

        with pytest.raises(RegistrationError) as exc:
            registration.identify(participant.pk, profile('Outra Pessoa', CPF_ANA), 'P')

        assert exc.value.code == 'INVALID_TRANSITION'

    def test_identify_after_close_rejected(self, closed_race, closed_order, make_participant):
        """No first-time identification once the race has closed."""
        participant = make_participant(race=closed_race, order=closed_order)

        with pytest.raises(RegistrationError) as exc:
            registration.identify(participant.pk, profile('Ana Lima', CPF_ANA), 'P')

        assert exc.value.code == 'INVALID_TRANSITION'
        assert exc.value.data['race_closed'] is True

    def test_edit_after_close_rejected_by_default(self, closed_race, closed_order, make_participant):
        """Editing after close is refused unless ALLOW_EDIT_AFTER_CLOSE."""
        participant = make_participant('Ana Lima', race=closed_race, order=closed_order)

        with pytest.raises(RegistrationError) as exc:
            registration.identify(participant.pk, profile('Ana Lima', CPF_ANA), 'G')

        assert exc.value.code == 'INVALID_TRANSITION'

    @override_settings(RACEMAN={'ALLOW_EDIT_AFTER_CLOSE': True})
    def test_edit_after_close_allowed_by_setting(self, closed_race, closed_order, make_participant):
        """With ALLOW_EDIT_AFTER_CLOSE, identified participants stay editable."""
        participant = make_participant('Ana Lima', race=closed_race, order=closed_order)

        registration.identify(participant.pk, profile('Ana Lima', CPF_ANA), 'G')

        participant.refresh_from_db()
        assert participant.shirt_size == 'G'

    def test_identify_requires_profile_fields(self, make_participant):
        """Name, document and shirt size are mandatory."""
        participant = make_participant()

        with pytest.raises(RegistrationError) as exc:
            registration.identify(participant.pk, {'full_name': 'Ana Lima'}, '')

        assert exc.value.code == 'INVALID_PROFILE'
        assert exc.value.data['missing'] == ['document_number', 'shirt_size']

    def test_identify_unknown_participant(self, db):
        """Unknown id raises PARTICIPANT_NOT_FOUND."""
        with pytest.raises(RegistrationError) as exc:
            registration.identify('nao-existe', profile('Ana Lima', CPF_ANA), 'P')

        assert exc.value.code == 'PARTICIPANT_NOT_FOUND'

    def test_identify_sends_signal_on_commit(self, make_participant, django_capture_on_commit_callbacks):
        """participant_identified fires after commit."""
        participant = make_participant()
        received = []

        def receiver(sender, participant, edited, **kwargs):
            received.append((participant.pk, edited))

        participant_identified.connect(receiver)
        try:
            with django_capture_on_commit_callbacks(execute=True):
                registration.identify(participant.pk, profile('Ana Lima', CPF_ANA), 'P')
        finally:
            participant_identified.disconnect(receiver)

        assert received == [(participant.pk, False)]


class TestBulkIdentify:
    """Tests for registration.bulk_identify()."""

    def test_bulk_identify(self, user, make_participant, team_member, other_team_member):
        """Each slot gets its team member's profile and shirt size."""
        first = make_participant()
        second = make_participant()

        count = registration.bulk_identify(
            [(first.pk, team_member.pk), (second.pk, other_team_member.pk)],
            user,
        )

        assert count == 2
        first.refresh_from_db()
        second.refresh_from_db()
        assert first.full_name == 'Ana Lima'
        assert first.shirt_size == 'P'
        assert first.user_profile['birth_date'] == '1992-03-14'
        assert second.full_name == 'Beatriz Costa'
        assert second.status == ParticipantStatus.IDENTIFIED

    def test_bulk_identify_skips_empty_slots(self, user, make_participant, team_member):
        """Slots without a selected member are left pending."""
        first = make_participant()
        second = make_participant()

        count = registration.bulk_identify([(first.pk, team_member.pk), (second.pk, None)], user)

        assert count == 1
        second.refresh_from_db()
        assert second.status == ParticipantStatus.PENDING

    def test_duplicate_member_rejected_before_writes(self, user, make_participant, team_member):
        """Same member on two slots fails and writes nothing."""
        first = make_participant()
        second = make_participant()

        with pytest.raises(RegistrationError) as exc:
            registration.bulk_identify([(first.pk, team_member.pk), (second.pk, team_member.pk)], user)

        assert exc.value.code == 'DUPLICATE_ASSIGNMENT'
        assert Participant.objects.pending().count() == 2

    def test_all_or_nothing(self, user, make_participant, team_member, other_team_member):
        """A non-pending slot aborts the whole batch."""
        first = make_participant()
        second = make_participant('Carlos Dias')

        with pytest.raises(RegistrationError) as exc:
            registration.bulk_identify(
                [(first.pk, team_member.pk), (second.pk, other_team_member.pk)],
                user,
            )

        assert exc.value.code == 'INVALID_TRANSITION'
        first.refresh_from_db()
        assert first.status == ParticipantStatus.PENDING

    def test_other_users_slot_rejected(self, other_user, make_participant, team_member):
        """Only the owner's slots can be identified."""
        participant = make_participant()

        with pytest.raises(RegistrationError) as exc:
            registration.bulk_identify([(participant.pk, team_member.pk)], other_user)

        assert exc.value.code == 'PARTICIPANT_NOT_FOUND'


class TestValidateAndBlock:
    """Tests for registration.mark_validated() and registration.block()."""

    def test_mark_validated(self, make_participant):
        """IDENTIFICADA -> VALIDADA."""
        participant = make_participant('Ana Lima')

        registration.mark_validated(participant.pk)

        participant.refresh_from_db()
        assert participant.status == ParticipantStatus.VALIDATED

    def test_mark_validated_pending_rejected(self, make_participant):
        """Pending slots cannot be validated."""
        participant = make_participant()

        with pytest.raises(RegistrationError) as exc:
            registration.mark_validated(participant.pk)

        assert exc.value.code == 'INVALID_TRANSITION'

    def test_block_any_status(self, make_participant):
        """Any status can be blocked; reason kept in metadata."""
        participant = make_participant('Ana Lima', status=ParticipantStatus.VALIDATED)

        registration.block(participant.pk, reason='Documento falso')

        participant.refresh_from_db()
        assert participant.status == ParticipantStatus.BLOCKED
        assert participant.metadata['block_reason'] == 'Documento falso'
