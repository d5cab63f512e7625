"""
Registration lifecycle — participant identification and validation.

All transitions use transaction.atomic() with select_for_update().

    PENDENTE_IDENTIFICACAO ──identify──► IDENTIFICADA ──mark_validated──► VALIDADA
    any ──block──► BLOQUEADA
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from raceman import signals
from raceman.conf import raceman_settings
from raceman.exceptions import RegistrationError
from raceman.models.enums import IDENTIFIABLE_STATUSES, ParticipantStatus
from raceman.models.participant import Participant
from raceman.models.team import TeamMember

logger = logging.getLogger('raceman')

REQUIRED_PROFILE_FIELDS = ('full_name', 'document_number')

IDENTIFY_FIELDS = ['status', 'user_profile', 'shirt_size', 'kit_type', 'updated_at']


def _pk(value):
    """Accept a model instance or its primary key."""
    return getattr(value, 'pk', value)


def _lock_participant(participant_id) -> Participant:
    try:
        return Participant.objects.select_for_update().get(pk=_pk(participant_id))
    except (Participant.DoesNotExist, ValidationError):
        raise RegistrationError('PARTICIPANT_NOT_FOUND', participant_id=str(_pk(participant_id))) from None


def _check_profile(profile: dict | None, shirt_size: str) -> None:
    missing = [
        field for field in REQUIRED_PROFILE_FIELDS
        if not str((profile or {}).get(field) or '').strip()
    ]
    if not (shirt_size or '').strip():
        missing.append('shirt_size')
    if missing:
        raise RegistrationError('INVALID_PROFILE', missing=missing)


def _check_race_open(participant: Participant) -> None:
    """Late identification is refused; late edits only when configured."""
    if not participant.race.is_closed:
        return
    if participant.status == ParticipantStatus.IDENTIFIED and raceman_settings.ALLOW_EDIT_AFTER_CLOSE:
        return
    raise RegistrationError(
        'INVALID_TRANSITION',
        'Inscrições encerradas: não é possível identificar atletas após o fechamento do evento',
        current=participant.status,
        race_closed=True,
    )


class RegistrationLifecycle:
    """Participant status transitions."""

    @classmethod
    def identify(cls, participant_id, profile: dict, shirt_size: str, user=None) -> Participant:
        """
        Bind an athlete profile to a registration slot (or edit it).

        Transition: PENDENTE_IDENTIFICACAO|IDENTIFICADA -> IDENTIFICADA

        Bib number and kit status are left untouched, so editing an
        identified participant keeps what was already assigned.

        Raises:
            RegistrationError('INVALID_PROFILE'): Missing name, document or shirt size
            RegistrationError('PARTICIPANT_NOT_FOUND')
            RegistrationError('INVALID_TRANSITION'): Blocked/validated, or race closed
        """
        _check_profile(profile, shirt_size)

        with transaction.atomic():
            participant = _lock_participant(participant_id)

            if participant.status not in IDENTIFIABLE_STATUSES:
                raise RegistrationError(
                    'INVALID_TRANSITION',
                    current=participant.status,
                    expected=list(IDENTIFIABLE_STATUSES),
                )
            _check_race_open(participant)

            edited = participant.status == ParticipantStatus.IDENTIFIED
            participant.status = ParticipantStatus.IDENTIFIED
            participant.user_profile = dict(profile)
            participant.shirt_size = shirt_size.strip()
            participant.kit_type = participant.kit_type or raceman_settings.DEFAULT_KIT_TYPE
            participant.updated_at = timezone.now()
            participant.save(update_fields=IDENTIFY_FIELDS)

            logger.info(
                "raceman.participant.identified",
                extra={
                    "participant": str(participant.pk),
                    "edited": edited,
                    "user": getattr(user, 'pk', None),
                },
            )
            signals.send_on_commit(
                signals.participant_identified,
                sender=Participant,
                participant=participant,
                edited=edited,
            )
            return participant

    @classmethod
    def bulk_identify(cls, assignments, user) -> int:
        """
        Assign saved team members to several pending slots at once.

        Args:
            assignments: Iterable of (participant_id, team_member_id);
                pairs without a team member are skipped
            user: Owner of both the participants and the team members

        Returns:
            Number of participants identified

        Raises:
            RegistrationError('DUPLICATE_ASSIGNMENT'): Same member on two slots
            RegistrationError('PARTICIPANT_NOT_FOUND' | 'TEAM_MEMBER_NOT_FOUND')
            RegistrationError('INVALID_TRANSITION'): Slot not pending or race closed
        """
        pairs = [(_pk(p), _pk(m)) for p, m in assignments if m]

        # Before any read or write
        seen, duplicates = set(), set()
        for _, member_id in pairs:
            key = str(member_id)
            if key in seen:
                duplicates.add(key)
            seen.add(key)
        if duplicates:
            raise RegistrationError('DUPLICATE_ASSIGNMENT', team_member_ids=sorted(duplicates))

        if not pairs:
            return 0

        with transaction.atomic():
            members = {
                str(m.pk): m
                for m in TeamMember.objects.filter(owner=user, pk__in=[m for _, m in pairs])
            }
            participants = {
                str(p.pk): p
                for p in Participant.objects.select_for_update().filter(
                    user=user,
                    pk__in=[p for p, _ in pairs],
                ).select_related('race')
            }

            now = timezone.now()
            identified = []
            for participant_id, member_id in pairs:
                participant = participants.get(str(participant_id))
                if participant is None:
                    raise RegistrationError('PARTICIPANT_NOT_FOUND', participant_id=str(participant_id))
                member = members.get(str(member_id))
                if member is None:
                    raise RegistrationError('TEAM_MEMBER_NOT_FOUND', team_member_id=str(member_id))
                if participant.status != ParticipantStatus.PENDING:
                    raise RegistrationError(
                        'INVALID_TRANSITION',
                        current=participant.status,
                        expected=ParticipantStatus.PENDING,
                    )
                _check_race_open(participant)

                participant.status = ParticipantStatus.IDENTIFIED
                participant.user_profile = member.as_profile()
                participant.shirt_size = member.shirt_size
                participant.kit_type = participant.kit_type or raceman_settings.DEFAULT_KIT_TYPE
                participant.updated_at = now
                participant.save(update_fields=IDENTIFY_FIELDS)
                identified.append(participant)

            logger.info(
                "raceman.participant.bulk_identified",
                extra={"count": len(identified), "user": getattr(user, 'pk', None)},
            )
            for participant in identified:
                signals.send_on_commit(
                    signals.participant_identified,
                    sender=Participant,
                    participant=participant,
                    edited=False,
                )
            return len(identified)

    @classmethod
    def mark_validated(cls, participant_id, user=None) -> Participant:
        """
        Staff validation.

        Transition: IDENTIFICADA -> VALIDADA (VALIDADA is a no-op)
        """
        with transaction.atomic():
            participant = _lock_participant(participant_id)

            if participant.status == ParticipantStatus.VALIDATED:
                return participant
            if participant.status != ParticipantStatus.IDENTIFIED:
                raise RegistrationError(
                    'INVALID_TRANSITION',
                    current=participant.status,
                    expected=ParticipantStatus.IDENTIFIED,
                )

            participant.status = ParticipantStatus.VALIDATED
            participant.save(update_fields=['status', 'updated_at'])
            logger.info(
                "raceman.participant.validated",
                extra={"participant": str(participant.pk), "user": getattr(user, 'pk', None)},
            )
            return participant

    @classmethod
    def block(cls, participant_id, reason: str = '', user=None) -> Participant:
        """
        Block a registration (admin).

        Transition: any -> BLOQUEADA
        """
        with transaction.atomic():
            participant = _lock_participant(participant_id)

            if participant.status == ParticipantStatus.BLOCKED:
                return participant

            previous = participant.status
            participant.status = ParticipantStatus.BLOCKED
            if reason:
                participant.metadata['block_reason'] = reason
            participant.save(update_fields=['status', 'metadata', 'updated_at'])
            logger.info(
                "raceman.participant.blocked",
                extra={
                    "participant": str(participant.pk),
                    "previous": previous,
                    "reason": reason,
                    "user": getattr(user, 'pk', None),
                },
            )
            return participant
