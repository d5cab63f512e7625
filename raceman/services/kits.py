"""
Kit validator — resolve a typed or scanned code to a participant and
hand over the kit at most once.

Two flows:
- Self-service (redeem_kit): classify and, when VALIDO, withdraw in one
  compare-and-set UPDATE.
- Staff-assisted: validate_kit() only classifies; confirm_withdrawal()
  commits after the staff member checks the athlete's identity.
"""

import logging
import uuid
from dataclasses import dataclass

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from raceman import signals
from raceman.cpf import format_cpf, normalize_cpf
from raceman.exceptions import RegistrationError
from raceman.models.enums import ELIGIBLE_STATUSES, KitStatus, ValidationStatus
from raceman.models.participant import Participant
from raceman.models.race import Race

logger = logging.getLogger('raceman')

_MESSAGES = {
    'NOT_FOUND': RegistrationError._default_messages['NOT_FOUND'],
    'INELIGIBLE': RegistrationError._default_messages['INELIGIBLE'],
    'ALREADY_CLAIMED': RegistrationError._default_messages['ALREADY_CLAIMED'],
}


@dataclass(frozen=True)
class KitValidationResult:
    """
    Classification of a kit pickup code.

    Attributes:
        status: VALIDO, RETIRADO or INVALIDO
        participant: Resolved participant (None when nothing matched)
        race: Selected race (None when it does not exist)
        just_withdrawn: True when this call performed the withdrawal
    """

    status: str
    participant: Participant | None = None
    race: Race | None = None
    just_withdrawn: bool = False

    @property
    def error_code(self) -> str | None:
        if self.status == ValidationStatus.VALID:
            return None
        if self.status == ValidationStatus.WITHDRAWN:
            return 'ALREADY_CLAIMED'
        if self.participant is None:
            return 'NOT_FOUND'
        return 'INELIGIBLE'

    @property
    def message(self) -> str:
        if self.error_code:
            return _MESSAGES[self.error_code]
        if self.just_withdrawn:
            return 'Kit retirado com sucesso'
        return 'Inscrição válida para retirada do kit'


class KitValidator:
    """Kit pickup lookup and withdrawal."""

    @classmethod
    def resolve_participant(cls, raw_code: str, race_id) -> Participant | None:
        """
        Find the participant a code refers to, within one race.

        First match wins:
            1. participant id (QR code payload)
            2. bib number
            3. CPF, unformatted then ###.###.###-## (11-digit inputs only)
            4. full name
            5. e-mail
            6. document number exactly as typed
        """
        code = (raw_code or '').strip()
        if not code:
            return None

        qs = Participant.objects.filter(race_id=getattr(race_id, 'pk', race_id))

        try:
            participant = qs.filter(pk=uuid.UUID(code)).first()
        except ValueError:
            participant = None
        if participant:
            return participant

        participant = qs.filter(bib_number=code).first()
        if participant:
            return participant

        digits = normalize_cpf(code)
        formatted = format_cpf(digits)
        if len(digits) == 11:
            for candidate in (digits, formatted):
                participant = qs.filter(user_profile__document_number=candidate).first()
                if participant:
                    return participant

        participant = qs.filter(user_profile__full_name=code).first()
        if participant:
            return participant

        participant = qs.filter(user_profile__email=code).first()
        if participant:
            return participant

        if code not in (digits, formatted):
            return qs.filter(user_profile__document_number=code).first()
        return None

    @classmethod
    def classify(cls, participant: Participant) -> str:
        """RETIRADO if already withdrawn, INVALIDO if not eligible, else VALIDO."""
        if participant.kit_status == KitStatus.WITHDRAWN:
            return ValidationStatus.WITHDRAWN
        if participant.status not in ELIGIBLE_STATUSES:
            return ValidationStatus.INVALID
        return ValidationStatus.VALID

    @classmethod
    def validate_kit(cls, raw_code: str, race_id) -> KitValidationResult:
        """Classify a code without changing anything (staff-assisted flow)."""
        try:
            race = Race.objects.filter(pk=getattr(race_id, 'pk', race_id)).first()
        except (ValueError, ValidationError):
            race = None
        if race is None:
            return KitValidationResult(ValidationStatus.INVALID)

        participant = cls.resolve_participant(raw_code, race)
        if participant is None:
            logger.warning(
                "raceman.kit.not_found",
                extra={"race": race.pk, "code": (raw_code or '').strip()},
            )
            return KitValidationResult(ValidationStatus.INVALID, race=race)

        return KitValidationResult(cls.classify(participant), participant, race)

    @classmethod
    def redeem_kit(cls, raw_code: str, race_id) -> KitValidationResult:
        """
        Self-service pickup: classify and withdraw in one step.

        The withdrawal is a conditional UPDATE on kit_status=pendente, so
        of two concurrent scans only one succeeds; the other reports
        RETIRADO. Calling again after a success reports RETIRADO and
        writes nothing.
        """
        result = cls.validate_kit(raw_code, race_id)
        if result.status != ValidationStatus.VALID:
            return result

        participant = result.participant
        now = timezone.now()
        updated = Participant.objects.filter(
            pk=participant.pk,
            kit_status=KitStatus.PENDING,
            status__in=ELIGIBLE_STATUSES,
        ).update(
            kit_status=KitStatus.WITHDRAWN,
            kit_withdrawn_at=now,
            updated_at=now,
        )

        if not updated:
            participant.refresh_from_db()
            return KitValidationResult(cls.classify(participant), participant, result.race)

        participant.kit_status = KitStatus.WITHDRAWN
        participant.kit_withdrawn_at = now
        participant.updated_at = now
        logger.info(
            "raceman.kit.withdrawn",
            extra={"participant": str(participant.pk), "self_service": True},
        )
        signals.send_on_commit(
            signals.kit_withdrawn,
            sender=Participant,
            participant=participant,
            self_service=True,
        )
        return KitValidationResult(ValidationStatus.VALID, participant, result.race, just_withdrawn=True)

    @classmethod
    def confirm_withdrawal(cls, participant_id, responsible_name: str = '',
                           observation: str = '', user=None) -> Participant:
        """
        Staff commit of a kit handover.

        Args:
            participant_id: Participant or its pk
            responsible_name: Who picked the kit up, when not the athlete
            observation: Free-text note

        Raises:
            RegistrationError('NOT_FOUND' | 'ALREADY_CLAIMED' | 'INELIGIBLE')
        """
        pk = getattr(participant_id, 'pk', participant_id)

        with transaction.atomic():
            try:
                participant = Participant.objects.select_for_update().get(pk=pk)
            except (Participant.DoesNotExist, ValidationError):
                raise RegistrationError('NOT_FOUND', participant_id=str(pk)) from None

            if participant.kit_status == KitStatus.WITHDRAWN:
                raise RegistrationError('ALREADY_CLAIMED', participant_id=str(pk))
            if participant.status not in ELIGIBLE_STATUSES:
                raise RegistrationError(
                    'INELIGIBLE',
                    participant_id=str(pk),
                    status=participant.status,
                )

            participant.kit_status = KitStatus.WITHDRAWN
            participant.kit_withdrawn_at = timezone.now()
            participant.kit_withdrawn_by = (responsible_name or '').strip()
            participant.kit_observation = (observation or '').strip()
            participant.save(update_fields=[
                'kit_status',
                'kit_withdrawn_at',
                'kit_withdrawn_by',
                'kit_observation',
                'updated_at',
            ])

            logger.info(
                "raceman.kit.withdrawn",
                extra={
                    "participant": str(participant.pk),
                    "self_service": False,
                    "responsible": participant.kit_withdrawn_by,
                    "user": getattr(user, 'pk', None),
                },
            )
            signals.send_on_commit(
                signals.kit_withdrawn,
                sender=Participant,
                participant=participant,
                self_service=False,
            )
            return participant
