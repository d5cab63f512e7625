"""
Bib assignment — one-shot numbering of eligible participants per modality.

Bib format: {prefix}{sequence}, sequence 1-based and zero-padded to
BIB_SEQUENCE_DIGITS (prefix 5, sequence 7 → "5007").
"""

import logging
import unicodedata
from collections import defaultdict

from django.db import transaction
from django.utils import timezone

from raceman import signals
from raceman.conf import raceman_settings
from raceman.exceptions import RegistrationError
from raceman.models.participant import Participant
from raceman.models.race import Race

logger = logging.getLogger('raceman')


def name_sort_key(name: str) -> str:
    """Accent- and case-insensitive key ("Álvaro" sorts with "alvaro")."""
    decomposed = unicodedata.normalize('NFKD', name or '')
    stripped = ''.join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold().strip()


def format_bib(prefix: int, sequence: int, digits: int | None = None) -> str:
    width = digits or raceman_settings.BIB_SEQUENCE_DIGITS
    return f"{prefix}{sequence:0{width}d}"


class BibAssignment:
    """Bib number generation."""

    @classmethod
    def generate_bib_numbers(cls, race_id) -> int:
        """
        Assign bib numbers to every identified/validated participant.

        Runs once per race: after any participant has a bib, further calls
        are rejected. All numbers are written in the same transaction that
        holds the race row lock, so a failure leaves no partial numbering.

        Returns:
            Number of participants numbered

        Raises:
            RegistrationError('RACE_NOT_FOUND')
            RegistrationError('ALREADY_GENERATED'): A participant already has a bib
            RegistrationError('NOTHING_TO_GENERATE'): No eligible participant
            RegistrationError('MISSING_PREFIX'): Option without prefix, or
                participant modality without option
            RegistrationError('PREFIX_CONFLICT'): Two options share a prefix
            RegistrationError('SEQUENCE_OVERFLOW'): Modality larger than the
                sequence width allows
        """
        race_pk = getattr(race_id, 'pk', race_id)

        with transaction.atomic():
            try:
                race = Race.objects.select_for_update().get(pk=race_pk)
            except (Race.DoesNotExist, ValueError):
                raise RegistrationError('RACE_NOT_FOUND', race_id=race_pk) from None

            participants = Participant.objects.for_race(race)
            if participants.with_bib().exists():
                raise RegistrationError('ALREADY_GENERATED', race=race.pk)

            # Query order is the tie-break for equal names (sort is stable)
            eligible = list(participants.eligible().order_by('created_at', 'pk'))
            if not eligible:
                raise RegistrationError('NOTHING_TO_GENERATE', race=race.pk)

            options = list(race.options.all())
            prefixes = {option.distance: option.bib_prefix for option in options}
            missing = [option.distance for option in options if option.bib_prefix is None]
            missing += sorted({p.modality for p in eligible} - set(prefixes))
            if missing:
                raise RegistrationError(
                    'MISSING_PREFIX',
                    f"Defina o prefixo de numeração para: {', '.join(missing)}",
                    modalities=missing,
                )

            by_prefix = defaultdict(list)
            for option in options:
                by_prefix[option.bib_prefix].append(option.distance)
            conflicts = {prefix: names for prefix, names in by_prefix.items() if len(names) > 1}
            if conflicts:
                raise RegistrationError(
                    'PREFIX_CONFLICT',
                    prefixes=sorted(conflicts),
                    modalities=[name for prefix in sorted(conflicts) for name in conflicts[prefix]],
                )

            digits = raceman_settings.BIB_SEQUENCE_DIGITS
            limit = 10 ** digits - 1
            groups = defaultdict(list)
            for participant in eligible:
                groups[participant.modality].append(participant)

            for modality, group in groups.items():
                if len(group) > limit:
                    raise RegistrationError(
                        'SEQUENCE_OVERFLOW',
                        modality=modality,
                        count=len(group),
                        limit=limit,
                    )

            now = timezone.now()
            assigned = []
            for modality, group in groups.items():
                group.sort(key=lambda p: name_sort_key(p.full_name))
                for sequence, participant in enumerate(group, start=1):
                    participant.bib_number = format_bib(prefixes[modality], sequence, digits)
                    participant.updated_at = now
                    assigned.append(participant)

            Participant.objects.bulk_update(assigned, ['bib_number', 'updated_at'])

            logger.info(
                "raceman.bibs.generated",
                extra={
                    "race": race.pk,
                    "assigned": len(assigned),
                    "modalities": sorted(groups),
                },
            )
            signals.send_on_commit(
                signals.bib_numbers_generated,
                sender=Race,
                race=race,
                assigned=len(assigned),
            )
            return len(assigned)
