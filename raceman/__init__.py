"""
Django Raceman — race registration, bib numbering and kit pickup.

Uso:
    from raceman import registration, RegistrationError

    registration.identify(participant.pk, profile, 'M')
    registration.generate_bib_numbers(race.pk)
    registration.redeem_kit(code, race.pk)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'registration':
        from raceman.service import Registration
        return Registration
    elif name == 'RegistrationError':
        from raceman.exceptions import RegistrationError
        return RegistrationError
    elif name == 'Race':
        from raceman.models.race import Race
        return Race
    elif name == 'Participant':
        from raceman.models.participant import Participant
        return Participant
    elif name == 'Order':
        from raceman.models.order import Order
        return Order
    elif name == 'DeliveryAttempt':
        from raceman.models.delivery import DeliveryAttempt
        return DeliveryAttempt
    elif name == 'ParticipantStatus':
        from raceman.models.enums import ParticipantStatus
        return ParticipantStatus
    elif name == 'KitDeliveryStatus':
        from raceman.models.enums import KitDeliveryStatus
        return KitDeliveryStatus
    elif name == 'ValidationStatus':
        from raceman.models.enums import ValidationStatus
        return ValidationStatus
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'registration',
    'RegistrationError',
    'Race',
    'Participant',
    'Order',
    'DeliveryAttempt',
    'ParticipantStatus',
    'KitDeliveryStatus',
    'ValidationStatus',
]

__version__ = '0.1.0'
