"""
Registration Service — The single public interface for registration operations.

Usage:
    from raceman import registration, RegistrationError

    order = registration.create_order(user, [(option_10k.pk, 2)], payer)
    registration.identify(participant.pk, profile, 'M')
    registration.generate_bib_numbers(race.pk)  # 2
    registration.redeem_kit('5001', race.pk).status  # 'VALIDO'
"""

from raceman.services.bibs import BibAssignment
from raceman.services.carts import CartReminders
from raceman.services.checkout import Checkout
from raceman.services.delivery import DeliveryLifecycle
from raceman.services.kits import KitValidator
from raceman.services.queries import RegistrationQueries
from raceman.services.registration import RegistrationLifecycle
from raceman.services.reminders import IdentificationReminders


class Registration(
    RegistrationQueries,
    Checkout,
    RegistrationLifecycle,
    DeliveryLifecycle,
    BibAssignment,
    KitValidator,
    IdentificationReminders,
    CartReminders,
):
    """
    Single interface for all registration operations.

    Every argument named *_id accepts either the model instance or its
    primary key.

    IMPORTANT: All state-changing methods run inside transaction.atomic()
    and lock the row they transition. See each method's docstring.

    ══════════════════════════════════════════════════════════════
    QUERIES          registration_summary, delivery_orders,
                     pending_participants
    CHECKOUT         create_order
    PARTICIPANTS     identify, bulk_identify, mark_validated, block
    DELIVERY         update_delivery_status, mark_printed, label_url,
                     validate_delivery
    BIBS             generate_bib_numbers
    KITS             resolve_participant, classify, validate_kit,
                     redeem_kit, confirm_withdrawal
    REMINDERS        remind_pending, send_pending_reminders,
                     send_abandoned_cart_reminders
    ══════════════════════════════════════════════════════════════
    """
