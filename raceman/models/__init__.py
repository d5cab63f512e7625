"""
Raceman Models.

Core models for race registration:
- Race / RaceOption / Lot: Event, modalities and price lots
- Order: Checkout transaction, owns the registration slots
- Participant: One registration slot, bound to an athlete once identified
- DeliveryAttempt: Immutable log of home delivery outcomes
- Combo / Coupon: Catalog bundles and discount codes
- TeamMember: Saved athlete profiles per user
- AbandonedCart: Storefront cart snapshot for recovery e-mails
- EmailLog: Automated e-mail history
"""

from raceman.models.cart import AbandonedCart
from raceman.models.combo import Combo, ComboItem
from raceman.models.coupon import Coupon
from raceman.models.delivery import DeliveryAttempt
from raceman.models.email_log import EmailLog
from raceman.models.enums import (
    CartStatus,
    DeliveryMethod,
    KitDeliveryStatus,
    KitStatus,
    ParticipantStatus,
    RaceStatus,
    ValidationStatus,
)
from raceman.models.order import Order
from raceman.models.participant import Participant
from raceman.models.race import Lot, Race, RaceOption
from raceman.models.team import TeamMember

__all__ = [
    'RaceStatus',
    'ParticipantStatus',
    'KitStatus',
    'DeliveryMethod',
    'KitDeliveryStatus',
    'ValidationStatus',
    'CartStatus',
    'Race',
    'RaceOption',
    'Lot',
    'Order',
    'Participant',
    'DeliveryAttempt',
    'Combo',
    'ComboItem',
    'Coupon',
    'TeamMember',
    'AbandonedCart',
    'EmailLog',
]
