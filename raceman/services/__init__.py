"""
Raceman services — modular organization of registration operations.

    from raceman.services import RegistrationLifecycle, BibAssignment, KitValidator
"""

from raceman.services.bibs import BibAssignment
from raceman.services.carts import CartReminders
from raceman.services.checkout import Checkout
from raceman.services.delivery import DeliveryLifecycle, DeliveryScanResult
from raceman.services.kits import KitValidationResult, KitValidator
from raceman.services.queries import RegistrationQueries
from raceman.services.registration import RegistrationLifecycle
from raceman.services.reminders import IdentificationReminders

__all__ = [
    'RegistrationLifecycle',
    'DeliveryLifecycle',
    'DeliveryScanResult',
    'BibAssignment',
    'KitValidator',
    'KitValidationResult',
    'Checkout',
    'IdentificationReminders',
    'CartReminders',
    'RegistrationQueries',
]
