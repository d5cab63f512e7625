"""
Checkout — turn a paid cart into an order and its registration slots.

Payment happens before this point; the order is recorded as paid and
every slot starts as PENDENTE_IDENTIFICACAO.
"""

import logging
import string
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone
from django.utils.crypto import get_random_string

from raceman.conf import raceman_settings
from raceman.exceptions import RegistrationError
from raceman.models.cart import AbandonedCart
from raceman.models.coupon import Coupon
from raceman.models.enums import CartStatus, DeliveryMethod, KitDeliveryStatus, ParticipantStatus
from raceman.models.order import Order
from raceman.models.participant import Participant
from raceman.models.race import Race, RaceOption

logger = logging.getLogger('raceman')

ORDER_NUMBER_CHARS = string.ascii_uppercase + string.digits


def new_order_number() -> str:
    """Random uppercase order number, unique among existing orders."""
    length = raceman_settings.ORDER_NUMBER_LENGTH
    while True:
        number = get_random_string(length, allowed_chars=ORDER_NUMBER_CHARS)
        if not Order.objects.filter(order_number=number).exists():
            return number


class Checkout:
    """Order creation."""

    @classmethod
    def create_order(cls, user, items, payer: dict, delivery_method: str = DeliveryMethod.PICKUP,
                     delivery_address: str = '', coupon_code: str | None = None, cart_id=None) -> Order:
        """
        Create an order with one pending participant per purchased slot.

        Args:
            user: Buyer (owner of the slots)
            items: Iterable of (option_id, quantity), all from the same race
            payer: {'name', 'email', 'phone'} of the responsible person
            delivery_method: 'pickup' or 'home'
            delivery_address: Required context for home delivery labels
            coupon_code: Optional discount code
            cart_id: Storefront AbandonedCart to mark CONVERTED

        Returns:
            Created Order

        Raises:
            RegistrationError('INVALID_QUANTITY'): Empty cart or quantity <= 0
            RegistrationError('OPTION_NOT_FOUND'): Unknown option or mixed races
            RegistrationError('RACE_UNAVAILABLE'): Race not published or closed
            RegistrationError('RACE_FULL'): Not enough capacity left
            RegistrationError('NO_ACTIVE_LOT'): Option without a current price lot
            RegistrationError('DELIVERY_UNAVAILABLE'): Home delivery not offered
            RegistrationError('COUPON_*'): Coupon missing or not usable
        """
        lines = [(getattr(option, 'pk', option), quantity) for option, quantity in items]
        if not lines or any(quantity <= 0 for _, quantity in lines):
            raise RegistrationError('INVALID_QUANTITY', items=[str(q) for _, q in lines])

        with transaction.atomic():
            options = RaceOption.objects.in_bulk([option_id for option_id, _ in lines])
            unknown = [option_id for option_id, _ in lines if option_id not in options]
            race_ids = {option.race_id for option in options.values()}
            if unknown or len(race_ids) != 1:
                raise RegistrationError('OPTION_NOT_FOUND', options=unknown)

            race = Race.objects.select_for_update().get(pk=race_ids.pop())
            if not race.is_open_for_registration:
                raise RegistrationError('RACE_UNAVAILABLE', race=race.pk, status=race.effective_status)

            slots = sum(quantity for _, quantity in lines)
            if race.capacity is not None:
                taken = race.participants.count()
                if taken + slots > race.capacity:
                    raise RegistrationError(
                        'RACE_FULL',
                        available=max(race.capacity - taken, 0),
                        requested=slots,
                    )

            today = timezone.localdate()
            subtotal = Decimal('0')
            for option_id, quantity in lines:
                lot = options[option_id].current_lot(today)
                if lot is None:
                    raise RegistrationError('NO_ACTIVE_LOT', option=options[option_id].distance)
                subtotal += lot.price * quantity

            delivery_fee = Decimal('0')
            if delivery_method == DeliveryMethod.HOME:
                if not race.kit_delivery_enabled:
                    raise RegistrationError('DELIVERY_UNAVAILABLE', race=race.pk)
                delivery_fee = race.kit_delivery_price
            elif delivery_method != DeliveryMethod.PICKUP:
                raise RegistrationError('DELIVERY_UNAVAILABLE', delivery_method=delivery_method)

            coupon = None
            discount = Decimal('0')
            if coupon_code:
                coupon = Coupon.objects.select_for_update().filter(code=coupon_code.strip()).first()
                if coupon is None:
                    raise RegistrationError('COUPON_NOT_FOUND', code=coupon_code)
                coupon.check_usable()
                discount = coupon.discount_for(subtotal)

            is_home = delivery_method == DeliveryMethod.HOME
            order = Order.objects.create(
                order_number=new_order_number(),
                user=user,
                race=race,
                order_status='PAGO',
                order_status_detail='Pagamento confirmado',
                responsible_name=payer.get('name', ''),
                responsible_email=payer.get('email', ''),
                responsible_phone=payer.get('phone', ''),
                total_amount=subtotal + delivery_fee - discount,
                delivery_method=delivery_method,
                delivery_fee=delivery_fee,
                delivery_address=delivery_address if is_home else '',
                kit_delivery_status=KitDeliveryStatus.PENDING if is_home else None,
                coupon=coupon,
                coupon_code=coupon.code if coupon else '',
                discount_amount=discount,
            )

            Participant.objects.bulk_create([
                Participant(
                    race=race,
                    order=order,
                    user=user,
                    modality=options[option_id].distance,
                    status=ParticipantStatus.PENDING,
                )
                for option_id, quantity in lines
                for _ in range(quantity)
            ])

            if coupon:
                Coupon.objects.filter(pk=coupon.pk).update(current_uses=F('current_uses') + 1)

            if cart_id is not None:
                AbandonedCart.objects.filter(pk=getattr(cart_id, 'pk', cart_id)).update(
                    status=CartStatus.CONVERTED,
                    last_activity_at=timezone.now(),
                )

            logger.info(
                "raceman.order.created",
                extra={
                    "order": order.order_number,
                    "race": race.pk,
                    "slots": slots,
                    "total": str(order.total_amount),
                },
            )
            return order
