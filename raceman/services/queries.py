"""
Registration queries — read-only operations.

No locking; counts may be stale by the time the caller renders them.
"""

from django.db.models import Count, Q

from raceman.models.enums import DeliveryMethod, KitDeliveryStatus, KitStatus, ParticipantStatus
from raceman.models.order import Order
from raceman.models.participant import Participant


def _pk(value):
    return getattr(value, 'pk', value)


class RegistrationQueries:
    """Derived read models for dashboards and admin screens."""

    @classmethod
    def registration_summary(cls, race_id) -> dict:
        """
        Counts for one race.

        Returns:
            {
                'total': int,
                'by_status': {status: count},     # every status, zeros included
                'by_modality': {modality: count},
                'kits_withdrawn': int,
                'bibs_assigned': int,
            }
        """
        participants = Participant.objects.filter(race_id=_pk(race_id))

        by_status = {status.value: 0 for status in ParticipantStatus}
        for row in participants.values('status').annotate(n=Count('pk')).order_by():
            by_status[row['status']] = row['n']

        by_modality = {
            row['modality']: row['n']
            for row in participants.values('modality').annotate(n=Count('pk')).order_by('modality')
        }

        totals = participants.aggregate(
            total=Count('pk'),
            kits_withdrawn=Count('pk', filter=Q(kit_status=KitStatus.WITHDRAWN)),
            bibs_assigned=Count('pk', filter=Q(bib_number__isnull=False)),
        )
        return {
            'total': totals['total'],
            'by_status': by_status,
            'by_modality': by_modality,
            'kits_withdrawn': totals['kits_withdrawn'],
            'bibs_assigned': totals['bibs_assigned'],
        }

    @classmethod
    def delivery_orders(cls, race_id, status: str | None = None):
        """
        Home delivery orders of a race, optionally filtered by delivery status.

        Orders whose status was never set are listed as Pendente.
        """
        orders = Order.objects.filter(
            race_id=_pk(race_id),
            delivery_method=DeliveryMethod.HOME,
        ).annotate(
            items=Count('participants'),
        ).order_by('created_at', 'pk')

        if status == KitDeliveryStatus.PENDING:
            orders = orders.filter(
                Q(kit_delivery_status__isnull=True) | Q(kit_delivery_status=KitDeliveryStatus.PENDING)
            )
        elif status:
            orders = orders.filter(kit_delivery_status=status)
        return orders

    @classmethod
    def pending_participants(cls, user):
        """The user's slots still waiting for an athlete."""
        return Participant.objects.filter(user=user).pending().select_related('race', 'order')
