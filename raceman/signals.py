"""
Raceman signals.

Sent after the transaction that performed the transition commits.

    from raceman.signals import kit_withdrawn

    @receiver(kit_withdrawn)
    def notify_counter(sender, participant, **kwargs):
        ...
"""

from django.db import transaction
from django.dispatch import Signal

# participant, edited
participant_identified = Signal()

# participant, self_service
kit_withdrawn = Signal()

# order, previous, status
delivery_status_changed = Signal()

# race, assigned
bib_numbers_generated = Signal()


def send_on_commit(signal: Signal, sender, **kwargs) -> None:
    """Schedule signal.send() for after the current transaction commits."""
    transaction.on_commit(lambda: signal.send(sender=sender, **kwargs))
