"""
Raceman Adapters.

Implementations of protocols for external systems.
"""

from raceman.adapters.mail import (
    DjangoMailDispatcher,
    get_email_dispatcher,
    reset_email_dispatcher,
)

__all__ = [
    "DjangoMailDispatcher",
    "get_email_dispatcher",
    "reset_email_dispatcher",
]
