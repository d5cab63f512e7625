"""
Raceman Protocols.

Defines interfaces for external system integration.
"""

from raceman.protocols.email import EmailDispatcher

__all__ = [
    "EmailDispatcher",
]
