"""Change notification contracts shared across bounded contexts.

A bounded context turns its committed domain events into ChangeMessages and
hands them to a ChangePublisher. The outbox implementation stores them
durably and a worker delivers them through a ChangeMessageTransport.
"""

from shared_kernel.outbox.ports import (
    ChangeMessageTransport,
    ChangePublisher,
    IOutboxRepository,
)
from shared_kernel.outbox.value_objects import (
    ChangeEventType,
    ChangeMessage,
    OutboxEntry,
    format_subject,
)

__all__ = [
    "ChangeEventType",
    "ChangeMessage",
    "ChangeMessageTransport",
    "ChangePublisher",
    "IOutboxRepository",
    "OutboxEntry",
    "format_subject",
]
