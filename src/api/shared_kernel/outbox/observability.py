"""Observability probe for change message delivery.

The outbox worker reports every delivery outcome through this probe so
the worker itself never touches the logger.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class OutboxWorkerProbe(Protocol):
    """Domain probe for the outbox delivery worker."""

    def worker_started(self) -> None: ...

    def worker_stopped(self) -> None: ...

    def poll_loop_started(self) -> None: ...

    def poll_loop_error(self, error: str) -> None:
        """A poll failed as a whole; the next poll retries it."""
        ...

    def event_delivered(self, entry_id: UUID, subject: str) -> None:
        """The transport accepted an entry."""
        ...

    def event_delivery_failed(
        self, entry_id: UUID, error: str, retry_count: int
    ) -> None:
        """Delivery failed and the entry stays pending for another attempt."""
        ...

    def event_moved_to_dlq(self, entry_id: UUID, event_type: str, error: str) -> None:
        """Delivery failed for the last allowed time; the entry is dead-lettered."""
        ...

    def batch_processed(self, count: int) -> None: ...

    def with_context(self, context: ObservationContext) -> OutboxWorkerProbe: ...


class DefaultOutboxWorkerProbe:
    """Default implementation of OutboxWorkerProbe using structlog.

    Retries log at warning and dead letters at error, so a stuck message
    bus shows up as a rising warning rate before anything is lost.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _log_kwargs(self, **kwargs: Any) -> dict[str, Any]:
        context = self._context.as_dict() if self._context else {}
        return {"component": "outbox_worker", **context, **kwargs}

    def with_context(self, context: ObservationContext) -> DefaultOutboxWorkerProbe:
        """Create a new probe with observation context bound."""
        return DefaultOutboxWorkerProbe(logger=self._logger, context=context)

    def worker_started(self) -> None:
        self._logger.info("outbox_worker_started", **self._log_kwargs())

    def worker_stopped(self) -> None:
        self._logger.info("outbox_worker_stopped", **self._log_kwargs())

    def poll_loop_started(self) -> None:
        self._logger.info("outbox_poll_loop_started", **self._log_kwargs())

    def poll_loop_error(self, error: str) -> None:
        self._logger.warning("outbox_poll_loop_error", **self._log_kwargs(error=error))

    def event_delivered(self, entry_id: UUID, subject: str) -> None:
        self._logger.info(
            "outbox_event_delivered",
            **self._log_kwargs(entry_id=str(entry_id), subject=subject),
        )

    def event_delivery_failed(
        self, entry_id: UUID, error: str, retry_count: int
    ) -> None:
        self._logger.warning(
            "outbox_event_delivery_failed",
            **self._log_kwargs(
                entry_id=str(entry_id), error=error, retry_count=retry_count
            ),
        )

    def event_moved_to_dlq(self, entry_id: UUID, event_type: str, error: str) -> None:
        self._logger.error(
            "outbox_event_moved_to_dlq",
            **self._log_kwargs(
                entry_id=str(entry_id), event_type=event_type, error=error
            ),
        )

    def batch_processed(self, count: int) -> None:
        """Log a non-empty batch; empty polls stay silent."""
        if count > 0:
            self._logger.info("outbox_batch_processed", **self._log_kwargs(count=count))
