"""Infrastructure layer for the outbox pattern.

Contains the SQLAlchemy model, repository and delivery worker for outbox
persistence and processing.
"""

from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.repository import OutboxRepository
from infrastructure.outbox.worker import OutboxWorker

__all__ = ["OutboxModel", "OutboxRepository", "OutboxWorker"]
