"""Unit tests for OutboxRepository.

These tests use mocked database sessions to test the repository logic
without requiring a real database connection.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from infrastructure.outbox.models import OutboxModel
from infrastructure.outbox.repository import OutboxRepository
from shared_kernel.outbox.value_objects import ChangeEventType, ChangeMessage


def _compile(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


class TestOutboxRepositoryAppend:
    """Tests for OutboxRepository.append() method."""

    @pytest.mark.asyncio
    async def test_append_creates_outbox_model(self):
        """Test that append creates an OutboxModel and adds it to session."""
        mock_session = MagicMock()
        repo = OutboxRepository(mock_session)
        message = ChangeMessage(
            subject_id="tnntten-01ARZCX0P0HZGQP3MZXQQ0NNZZ",
            event_type=ChangeEventType.CREATE,
            timestamp=datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC),
            additional_subject_ids=("tnntten-01ARZCX0P0HZGQP3MZXQQ0NNYY",),
            source="tenant-api",
        )

        await repo.append("tenant", message)

        mock_session.add.assert_called_once()
        added_model = mock_session.add.call_args[0][0]
        assert isinstance(added_model, OutboxModel)
        assert added_model.aggregate_type == "tenant"
        assert added_model.aggregate_id == "tnntten-01ARZCX0P0HZGQP3MZXQQ0NNZZ"
        assert added_model.event_type == "create"
        assert added_model.payload == message.to_payload()
        assert added_model.occurred_at == message.timestamp
        assert added_model.processed_at is None


class TestOutboxRepositoryFetchUnprocessed:
    """Tests for OutboxRepository.fetch_unprocessed() method."""

    @pytest.mark.asyncio
    async def test_skips_locked_and_failed_rows(self):
        mock_session = AsyncMock()
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_session.execute.return_value = result
        repo = OutboxRepository(mock_session)

        entries = await repo.fetch_unprocessed(limit=10)

        assert entries == []
        sql = _compile(mock_session.execute.call_args[0][0])
        assert "FOR UPDATE SKIP LOCKED" in sql
        assert "outbox.processed_at IS NULL" in sql
        assert "outbox.failed_at IS NULL" in sql
        assert "ORDER BY outbox.created_at" in sql

    @pytest.mark.asyncio
    async def test_converts_models_to_entries(self):
        model = OutboxModel(
            id=uuid4(),
            aggregate_type="tenant",
            aggregate_id="tnntten-01ARZCX0P0HZGQP3MZXQQ0NNZZ",
            event_type="delete",
            payload={},
            occurred_at=datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC),
            processed_at=None,
            created_at=datetime(2026, 1, 8, 12, 0, 1, tzinfo=UTC),
            retry_count=0,
        )
        mock_session = AsyncMock()
        result = MagicMock()
        result.scalars.return_value.all.return_value = [model]
        mock_session.execute.return_value = result
        repo = OutboxRepository(mock_session)

        entries = await repo.fetch_unprocessed()

        assert [e.id for e in entries] == [model.id]


class TestOutboxRepositoryDeliveryState:
    """Tests for mark_processed() and record_failure()."""

    @pytest.mark.asyncio
    async def test_mark_processed_sets_timestamp(self):
        mock_session = AsyncMock()
        repo = OutboxRepository(mock_session)

        await repo.mark_processed(uuid4())

        stmt = mock_session.execute.call_args[0][0]
        assert "processed_at" in _compile(stmt)

    @pytest.mark.asyncio
    async def test_record_failure_without_dead_letter(self):
        mock_session = AsyncMock()
        repo = OutboxRepository(mock_session)

        await repo.record_failure(
            uuid4(), retry_count=2, error="boom", dead_letter=False
        )

        sql = _compile(mock_session.execute.call_args[0][0])
        assert "retry_count" in sql
        assert "last_error" in sql
        assert "failed_at" not in sql

    @pytest.mark.asyncio
    async def test_record_failure_with_dead_letter(self):
        mock_session = AsyncMock()
        repo = OutboxRepository(mock_session)

        await repo.record_failure(
            uuid4(), retry_count=5, error="boom", dead_letter=True
        )

        sql = _compile(mock_session.execute.call_args[0][0])
        assert "failed_at" in sql
