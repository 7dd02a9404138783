"""Unit tests for change message and outbox value objects."""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from shared_kernel.outbox.value_objects import (
    ChangeEventType,
    ChangeMessage,
    OutboxEntry,
    format_subject,
)

TIMESTAMP = datetime(2026, 1, 8, 12, 0, 0, tzinfo=UTC)


class TestFormatSubject:
    @pytest.mark.parametrize(
        ("event_type", "expected"),
        [
            (ChangeEventType.CREATE, "com.infratographer.events.tenants.create.global"),
            (ChangeEventType.UPDATE, "com.infratographer.events.tenants.update.global"),
            (ChangeEventType.DELETE, "com.infratographer.events.tenants.delete.global"),
        ],
    )
    def test_subject_per_event_type(self, event_type, expected):
        subject = format_subject("com.infratographer.events", "tenant", event_type)
        assert subject == expected


class TestChangeMessage:
    """Tests for the ChangeMessage wire representation."""

    def test_is_immutable(self):
        message = ChangeMessage(
            subject_id="tnntten-a",
            event_type=ChangeEventType.CREATE,
            timestamp=TIMESTAMP,
        )
        with pytest.raises(FrozenInstanceError):
            message.subject_id = "tnntten-b"

    def test_payload_keys(self):
        message = ChangeMessage(
            subject_id="tnntten-c",
            event_type=ChangeEventType.CREATE,
            timestamp=TIMESTAMP,
            additional_subject_ids=("tnntten-r", "tnntten-p"),
            actor_id="idntusr-1",
            source="tenant-api",
            subject_fields={"name": "child"},
        )

        payload = message.to_payload()

        assert payload == {
            "subjectID": "tnntten-c",
            "eventType": "create",
            "additionalSubjects": ["tnntten-r", "tnntten-p"],
            "actorID": "idntusr-1",
            "source": "tenant-api",
            "timestamp": "2026-01-08T12:00:00+00:00",
            "subjectFields": {"name": "child"},
        }

    def test_payload_omits_missing_actor(self):
        message = ChangeMessage(
            subject_id="tnntten-c",
            event_type=ChangeEventType.DELETE,
            timestamp=TIMESTAMP,
        )
        assert "actorID" not in message.to_payload()

    def test_from_payload_restores_message(self):
        message = ChangeMessage(
            subject_id="tnntten-c",
            event_type=ChangeEventType.UPDATE,
            timestamp=TIMESTAMP,
            actor_id="idntusr-1",
            source="tenant-api",
            subject_fields={"changed_fields": ["name"]},
        )

        assert ChangeMessage.from_payload(message.to_payload()) == message

    def test_from_payload_missing_key(self):
        with pytest.raises(ValueError, match="subjectID"):
            ChangeMessage.from_payload(
                {"eventType": "create", "timestamp": TIMESTAMP.isoformat()}
            )

    def test_from_payload_unknown_event_type(self):
        with pytest.raises(ValueError):
            ChangeMessage.from_payload(
                {
                    "subjectID": "tnntten-c",
                    "eventType": "move",
                    "timestamp": TIMESTAMP.isoformat(),
                }
            )


class TestOutboxEntry:
    """Tests for OutboxEntry value object."""

    def _entry(self, **overrides):
        fields = {
            "id": uuid4(),
            "aggregate_type": "tenant",
            "aggregate_id": "tnntten-c",
            "event_type": "create",
            "payload": {},
            "occurred_at": TIMESTAMP,
            "processed_at": None,
            "created_at": TIMESTAMP,
        }
        fields.update(overrides)
        return OutboxEntry(**fields)

    def test_defaults(self):
        entry = self._entry()
        assert entry.retry_count == 0
        assert entry.last_error is None
        assert entry.is_processed is False
        assert entry.is_failed is False

    def test_is_processed(self):
        assert self._entry(processed_at=TIMESTAMP).is_processed is True

    def test_is_failed(self):
        entry = self._entry(failed_at=TIMESTAMP, retry_count=5, last_error="boom")
        assert entry.is_failed is True

    def test_is_immutable(self):
        entry = self._entry()
        with pytest.raises(FrozenInstanceError):
            entry.retry_count = 1
