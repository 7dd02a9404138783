"""Unit tests for the Tenant aggregate."""

from datetime import UTC, datetime

import pytest

from hierarchy.domain.aggregates import Tenant
from hierarchy.domain.events import TenantCreated, TenantDeleted, TenantUpdated
from hierarchy.domain.exceptions import TenantValidationError
from hierarchy.domain.value_objects import TenantId, TenantPatch


def _tenant(name="Acme", parent_id=None) -> Tenant:
    now = datetime.now(UTC)
    return Tenant(
        id=TenantId.generate(),
        name=name,
        description=None,
        parent_id=parent_id,
        created_at=now,
        updated_at=now,
    )


class TestTenantCreation:
    """Tests for Tenant construction and name rules."""

    def test_creates_with_required_fields(self):
        tenant = _tenant()

        assert tenant.name == "Acme"
        assert tenant.is_root

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_rejects_blank_names(self, name):
        with pytest.raises(TenantValidationError):
            _tenant(name=name)

    def test_rejects_names_longer_than_255(self):
        with pytest.raises(TenantValidationError):
            _tenant(name="x" * 256)

    def test_accepts_name_of_exactly_255(self):
        assert _tenant(name="x" * 255).name == "x" * 255

    def test_keeps_surrounding_whitespace(self):
        assert _tenant(name="  Acme  ").name == "  Acme  "

    def test_child_is_not_root(self):
        assert not _tenant(parent_id=TenantId.generate()).is_root


class TestTenantFactory:
    """Tests for Tenant.create()."""

    def test_root_tenant_records_event_without_ancestors(self):
        tenant_id = TenantId.generate()

        tenant = Tenant.create(tenant_id=tenant_id, name="Root", actor_id="idntusr-1")
        events = tenant.collect_events()

        assert len(events) == 1
        event = events[0]
        assert isinstance(event, TenantCreated)
        assert event.tenant_id == tenant_id.value
        assert event.parent_tenant_id is None
        assert event.ancestor_ids == ()
        assert event.actor_id == "idntusr-1"
        assert event.occurred_at.tzinfo == UTC

    def test_child_tenant_event_lists_ancestors_root_first(self):
        root, mid = TenantId.generate(), TenantId.generate()

        tenant = Tenant.create(
            tenant_id=TenantId.generate(),
            name="Leaf",
            parent_id=mid,
            ancestor_ids=[root, mid],
        )
        event = tenant.collect_events()[0]

        assert event.parent_tenant_id == mid.value
        assert event.ancestor_ids == (root.value, mid.value)

    def test_timestamps_are_equal_on_create(self):
        tenant = Tenant.create(tenant_id=TenantId.generate(), name="Root")

        assert tenant.created_at == tenant.updated_at

    def test_rejects_chain_not_ending_with_parent(self):
        parent = TenantId.generate()

        with pytest.raises(TenantValidationError):
            Tenant.create(
                tenant_id=TenantId.generate(),
                name="Leaf",
                parent_id=parent,
                ancestor_ids=[TenantId.generate()],
            )

    def test_rejects_ancestors_for_root(self):
        with pytest.raises(TenantValidationError):
            Tenant.create(
                tenant_id=TenantId.generate(),
                name="Root",
                ancestor_ids=[TenantId.generate()],
            )

    def test_invalid_name_records_no_event(self):
        with pytest.raises(TenantValidationError):
            Tenant.create(tenant_id=TenantId.generate(), name=" ")


class TestApplyPatch:
    """Tests for Tenant.apply_patch()."""

    def test_renames_and_records_update(self):
        tenant = _tenant()

        tenant.apply_patch(TenantPatch(name="Renamed"), actor_id="idntusr-1")
        events = tenant.collect_events()

        assert tenant.name == "Renamed"
        assert len(events) == 1
        assert isinstance(events[0], TenantUpdated)
        assert events[0].changed_fields == ("name",)
        assert events[0].actor_id == "idntusr-1"

    def test_description_only_keeps_name(self):
        tenant = _tenant()

        tenant.apply_patch(TenantPatch(description="Billing org"))

        assert tenant.name == "Acme"
        assert tenant.description == "Billing org"

    def test_restamps_updated_at(self):
        tenant = _tenant()
        before = tenant.updated_at

        tenant.apply_patch(TenantPatch(description="x"))

        assert tenant.updated_at >= before
        assert tenant.created_at == before

    def test_rejects_empty_patch(self):
        tenant = _tenant()

        with pytest.raises(TenantValidationError):
            tenant.apply_patch(TenantPatch())
        assert tenant.collect_events() == []

    def test_invalid_name_leaves_tenant_unchanged(self):
        tenant = _tenant()

        with pytest.raises(TenantValidationError):
            tenant.apply_patch(TenantPatch(name="", description="new"))

        assert tenant.name == "Acme"
        assert tenant.description is None
        assert tenant.collect_events() == []


class TestMarkForDeletion:
    """Tests for Tenant.mark_for_deletion()."""

    def test_records_deleted_event_with_parent(self):
        parent = TenantId.generate()
        tenant = _tenant(parent_id=parent)

        tenant.mark_for_deletion(actor_id="idntusr-1")
        events = tenant.collect_events()

        assert len(events) == 1
        assert isinstance(events[0], TenantDeleted)
        assert events[0].tenant_id == tenant.id.value
        assert events[0].parent_tenant_id == parent.value

    def test_collect_events_clears_pending(self):
        tenant = _tenant()
        tenant.mark_for_deletion()

        tenant.collect_events()

        assert tenant.collect_events() == []
