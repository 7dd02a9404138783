"""Unit tests for HierarchyValidator."""

from datetime import UTC, datetime
from unittest.mock import Mock

import pytest

from hierarchy.application.observability import HierarchyProbe
from hierarchy.application.services import HierarchyValidator
from hierarchy.domain.aggregates import Tenant
from hierarchy.domain.exceptions import (
    DuplicateSiblingNameError,
    HierarchyCycleError,
    ParentTenantNotFoundError,
    TenantValidationError,
)
from hierarchy.domain.value_objects import TenantId
from hierarchy.infrastructure.in_memory import InMemoryTenantRepository


def _node(name: str, parent: Tenant | None = None, tenant_id: TenantId | None = None):
    now = datetime.now(UTC)
    return Tenant(
        id=tenant_id or TenantId.generate(),
        name=name,
        description=None,
        parent_id=parent.id if parent else None,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def probe():
    return Mock(spec=HierarchyProbe)


@pytest.fixture
def tree():
    """root -> (a -> a1), b; plus a second root."""
    root = _node("root")
    a = _node("a", root)
    b = _node("b", root)
    a1 = _node("a1", a)
    other = _node("other")
    return {t.name: t for t in (root, a, b, a1, other)}


@pytest.fixture
def validator(tree, probe):
    rows = {t.id: t for t in tree.values()}
    return HierarchyValidator(InMemoryTenantRepository(rows), probe=probe)


class TestValidateCreate:
    """Tests for HierarchyValidator.validate_create()."""

    @pytest.mark.asyncio
    async def test_returns_parent(self, validator, tree):
        parent = await validator.validate_create("new", tree["root"].id)

        assert parent.id == tree["root"].id

    @pytest.mark.asyncio
    async def test_root_create_returns_none(self, validator):
        assert await validator.validate_create("fresh-root", None) is None

    @pytest.mark.asyncio
    async def test_missing_parent(self, validator, probe):
        missing = TenantId.generate()

        with pytest.raises(ParentTenantNotFoundError) as exc_info:
            await validator.validate_create("new", missing)

        assert exc_info.value.parent_id == missing.value
        probe.parent_not_found.assert_called_once_with(missing.value)

    @pytest.mark.asyncio
    async def test_duplicate_sibling(self, validator, tree, probe):
        with pytest.raises(DuplicateSiblingNameError):
            await validator.validate_create("a", tree["root"].id)

        probe.duplicate_sibling_name.assert_called_once_with(
            "a", tree["root"].id.value
        )

    @pytest.mark.asyncio
    async def test_duplicate_root_name(self, validator):
        with pytest.raises(DuplicateSiblingNameError):
            await validator.validate_create("other", None)

    @pytest.mark.asyncio
    async def test_same_name_under_different_parent_is_allowed(self, validator, tree):
        await validator.validate_create("a1", tree["b"].id)

    @pytest.mark.asyncio
    async def test_names_are_case_sensitive(self, validator, tree):
        await validator.validate_create("A", tree["root"].id)

    @pytest.mark.asyncio
    async def test_blank_name(self, validator, tree):
        with pytest.raises(TenantValidationError):
            await validator.validate_create("   ", tree["root"].id)

    @pytest.mark.asyncio
    async def test_configured_max_length(self, tree):
        rows = {t.id: t for t in tree.values()}
        validator = HierarchyValidator(InMemoryTenantRepository(rows), max_name_length=5)

        with pytest.raises(TenantValidationError):
            await validator.validate_create("sixsix", None)


class TestValidateRename:
    """Tests for HierarchyValidator.validate_rename()."""

    @pytest.mark.asyncio
    async def test_rename_to_free_name(self, validator, tree):
        await validator.validate_rename(tree["a"], "c")

    @pytest.mark.asyncio
    async def test_rename_to_own_name(self, validator, tree):
        await validator.validate_rename(tree["a"], "a")

    @pytest.mark.asyncio
    async def test_rename_to_sibling_name(self, validator, tree):
        with pytest.raises(DuplicateSiblingNameError):
            await validator.validate_rename(tree["a"], "b")

    @pytest.mark.asyncio
    async def test_rename_root_to_other_root_name(self, validator, tree):
        with pytest.raises(DuplicateSiblingNameError):
            await validator.validate_rename(tree["root"], "other")


class TestValidateNoCycle:
    """Tests for HierarchyValidator.validate_no_cycle()."""

    @pytest.mark.asyncio
    async def test_fresh_id_under_existing_parent(self, validator, tree):
        await validator.validate_no_cycle(TenantId.generate(), tree["a1"].id)

    @pytest.mark.asyncio
    async def test_no_parent(self, validator):
        await validator.validate_no_cycle(TenantId.generate(), None)

    @pytest.mark.asyncio
    async def test_linking_under_own_descendant(self, validator, tree, probe):
        with pytest.raises(HierarchyCycleError):
            await validator.validate_no_cycle(tree["root"].id, tree["a1"].id)

        probe.cycle_detected.assert_called_once()

    @pytest.mark.asyncio
    async def test_linking_under_self(self, validator, tree):
        with pytest.raises(HierarchyCycleError):
            await validator.validate_no_cycle(tree["a"].id, tree["a"].id)

    @pytest.mark.asyncio
    async def test_missing_candidate_parent(self, validator):
        with pytest.raises(ParentTenantNotFoundError):
            await validator.validate_no_cycle(TenantId.generate(), TenantId.generate())

    @pytest.mark.asyncio
    async def test_existing_cycle_in_store_terminates(self, probe):
        x_id, y_id = TenantId.generate(), TenantId.generate()
        now = datetime.now(UTC)
        x = Tenant(x_id, "x", None, y_id, now, now)
        y = Tenant(y_id, "y", None, x_id, now, now)
        validator = HierarchyValidator(
            InMemoryTenantRepository({x_id: x, y_id: y}), probe=probe
        )

        with pytest.raises(HierarchyCycleError):
            await validator.validate_no_cycle(TenantId.generate(), x_id)
