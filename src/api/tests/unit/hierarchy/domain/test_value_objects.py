"""Unit tests for hierarchy value objects."""

import pytest

from hierarchy.domain.value_objects import TenantId, TenantPatch


class TestTenantId:
    """Tests for TenantId."""

    def test_generate_uses_default_prefix(self):
        tenant_id = TenantId.generate()

        assert tenant_id.value.startswith("tnntten-")
        assert tenant_id.prefix == "tnntten"

    def test_generate_produces_unique_ids(self):
        ids = {TenantId.generate() for _ in range(100)}

        assert len(ids) == 100

    def test_generate_accepts_custom_prefix(self):
        tenant_id = TenantId.generate(prefix="testten")

        assert tenant_id.prefix == "testten"

    def test_generate_rejects_malformed_prefix(self):
        with pytest.raises(ValueError):
            TenantId.generate(prefix="TOO-LONG-PREFIX")

    def test_from_string_round_trips_generated_id(self):
        tenant_id = TenantId.generate()

        assert TenantId.from_string(tenant_id.value) == tenant_id

    def test_from_string_rejects_wrong_prefix(self):
        with pytest.raises(ValueError):
            TenantId.from_string("loadbal-01ARZ3NDEKTSV4RRFFQ69G5FAV")

    def test_from_string_rejects_invalid_ulid(self):
        with pytest.raises(ValueError):
            TenantId.from_string("tnntten-not-a-ulid")

    def test_from_string_rejects_missing_separator(self):
        with pytest.raises(ValueError):
            TenantId.from_string("tnntten01ARZ3NDEKTSV4RRFFQ69G5FAV")

    def test_str_returns_value(self):
        tenant_id = TenantId(value="tnntten-01ARZ3NDEKTSV4RRFFQ69G5FAV")

        assert str(tenant_id) == "tnntten-01ARZ3NDEKTSV4RRFFQ69G5FAV"

    def test_is_hashable_and_compares_by_value(self):
        a = TenantId(value="tnntten-01ARZ3NDEKTSV4RRFFQ69G5FAV")
        b = TenantId(value="tnntten-01ARZ3NDEKTSV4RRFFQ69G5FAV")

        assert a == b
        assert len({a, b}) == 1


class TestTenantPatch:
    """Tests for TenantPatch."""

    def test_empty_patch(self):
        assert TenantPatch().is_empty
        assert TenantPatch().changed_fields() == ()

    def test_changed_fields_lists_set_fields(self):
        assert TenantPatch(name="a").changed_fields() == ("name",)
        assert TenantPatch(description="d").changed_fields() == ("description",)
        assert TenantPatch(name="a", description="").changed_fields() == (
            "name",
            "description",
        )

    def test_empty_description_is_a_change(self):
        assert not TenantPatch(description="").is_empty
