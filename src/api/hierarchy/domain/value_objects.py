"""Value objects for the tenant hierarchy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and requested changes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ulid import ULID

DEFAULT_TENANT_ID_PREFIX = "tnntten"

_PREFIX_PATTERN = re.compile(r"^[a-z0-9]{7}$")


@dataclass(frozen=True)
class TenantId:
    """Identifier for a Tenant aggregate.

    Ids are type-prefixed so they can be embedded in change messages next to
    ids of other entity types: ``<prefix>-<ULID>``, e.g.
    ``tnntten-01HZX3G6Q7Y0N8W5R4M2K1J9PB``.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @property
    def prefix(self) -> str:
        """The entity type prefix of this id."""
        return self.value.split("-", 1)[0]

    @classmethod
    def generate(cls, prefix: str = DEFAULT_TENANT_ID_PREFIX) -> TenantId:
        """Generate a new TenantId using ULID.

        Args:
            prefix: Seven lowercase alphanumeric characters

        Raises:
            ValueError: If prefix is malformed
        """
        if not _PREFIX_PATTERN.match(prefix):
            raise ValueError(f"Invalid tenant id prefix: {prefix!r}")
        return cls(value=f"{prefix}-{ULID()}")

    @classmethod
    def from_string(
        cls,
        value: str,
        prefix: str = DEFAULT_TENANT_ID_PREFIX,
    ) -> TenantId:
        """Create TenantId from string value.

        Args:
            value: Prefixed id string
            prefix: Expected entity type prefix

        Returns:
            TenantId instance

        Raises:
            ValueError: If value is not ``<prefix>-<ULID>``
        """
        head, sep, tail = value.partition("-")
        if not sep or head != prefix:
            raise ValueError(f"Invalid TenantId: {value}")

        try:
            ULID.from_str(tail)
        except ValueError as e:
            raise ValueError(f"Invalid TenantId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class TenantPatch:
    """Requested change to a tenant's mutable fields.

    A field left as None is not changed.
    """

    name: str | None = None
    description: str | None = None

    @property
    def is_empty(self) -> bool:
        """True if the patch changes nothing."""
        return self.name is None and self.description is None

    def changed_fields(self) -> tuple[str, ...]:
        """Names of the fields this patch sets, in declaration order."""
        fields = []
        if self.name is not None:
            fields.append("name")
        if self.description is not None:
            fields.append("description")
        return tuple(fields)
