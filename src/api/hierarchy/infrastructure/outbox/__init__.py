"""Change message translation for the hierarchy context."""

from hierarchy.infrastructure.outbox.translator import TenantChangeTranslator

__all__ = ["TenantChangeTranslator"]
