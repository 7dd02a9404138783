"""Infrastructure adapters for the tenant hierarchy context."""
