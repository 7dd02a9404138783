"""Application layer for the tenant hierarchy context."""
