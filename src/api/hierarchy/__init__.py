"""Tenant hierarchy bounded context.

Owns the forest of tenants: structural validation, ancestor and descendant
resolution, cascading deletes, and the change notifications that let
downstream consumers invalidate derived state.
"""
