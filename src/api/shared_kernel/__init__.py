"""Contracts shared between the tenant hierarchy and its infrastructure.

Holds the observation context and the change message / outbox types.
Nothing here imports a bounded context.
"""
