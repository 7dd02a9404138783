"""Domain layer for the tenant hierarchy context.

Contains the Tenant aggregate, its value objects, domain events and the
error taxonomy. Nothing here depends on persistence or transport.
"""
