"""
Boundary layer for external system integrations.

Handles all interactions with external systems (Postgres, the embedding
provider). Provides adapters and clients for infrastructure dependencies.
"""
