"""
Database boundary layer: ORM model, CRUD operations, and connection management.
"""
