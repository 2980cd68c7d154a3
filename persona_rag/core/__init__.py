"""
Core domain layer: ingestion pipeline, hybrid retrieval and the exception hierarchy.
"""
