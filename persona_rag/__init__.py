"""
Persona retrieval subsystem.

Hybrid (lexical + vector) search over a Postgres document store, plus the
offline ingestion pipeline that keeps the store in sync with the persona
knowledge tree on disk.
"""

__version__ = "0.1.0"
