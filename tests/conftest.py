"""
Shared test fixtures and configuration for entire test suite.

Provides: fake embedder, in-memory document store, persona knowledge tree
Dependencies: pytest
System role: Test infrastructure and fixture management
"""

from pathlib import Path

import pytest

from persona_rag.boundary.vdb.memory_store import InMemoryDocumentStore
from tests.helpers import TEST_DIMENSION, FakeEmbedder, write_file


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    """Provide deterministic embedder with TEST_DIMENSION outputs."""
    return FakeEmbedder()


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    """Provide empty in-memory store matching the fake embedder."""
    return InMemoryDocumentStore(dimension=TEST_DIMENSION)


@pytest.fixture
def knowledge_tree(tmp_path: Path) -> Path:
    """
    Build a small persona knowledge tree.

    Layout:
        data/personas/nutriologa.json
        data/personas/dentista.json
        data/knowledge/personas/nutriologa/agenda.md
        data/knowledge/global/marketing.txt
    """
    write_file(
        tmp_path,
        "data/personas/nutriologa.json",
        '{"name": "Nutrióloga", "goals": ["Aumentar consultas"], '
        '"pains": ["No-shows", "pacientes que abandonan el plan"], "age": 34}',
    )
    write_file(
        tmp_path,
        "data/personas/dentista.json",
        '{"name": "Dentista", "goals": ["Vender ortodoncia"], '
        '"pains": ["Costos de Google Ads", "aceptación de tratamientos"]}',
    )
    write_file(
        tmp_path,
        "data/knowledge/personas/nutriologa/agenda.md",
        "---\ntitle: Agenda\n---\nRecordatorios por WhatsApp reducen los no-shows "
        "de consultas de nutrición.",
    )
    write_file(
        tmp_path,
        "data/knowledge/global/marketing.txt",
        "Las reseñas en Google generan confianza para cualquier consultorio.",
    )
    return tmp_path
