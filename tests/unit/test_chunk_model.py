"""
Test suite for chunk identity.

System role: Verification of deterministic chunk ids
"""

import uuid

from persona_rag.core.document_processing.models import (
    CHUNK_ID_NAMESPACE,
    Chunk,
    generate_chunk_id,
)


class TestGenerateChunkId:
    """Test suite for generate_chunk_id()."""

    def test_matches_uuid5_of_composite_name(self) -> None:
        expected = uuid.uuid5(
            uuid.UUID("1b671a64-40d5-491e-99b0-da01ff1f3341"),
            "data/personas/nutriologa.json::nutriologa::chunk0",
        )

        assert CHUNK_ID_NAMESPACE == uuid.UUID("1b671a64-40d5-491e-99b0-da01ff1f3341")
        assert generate_chunk_id("data/personas/nutriologa.json", ["nutriologa"], 0) == str(expected)

    def test_same_inputs_same_id(self) -> None:
        first = generate_chunk_id("data/a.md", ["x", "y"], 3)
        second = generate_chunk_id("data/a.md", ["x", "y"], 3)

        assert first == second

    def test_scope_order_and_index_change_the_id(self) -> None:
        base = generate_chunk_id("data/a.md", ["x", "y"], 0)

        assert generate_chunk_id("data/a.md", ["y", "x"], 0) != base
        assert generate_chunk_id("data/a.md", ["x", "y"], 1) != base
        assert generate_chunk_id("data/b.md", ["x", "y"], 0) != base

    def test_global_scope_name(self) -> None:
        expected = uuid.uuid5(CHUNK_ID_NAMESPACE, "data/knowledge/global/tips.txt::*::chunk2")

        assert generate_chunk_id("data/knowledge/global/tips.txt", ["*"], 2) == str(expected)


class TestChunkModel:
    """Test suite for the Chunk model."""

    def test_chunk_id_property(self) -> None:
        chunk = Chunk(source_path="data/a.md", scope_ids=["x"], index=1, content="texto")

        assert chunk.chunk_id == generate_chunk_id("data/a.md", ["x"], 1)
