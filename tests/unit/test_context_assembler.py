"""
Test suite for assemble_context.

System role: Verification of the context character budget
"""

from persona_rag.boundary.vdb.vector_schemas import DocumentMetadata, SearchHit
from persona_rag.core.rag_query.context_assembler import assemble_context


def hit(id: str, content: str) -> SearchHit:
    return SearchHit(
        id=id,
        content=content,
        metadata=DocumentMetadata(source_file="a.md", persona_ids=["p"]),
        score=1.0,
    )


class TestAssembleContext:
    """Test suite for context assembly under a budget."""

    def test_stops_before_exceeding_budget(self) -> None:
        # Arrange
        hits = [hit("1", "a" * 100), hit("2", "b" * 100), hit("3", "c" * 100)]

        # Act
        context = assemble_context(hits, max_chars=250)

        # Assert
        assert [h.id for h in context.included] == ["1", "2"]
        assert context.text == "a" * 100 + "\n\n" + "b" * 100
        assert len(context.text) == 202

    def test_separators_count_towards_budget(self) -> None:
        hits = [hit("1", "a" * 100), hit("2", "b" * 100)]

        assert len(assemble_context(hits, max_chars=201).included) == 1
        assert len(assemble_context(hits, max_chars=202).included) == 2

    def test_oversized_first_chunk_yields_empty_context(self) -> None:
        context = assemble_context([hit("1", "a" * 300), hit("2", "b")], max_chars=250)

        assert context.text == ""
        assert context.included == []

    def test_later_small_chunk_not_used_after_stop(self) -> None:
        """Assembly stops at the first chunk that does not fit."""
        hits = [hit("1", "a" * 100), hit("2", "b" * 200), hit("3", "c")]

        context = assemble_context(hits, max_chars=150)

        assert [h.id for h in context.included] == ["1"]

    def test_never_exceeds_budget(self) -> None:
        hits = [hit(str(i), "x" * (17 * i + 3)) for i in range(12)]

        for budget in (0, 5, 50, 333, 1000):
            assert len(assemble_context(hits, max_chars=budget).text) <= budget

    def test_empty_hits(self) -> None:
        context = assemble_context([], max_chars=100)

        assert context.text == ""
