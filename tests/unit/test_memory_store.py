"""
Test suite for InMemoryDocumentStore.

Covers upsert idempotency, deletion, scope filtering and dimension checks.

System role: Verification of the development document store
"""

import pytest

from persona_rag.boundary.vdb.memory_store import InMemoryDocumentStore, cosine_similarity
from persona_rag.boundary.vdb.vector_schemas import DocumentMetadata, DocumentRecord
from persona_rag.core.exceptions import DimensionMismatchError


def record(id: str, content: str, embedding: list[float], persona_ids: list[str], source: str = "a.md"):
    return DocumentRecord(
        id=id,
        content=content,
        embedding=embedding,
        metadata=DocumentMetadata(source_file=source, persona_ids=persona_ids),
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(dimension=3)


class TestUpsert:
    """Test suite for writes."""

    @pytest.mark.asyncio
    async def test_upsert_same_id_overwrites(self, store: InMemoryDocumentStore) -> None:
        # Arrange
        meta = DocumentMetadata(source_file="a.md", persona_ids=["p"])

        # Act
        await store.upsert("1", "viejo", [1.0, 0.0, 0.0], meta)
        await store.upsert("1", "nuevo", [0.0, 1.0, 0.0], meta)

        # Assert
        assert len(store) == 1
        assert store.get("1").content == "nuevo"
        assert await store.list_all_ids() == {"1"}

    @pytest.mark.asyncio
    async def test_wrong_dimension_rejected(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(DimensionMismatchError) as exc_info:
            await store.upsert_many([record("1", "x", [1.0, 0.0], ["p"])])

        assert exc_info.value.details["expected"] == 3
        assert exc_info.value.details["actual"] == 2
        assert len(store) == 0


class TestDelete:
    """Test suite for deletion and id listing."""

    @pytest.mark.asyncio
    async def test_delete_ignores_unknown_ids(self, store: InMemoryDocumentStore) -> None:
        await store.upsert_many([record("1", "x", [1, 0, 0], ["p"]), record("2", "y", [0, 1, 0], ["p"])])

        deleted = await store.delete_by_ids(["1", "missing"])

        assert deleted == 1
        assert await store.list_all_ids() == {"2"}

    @pytest.mark.asyncio
    async def test_delete_empty_set(self, store: InMemoryDocumentStore) -> None:
        assert await store.delete_by_ids([]) == 0

    @pytest.mark.asyncio
    async def test_list_ids_by_source(self, store: InMemoryDocumentStore) -> None:
        await store.upsert_many([
            record("1", "x", [1, 0, 0], ["p"], source="a.md"),
            record("2", "y", [0, 1, 0], ["p"], source="b.md"),
            record("3", "z", [0, 0, 1], ["p"], source="a.md"),
        ])

        assert await store.list_ids_by_source(["a.md"]) == {"1", "3"}
        assert await store.list_ids_by_source([]) == set()


class TestSearch:
    """Test suite for scoped lexical and vector search."""

    @pytest.fixture
    async def seeded(self, store: InMemoryDocumentStore) -> InMemoryDocumentStore:
        await store.upsert_many([
            record("own", "recordatorios reducen no-shows", [1, 0, 0], ["nutriologa"]),
            record("other", "recordatorios para ortodoncia", [1, 0, 0], ["dentista"]),
            record("global", "recordatorios y reseñas en Google", [0.5, 0.5, 0], ["*"]),
        ])
        return store

    @pytest.mark.asyncio
    async def test_vector_search_respects_scope(self, seeded: InMemoryDocumentStore) -> None:
        hits = await seeded.vector_search([1.0, 0.0, 0.0], "nutriologa", limit=10)

        assert [h.id for h in hits] == ["own", "global"]
        assert hits[0].score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_lexical_search_respects_scope(self, seeded: InMemoryDocumentStore) -> None:
        hits = await seeded.lexical_search("recordatorios", "dentista", limit=10)

        assert {h.id for h in hits} == {"other", "global"}

    @pytest.mark.asyncio
    async def test_lexical_search_requires_all_terms(self, seeded: InMemoryDocumentStore) -> None:
        hits = await seeded.lexical_search("recordatorios google", "nutriologa", limit=10)

        assert [h.id for h in hits] == ["global"]

    @pytest.mark.asyncio
    async def test_lexical_search_stopwords_only(self, seeded: InMemoryDocumentStore) -> None:
        assert await seeded.lexical_search("the and of", "nutriologa", limit=10) == []

    @pytest.mark.asyncio
    async def test_limit_is_applied(self, seeded: InMemoryDocumentStore) -> None:
        hits = await seeded.vector_search([1.0, 0.0, 0.0], "nutriologa", limit=1)

        assert len(hits) == 1

    @pytest.mark.asyncio
    async def test_query_dimension_checked(self, seeded: InMemoryDocumentStore) -> None:
        with pytest.raises(DimensionMismatchError):
            await seeded.vector_search([1.0], "nutriologa", limit=5)


class TestCosineSimilarity:
    def test_zero_vector(self) -> None:
        assert cosine_similarity([0, 0, 0], [1, 2, 3]) == 0.0

    def test_parallel_vectors(self) -> None:
        assert cosine_similarity([1, 2, 3], [2, 4, 6]) == pytest.approx(1.0)
