"""
Test suite for ChunkingTask.

Covers the sliding window arithmetic, configuration validation and the
paragraph strategy.

System role: Verification of text chunking
"""

import pytest

from persona_rag.core.document_processing.configs import ChunkStrategy
from persona_rag.core.document_processing.tasks.chunking_task import ChunkingTask, sliding_window


class TestSlidingWindow:
    """Test suite for the default window strategy."""

    def test_empty_text_returns_no_chunks(self) -> None:
        """Empty input yields an empty list."""
        assert ChunkingTask(500, 50).chunk("") == []

    def test_window_starts_and_short_tail(self) -> None:
        """1200 chars with 500/50 gives windows at 0, 450 and 900."""
        # Arrange
        text = "".join(chr(ord("a") + i % 26) for i in range(1200))

        # Act
        chunks = ChunkingTask(chunk_size=500, chunk_overlap=50).chunk(text)

        # Assert
        assert len(chunks) == 3
        assert chunks[0] == text[0:500]
        assert chunks[1] == text[450:950]
        assert chunks[2] == text[900:]
        assert len(chunks[2]) == 300

    def test_text_shorter_than_window_is_single_chunk(self) -> None:
        assert sliding_window("short", 500, 50) == ["short"]

    def test_overlap_is_shared_between_neighbours(self) -> None:
        """The last `overlap` chars of a window open the next one."""
        text = "x" * 100 + "y" * 100
        chunks = sliding_window(text, 120, 20)

        assert chunks[0][-20:] == chunks[1][:20]

    def test_minimal_step_terminates(self) -> None:
        """Overlap of size - 1 still advances one char per window."""
        chunks = sliding_window("abcdefghij", 4, 3)

        assert len(chunks) == 10
        assert chunks[0] == "abcd"
        assert chunks[-1] == "j"

    def test_chunking_is_deterministic(self) -> None:
        text = "lorem ipsum dolor sit amet " * 80
        task = ChunkingTask(200, 30)

        assert task.chunk(text) == task.chunk(text)


class TestChunkingConfiguration:
    """Test suite for constructor validation."""

    @pytest.mark.parametrize(
        "chunk_size,chunk_overlap",
        [(100, 100), (100, 150), (0, 0), (-5, 0), (100, -1)],
    )
    def test_invalid_configuration_raises(self, chunk_size: int, chunk_overlap: int) -> None:
        with pytest.raises(ValueError):
            ChunkingTask(chunk_size=chunk_size, chunk_overlap=chunk_overlap)

    def test_zero_overlap_is_allowed(self) -> None:
        assert ChunkingTask(10, 0).chunk("a" * 25) == ["a" * 10, "a" * 10, "a" * 5]


class TestParagraphStrategy:
    """Test suite for the blank-line paragraph strategy."""

    def test_splits_on_blank_lines(self) -> None:
        # Arrange
        task = ChunkingTask(strategy=ChunkStrategy.PARAGRAPH, paragraph_max_chars=400)
        text = "Primer párrafo.\n\n\nSegundo párrafo.\r\n\r\nTercero."

        # Act
        chunks = task.chunk(text)

        # Assert
        assert chunks == ["Primer párrafo.", "Segundo párrafo.", "Tercero."]

    def test_long_paragraph_breaks_on_words(self) -> None:
        """Pieces stay within the limit and words are never cut."""
        # Arrange
        task = ChunkingTask(strategy=ChunkStrategy.PARAGRAPH, paragraph_max_chars=50)
        words = [f"palabra{i}" for i in range(40)]

        # Act
        chunks = task.chunk(" ".join(words))

        # Assert
        assert len(chunks) > 1
        assert all(len(chunk) <= 50 for chunk in chunks)
        assert " ".join(chunks).split() == words

    def test_whitespace_only_text_returns_no_chunks(self) -> None:
        task = ChunkingTask(strategy=ChunkStrategy.PARAGRAPH)

        assert task.chunk("  \n\n \n\n\t") == []
