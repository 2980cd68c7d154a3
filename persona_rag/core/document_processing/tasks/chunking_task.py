"""
Text chunking task.

Splits extracted text into bounded segments. The default sliding window
advances by chunk_size - chunk_overlap and never pads the last window; the
paragraph strategy keeps blank-line paragraphs apart and breaks long ones on
word boundaries with RecursiveCharacterTextSplitter.

Dependencies: langchain_text_splitters
System role: Third stage of the ingestion pipeline
"""

import re

from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..configs import ChunkStrategy

_PARAGRAPH_BREAK_RE = re.compile(r"\n{2,}")


def sliding_window(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """
    Overlapping fixed-size windows over `text`.

    Args:
        text: Text to split
        chunk_size: Window length in characters
        chunk_overlap: Characters shared by consecutive windows

    Returns:
        list[str]: Windows starting at 0, step, 2*step, ... while start < len(text)
    """
    if not text:
        return []
    step = chunk_size - chunk_overlap
    return [text[start:start + chunk_size] for start in range(0, len(text), step)]


class ChunkingTask:
    """Split text into chunks using the configured strategy."""

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 50,
        strategy: ChunkStrategy = ChunkStrategy.WINDOW,
        paragraph_max_chars: int = 400,
    ) -> None:
        """
        Initialize chunking task.

        Args:
            chunk_size: Window size in characters
            chunk_overlap: Overlap between consecutive windows
            strategy: WINDOW or PARAGRAPH
            paragraph_max_chars: Maximum piece size for PARAGRAPH

        Raises:
            ValueError: When the overlap would prevent forward progress
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.strategy = ChunkStrategy(strategy)
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=paragraph_max_chars,
            chunk_overlap=0,
            separators=["\n", " ", ""],
            keep_separator=False,
            strip_whitespace=True,
            length_function=len,
        )

    def chunk(self, text: str) -> list[str]:
        """
        Split text into chunks.

        Args:
            text: Extracted document text

        Returns:
            list[str]: Chunks in document order (empty for empty text)
        """
        if self.strategy == ChunkStrategy.PARAGRAPH:
            return self._paragraphs(text)
        return sliding_window(text, self.chunk_size, self.chunk_overlap)

    def _paragraphs(self, text: str) -> list[str]:
        pieces: list[str] = []
        for paragraph in _PARAGRAPH_BREAK_RE.split(text.replace("\r", "")):
            paragraph = paragraph.strip()
            if paragraph:
                pieces.extend(p for p in self._splitter.split_text(paragraph) if p.strip())
        return pieces
