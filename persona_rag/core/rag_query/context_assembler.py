"""
Context assembly under a character budget.

Dependencies: pydantic
System role: Turns ranked chunks into the text block handed to prompt building
"""

from typing import Sequence

from pydantic import BaseModel, Field

from persona_rag.boundary.vdb.vector_schemas import SearchHit

SEPARATOR = "\n\n"


class AssembledContext(BaseModel):
    """Concatenated chunk text and the chunks it contains."""

    text: str = Field(default="")
    included: list[SearchHit] = Field(default_factory=list)


def assemble_context(hits: Sequence[SearchHit], max_chars: int) -> AssembledContext:
    """
    Join chunk texts in rank order with blank lines, within `max_chars`.

    Stops at the first chunk that would push the total (separators counted)
    past the budget; chunks are never truncated.

    Args:
        hits: Ranked chunks, best first
        max_chars: Character budget

    Returns:
        AssembledContext: Text and included chunks
    """
    parts: list[str] = []
    included: list[SearchHit] = []
    total = 0

    for hit in hits:
        added = len(hit.content) + (len(SEPARATOR) if parts else 0)
        if total + added > max_chars:
            break
        parts.append(hit.content)
        included.append(hit)
        total += added

    return AssembledContext(text=SEPARATOR.join(parts), included=included)
