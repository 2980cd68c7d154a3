"""
Text extraction task.

Converts a source file into plain text according to its format: JSON string
leaves, PDF text layer, DOCX raw text, Markdown body, or plain UTF-8 text.

Dependencies: langchain_community.document_loaders (pypdf, docx2txt)
System role: Second stage of the ingestion pipeline
"""

import json
import re
from pathlib import Path
from typing import Any

from langchain_community.document_loaders import Docx2txtLoader, PyPDFLoader

from persona_rag.core.exceptions import ParsingError

_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\r?\n.*?\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def flatten_json_strings(data: Any) -> str:
    """
    Join every string leaf of a JSON value with single spaces.

    Dict values and list items are visited in order; numbers, booleans and
    nulls contribute nothing.

    Args:
        data: Parsed JSON value

    Returns:
        str: Space-joined string leaves
    """
    parts: list[str] = []
    _collect_strings(data, parts)
    return " ".join(parts)


def _collect_strings(obj: Any, parts: list[str]) -> None:
    if isinstance(obj, str):
        if obj:
            parts.append(obj)
    elif isinstance(obj, dict):
        for value in obj.values():
            _collect_strings(value, parts)
    elif isinstance(obj, list):
        for item in obj:
            _collect_strings(item, parts)


def strip_front_matter(text: str) -> str:
    """Remove a leading YAML front matter block, if present."""
    return _FRONT_MATTER_RE.sub("", text, count=1)


class ParsingTask:
    """Extract text from JSON, PDF, DOCX, Markdown and plain-text files."""

    def parse(self, file_path: str | Path, source_file: str | None = None) -> str:
        """
        Extract the text of a document.

        Args:
            file_path: Path to the document
            source_file: Relative path used in error context

        Returns:
            str: Extracted text (may be empty)

        Raises:
            ParsingError: When the file is missing, unreadable or corrupt
        """
        path = Path(file_path)
        label = source_file or str(path)
        suffix = path.suffix.lower()

        if not path.is_file():
            raise ParsingError(f"File not found: {label}", label, suffix or None)

        try:
            if suffix == ".json":
                return flatten_json_strings(json.loads(path.read_text(encoding="utf-8")))
            if suffix == ".pdf":
                pages = PyPDFLoader(str(path)).load()
                return "\n\n".join(page.page_content for page in pages).strip()
            if suffix == ".docx":
                documents = Docx2txtLoader(str(path)).load()
                return "\n\n".join(doc.page_content for doc in documents).strip()
            if suffix in (".md", ".markdown"):
                return strip_front_matter(path.read_text(encoding="utf-8")).strip()
            return path.read_text(encoding="utf-8")
        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(
                f"Failed to extract text: {e}",
                label,
                suffix or None,
            ) from e
