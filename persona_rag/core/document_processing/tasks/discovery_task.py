"""
Source discovery task.

Walks every configured source root and resolves the persona scope of each
file. Missing roots are treated as empty.

Dependencies: pathlib, fnmatch
System role: First stage of the ingestion pipeline
"""

import fnmatch
import logging
import os
from pathlib import Path

from ..configs import ScopeStrategy, SourceRoot
from ..models import SourceFile

logger = logging.getLogger(__name__)


class DiscoveryTask:
    """Enumerate files under source roots with their persona scopes."""

    def __init__(self, base_dir: str | Path = ".", ignore_patterns: list[str] | None = None) -> None:
        """
        Initialize discovery task.

        Args:
            base_dir: Directory that relative source paths are computed from
            ignore_patterns: fnmatch patterns of file names to skip
        """
        self._base_dir = Path(base_dir).resolve()
        self._ignore_patterns = ignore_patterns or []

    def discover(self, roots: list[SourceRoot]) -> list[SourceFile]:
        """
        Recursively enumerate files under every root, sorted by path.

        A file reachable from several roots is kept once, with the scope of
        the first root that lists it.

        Args:
            roots: Configured source roots

        Returns:
            list[SourceFile]: Files with their relative paths and scopes
        """
        found: dict[str, SourceFile] = {}

        for root in roots:
            root_path = self._resolve(root.path)
            if not root_path.is_dir():
                logger.warning(
                    f"{__name__}:discover - Source root not found, treating as empty",
                    extra={"root": str(root_path)},
                )
                continue

            count = 0
            for path in sorted(p for p in root_path.rglob("*") if p.is_file()):
                if self._ignored(path):
                    continue
                relative = self._relative(path)
                if relative in found:
                    continue
                found[relative] = SourceFile(
                    path=path,
                    relative_path=relative,
                    persona_ids=self._scope_for(root, root_path, path),
                )
                count += 1

            logger.info(
                f"{__name__}:discover - Found {count} files under {root.path}",
                extra={"strategy": root.strategy.value},
            )

        return [found[key] for key in sorted(found)]

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self._base_dir / candidate
        return candidate.resolve()

    def _relative(self, path: Path) -> str:
        return Path(os.path.relpath(path, self._base_dir)).as_posix()

    def _ignored(self, path: Path) -> bool:
        return any(fnmatch.fnmatch(path.name, pattern) for pattern in self._ignore_patterns)

    @staticmethod
    def _scope_for(root: SourceRoot, root_path: Path, path: Path) -> list[str]:
        if root.strategy == ScopeStrategy.FILE_STEM:
            return [path.stem]
        if root.strategy == ScopeStrategy.SUBDIRECTORY:
            parts = path.relative_to(root_path).parts
            # Files directly under the root fall back to the root's scope
            return [parts[0]] if len(parts) > 1 else list(root.persona_ids)
        return list(root.persona_ids)
