"""
Test suite for DiscoveryTask.

Covers recursive enumeration order, scope strategies, ignore patterns and
missing roots.

System role: Verification of source discovery
"""

from pathlib import Path

import pytest

from persona_rag.core.document_processing.configs import ScopeStrategy, SourceRoot
from persona_rag.core.document_processing.tasks.discovery_task import DiscoveryTask
from tests.helpers import write_file


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    write_file(tmp_path, "data/personas/nutriologa.json", "{}")
    write_file(tmp_path, "data/personas/dentista.json", "{}")
    write_file(tmp_path, "data/personas/.DS_Store", "")
    write_file(tmp_path, "data/knowledge/personas/nutriologa/guias/agenda.md", "x")
    write_file(tmp_path, "data/knowledge/personas/README.txt", "x")
    write_file(tmp_path, "data/knowledge/global/marketing.txt", "x")
    write_file(tmp_path, "data/knowledge/global/marketing.txt~", "x")
    return tmp_path


def _by_path(files) -> dict[str, list[str]]:
    return {f.relative_path: f.persona_ids for f in files}


class TestDiscoveryTask:
    """Test suite for DiscoveryTask.discover()."""

    def test_scopes_per_strategy(self, source_tree: Path) -> None:
        # Arrange
        task = DiscoveryTask(base_dir=source_tree, ignore_patterns=[".*", "*~"])
        roots = [
            SourceRoot(path="data/personas", strategy=ScopeStrategy.FILE_STEM),
            SourceRoot(
                path="data/knowledge/personas",
                strategy=ScopeStrategy.SUBDIRECTORY,
                persona_ids=["*"],
            ),
            SourceRoot(path="data/knowledge/global", persona_ids=["*"]),
        ]

        # Act
        files = task.discover(roots)

        # Assert
        assert _by_path(files) == {
            "data/personas/nutriologa.json": ["nutriologa"],
            "data/personas/dentista.json": ["dentista"],
            "data/knowledge/personas/nutriologa/guias/agenda.md": ["nutriologa"],
            "data/knowledge/personas/README.txt": ["*"],
            "data/knowledge/global/marketing.txt": ["*"],
        }

    def test_results_are_sorted_by_relative_path(self, source_tree: Path) -> None:
        task = DiscoveryTask(base_dir=source_tree, ignore_patterns=[".*", "*~"])
        roots = [
            SourceRoot(path="data/personas", strategy=ScopeStrategy.FILE_STEM),
            SourceRoot(path="data/knowledge/global"),
        ]

        paths = [f.relative_path for f in task.discover(roots)]

        assert paths == sorted(paths)

    def test_ignore_patterns_disabled_keeps_hidden_files(self, source_tree: Path) -> None:
        task = DiscoveryTask(base_dir=source_tree, ignore_patterns=[])

        files = task.discover([SourceRoot(path="data/personas", strategy=ScopeStrategy.FILE_STEM)])

        assert "data/personas/.DS_Store" in _by_path(files)

    def test_missing_root_is_treated_as_empty(self, source_tree: Path) -> None:
        task = DiscoveryTask(base_dir=source_tree)

        files = task.discover([SourceRoot(path="data/does-not-exist", persona_ids=["x"])])

        assert files == []

    def test_fixed_root_keeps_configured_order(self, source_tree: Path) -> None:
        task = DiscoveryTask(base_dir=source_tree, ignore_patterns=["*~"])

        files = task.discover(
            [SourceRoot(path="data/knowledge/global", persona_ids=["dentista", "nutriologa"])]
        )

        assert files[0].persona_ids == ["dentista", "nutriologa"]

    def test_absolute_path_points_at_file(self, source_tree: Path) -> None:
        task = DiscoveryTask(base_dir=source_tree)

        files = task.discover([SourceRoot(path="data/personas", strategy=ScopeStrategy.FILE_STEM)])

        assert all(f.path.is_absolute() and f.path.is_file() for f in files)
