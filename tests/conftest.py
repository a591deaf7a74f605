"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

from compaction.config.models import ContextConfig  # noqa: E402
from compaction.context.cache import ContextCache  # noqa: E402
from compaction.context.lifecycle import LifecycleController  # noqa: E402
from compaction.files.ops import FileOps  # noqa: E402
from compaction.summary.extractors import ExtractorRegistry  # noqa: E402

RUST_SOURCE = """\
//! Geometry helpers.

/// A point in 2D space.
#[derive(Debug, Clone)]
pub struct Point {
    pub x: f64,
    pub y: f64,
    cache: u32,
}

impl Point {
    /// Creates a point.
    pub fn new(x: f64, y: f64) -> Self {
        Point { x, y, cache: 0 }
    }

    fn helper(&self) -> u32 {
        self.cache
    }
}

fn private_helper() {}
"""


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root.resolve()


@pytest.fixture
def write_file(project_root: Path) -> Callable[[str, str], Path]:
    """Write a file under the project root and return its absolute path."""

    def _write(rel: str, content: str) -> Path:
        path = project_root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def cache(project_root: Path) -> ContextCache:
    return ContextCache(ContextConfig(project_root=project_root, max_tracked_files=50))


@pytest.fixture
def extractors() -> ExtractorRegistry:
    return ExtractorRegistry()


@pytest.fixture
def lifecycle(cache: ContextCache, project_root: Path, extractors: ExtractorRegistry) -> LifecycleController:
    return LifecycleController(cache, FileOps(project_root), extractors)


@pytest.fixture
def rust_source() -> str:
    return RUST_SOURCE
