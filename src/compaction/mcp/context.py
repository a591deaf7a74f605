"""Application context for MCP handlers.

One session object owns the cache and everything wired to it; handlers get
it passed in instead of reaching for module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from compaction.config.models import CompactionConfig
    from compaction.context.cache import ContextCache
    from compaction.context.lifecycle import LifecycleController
    from compaction.files.ops import FileOps
    from compaction.summary.extractors import ExtractorRegistry


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers."""

    project_root: Path
    config: CompactionConfig
    file_ops: FileOps
    cache: ContextCache
    extractors: ExtractorRegistry
    lifecycle: LifecycleController

    @classmethod
    def create(cls, project_root: Path, config: CompactionConfig | None = None) -> AppContext:
        """Factory to create context with all ops wired together.

        Args:
            project_root: Root for relative paths and display
            config: Loaded configuration; defaults are used when omitted
        """
        from compaction.config.models import CompactionConfig
        from compaction.context.cache import ContextCache
        from compaction.context.lifecycle import LifecycleController
        from compaction.files.ops import FileOps
        from compaction.summary.extractors import ExtractorRegistry

        project_root = project_root.expanduser().resolve()
        config = config or CompactionConfig()
        # The explicit root wins over whatever the config was loaded with
        context_config = config.context.model_copy(update={"project_root": project_root})
        config = config.model_copy(update={"context": context_config})

        file_ops = FileOps(project_root)
        cache = ContextCache(context_config)
        extractors = ExtractorRegistry(max_doc_lines=context_config.max_doc_lines)
        lifecycle = LifecycleController(cache, file_ops, extractors)

        return cls(
            project_root=project_root,
            config=config,
            file_ops=file_ops,
            cache=cache,
            extractors=extractors,
            lifecycle=lifecycle,
        )

    def reset(self) -> None:
        """Forget the active file and every cached summary."""
        self.cache.reset()
