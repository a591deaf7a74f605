"""Content-addressed file edits."""

from compaction.mutation.ops import (
    ContentNotFoundError,
    MultipleMatchesError,
    apply_exact_edit,
    count_occurrences,
)

__all__ = ["ContentNotFoundError", "MultipleMatchesError", "apply_exact_edit", "count_occurrences"]
