"""Tests for the read/peek/edit/write/forget/status lifecycle."""

from collections.abc import Callable
from pathlib import Path

import pytest

from compaction.context.cache import ContextCache
from compaction.context.lifecycle import LifecycleController, Tag
from compaction.mutation.ops import ContentNotFoundError, MultipleMatchesError

WriteFile = Callable[[str, str], Path]

POINT_SUMMARY = "\n".join(
    [
        "// Purpose: Geometry helpers.",
        "",
        "/// A point in 2D space.",
        "#[derive(Debug, Clone)]",
        "pub struct Point {",
        "    pub x: f64,",
        "    pub y: f64,",
        "}",
        "impl Point {",
        "    pub fn new(x: f64, y: f64) -> Self;",
        "}",
    ]
)


class TestRead:
    def test_read_returns_full_and_activates(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile, rust_source: str
    ) -> None:
        path = write_file("src/point.rs", rust_source)

        result = lifecycle.read("src/point.rs")

        assert result.text == f"// === src/point.rs [FULL] ===\n\n{rust_source}"
        assert result.tag is Tag.FULL
        assert result.tracked
        assert cache.get_active_file() == path

    def test_switching_summarizes_previous(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile, rust_source: str
    ) -> None:
        write_file("a.rs", rust_source)
        write_file("b.rs", "pub fn b() {}\n")

        lifecycle.read("a.rs")
        lifecycle.read("b.rs")

        entry = cache.get_summary("a.rs")
        assert entry is not None
        assert entry.summary == POINT_SUMMARY
        assert cache.is_active("b.rs")

    def test_rereading_active_does_not_summarize(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile, rust_source: str
    ) -> None:
        write_file("a.rs", rust_source)

        lifecycle.read("a.rs")
        lifecycle.read("a.rs")

        assert cache.get_summary("a.rs") is None

    def test_unsupported_passthrough(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("notes.txt", "hello\n")

        result = lifecycle.read("notes.txt")

        assert result.text == (
            "// === notes.txt [FULL] ===\n// (Unsupported file type - not tracked for compaction)\n\nhello\n"
        )
        assert not result.tracked
        assert cache.get_active_file() is None

    def test_missing_file_raises(self, lifecycle: LifecycleController) -> None:
        with pytest.raises(FileNotFoundError):
            lifecycle.read("missing.rs")

    def test_previous_deleted_is_skipped(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        first = write_file("a.rs", "pub fn a() {}\n")
        write_file("b.rs", "pub fn b() {}\n")
        lifecycle.read("a.rs")
        first.unlink()

        lifecycle.read("b.rs")

        assert cache.get_summary("a.rs") is None
        assert cache.is_active("b.rs")


class TestPeek:
    def test_peek_summarizes_without_switching(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile, rust_source: str
    ) -> None:
        write_file("a.rs", "pub fn a() {}\n")
        write_file("point.rs", rust_source)
        lifecycle.read("a.rs")

        result = lifecycle.peek("point.rs")

        assert result.text == f"// === point.rs [SUMMARY] ===\n\n{POINT_SUMMARY}"
        assert result.tag is Tag.SUMMARY
        assert cache.is_active("a.rs")
        assert cache.get_summary("point.rs") is not None

    def test_peek_active_returns_full(
        self, lifecycle: LifecycleController, write_file: WriteFile, rust_source: str
    ) -> None:
        write_file("point.rs", rust_source)
        lifecycle.read("point.rs")

        result = lifecycle.peek("point.rs")

        assert result.text == f"// === point.rs [FULL] ===\n// (This is the active file)\n\n{rust_source}"
        assert result.tag is Tag.FULL

    def test_peek_uses_fresh_cache(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("a.rs", "pub fn a() {}\n")
        cache.set_summary("a.rs", "cached text", "pub fn a() {}\n")

        result = lifecycle.peek("a.rs")

        assert result.text == "// === a.rs [SUMMARY] ===\n\ncached text"

    def test_peek_regenerates_stale_cache(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("a.rs", "pub fn b() {}\n")
        cache.set_summary("a.rs", "cached text", "pub fn a() {}\n")

        result = lifecycle.peek("a.rs")

        assert result.text == "// === a.rs [SUMMARY] ===\n\npub fn b();"

    def test_peek_crlf_summary_stays_fresh(
        self, lifecycle: LifecycleController, cache: ContextCache, project_root: Path
    ) -> None:
        (project_root / "b.rs").write_bytes(b"pub fn b() {}\r\npub fn c() {}\r\n")

        result = lifecycle.peek("b.rs")

        assert result.tag is Tag.SUMMARY
        assert not cache.is_stale("b.rs")

    def test_peek_parse_failure_falls_back_to_full(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("bad.rs", "pub fn broken( {\n")

        result = lifecycle.peek("bad.rs")

        header, note, *_ = result.text.split("\n")
        assert header == "// === bad.rs [FULL] ==="
        assert note.startswith("// (Could not generate summary (Parse error: Syntax error at line ")
        assert result.text.endswith("pub fn broken( {\n")
        assert not result.tracked
        assert cache.get_summary("bad.rs") is None

    def test_peek_unsupported(self, lifecycle: LifecycleController, write_file: WriteFile) -> None:
        write_file("README.md", "# Title\n")

        result = lifecycle.peek("README.md")

        assert result.text == (
            "// === README.md [FULL] ===\n// (Unsupported file type - returning full contents)\n\n# Title\n"
        )


class TestEdit:
    def test_edit_replaces_and_activates(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        path = write_file("a.rs", "pub fn old() {}\n")

        result = lifecycle.edit("a.rs", "old", "new")

        assert result.text == "Successfully edited a.rs"
        assert result.tracked
        assert path.read_text() == "pub fn new() {}\n"
        assert cache.is_active("a.rs")
        entry = cache.get_summary("a.rs")
        assert entry is not None
        assert entry.summary == "pub fn new();"

    def test_edit_keeps_crlf_line_endings(self, lifecycle: LifecycleController, project_root: Path) -> None:
        path = project_root / "a.rs"
        path.write_bytes(b"pub fn a() {}\r\npub fn b() {}\r\n")

        lifecycle.edit("a.rs", "fn a", "fn z")

        assert path.read_bytes() == b"pub fn z() {}\r\npub fn b() {}\r\n"

    def test_edit_matches_across_crlf(self, lifecycle: LifecycleController, project_root: Path) -> None:
        path = project_root / "c.rs"
        path.write_bytes(b"pub fn a() {}\r\npub fn b() {}\r\n")

        lifecycle.edit("c.rs", "{}\r\npub fn b", "{}\r\n\r\npub fn b")

        assert path.read_bytes() == b"pub fn a() {}\r\n\r\npub fn b() {}\r\n"

    def test_edit_not_found_leaves_file(self, lifecycle: LifecycleController, write_file: WriteFile) -> None:
        path = write_file("a.rs", "pub fn a() {}\n")

        with pytest.raises(ContentNotFoundError):
            lifecycle.edit("a.rs", "missing", "x")

        assert path.read_text() == "pub fn a() {}\n"

    def test_edit_ambiguous_reports_count(self, lifecycle: LifecycleController, write_file: WriteFile) -> None:
        path = write_file("a.rs", "fn a() {}\nfn a() {}\n")

        with pytest.raises(MultipleMatchesError) as exc_info:
            lifecycle.edit("a.rs", "fn a", "fn b")

        assert exc_info.value.count == 2
        assert exc_info.value.lines == [1, 2]
        assert path.read_text() == "fn a() {}\nfn a() {}\n"

    def test_edit_unsupported(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("notes.txt", "one two")

        result = lifecycle.edit("notes.txt", "two", "three")

        assert result.text == "Successfully edited notes.txt (unsupported file type - not tracked)"
        assert cache.get_active_file() is None


class TestWrite:
    def test_write_creates_parents_and_activates(
        self, lifecycle: LifecycleController, cache: ContextCache, project_root: Path
    ) -> None:
        result = lifecycle.write("deep/dir/new.rs", "pub fn n() {}\n")

        assert result.text == "Successfully wrote deep/dir/new.rs"
        assert (project_root / "deep" / "dir" / "new.rs").read_text() == "pub fn n() {}\n"
        assert cache.is_active("deep/dir/new.rs")

    def test_write_switch_summarizes_previous(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("a.rs", "pub fn a() {}\n")
        lifecycle.read("a.rs")

        lifecycle.write("b.rs", "pub fn b() {}\n")

        entry = cache.get_summary("a.rs")
        assert entry is not None
        assert entry.summary == "pub fn a();"

    def test_write_unsupported(self, lifecycle: LifecycleController, cache: ContextCache) -> None:
        result = lifecycle.write("data.json", "{}")

        assert result.text == "Successfully wrote data.json (unsupported file type - not tracked)"
        assert not result.tracked
        assert cache.get_active_file() is None


class TestForget:
    def test_forget_tracked(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("a.rs", "pub fn a() {}\n")
        lifecycle.peek("a.rs")

        result = lifecycle.forget("a.rs")

        assert result.text == "Removed a.rs from tracking"
        assert cache.get_summary("a.rs") is None

    def test_forget_untracked(self, lifecycle: LifecycleController) -> None:
        assert lifecycle.forget("a.rs").text == "a.rs was not being tracked"

    def test_forget_active_clears_it(
        self, lifecycle: LifecycleController, cache: ContextCache, write_file: WriteFile
    ) -> None:
        write_file("a.rs", "pub fn a() {}\n")
        lifecycle.read("a.rs")

        lifecycle.forget("a.rs")

        assert cache.get_active_file() is None


class TestStatus:
    def test_empty(self, lifecycle: LifecycleController) -> None:
        assert lifecycle.status().text == "\n".join(
            ["Context Status", "==============", "", "Active: (none)", "", "Cached Summaries: (none)"]
        )

    def test_active_and_cached(self, lifecycle: LifecycleController, write_file: WriteFile) -> None:
        write_file("a.rs", "pub fn a() {}\n")
        write_file("b.rs", "pub fn b() {}\n")
        lifecycle.read("a.rs")
        lifecycle.read("b.rs")

        text = lifecycle.status().text

        assert text == "\n".join(
            [
                "Context Status",
                "==============",
                "",
                "Active: b.rs (full, 14 B)",
                "",
                "Cached Summaries:",
                f"  {'a.rs':<40} {'11 B':>8} (was 14 B, saved 3 B)",
                "",
                "Total Context:        25 B",
                "Without Compaction:   28 B",
                "Savings:              3 B (11%)",
            ]
        )

    def test_active_file_deleted(self, lifecycle: LifecycleController, write_file: WriteFile) -> None:
        path = write_file("a.rs", "pub fn a() {}\n")
        lifecycle.read("a.rs")
        path.unlink()

        assert "Active: a.rs (file not found)" in lifecycle.status().text

    def test_status_is_untagged(self, lifecycle: LifecycleController) -> None:
        result = lifecycle.status()

        assert result.tag is None
        assert not result.tracked
