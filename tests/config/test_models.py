"""Tests for configuration models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from compaction.config.models import CompactionConfig, ContextConfig, LogOutputConfig


class TestContextConfig:
    def test_defaults(self) -> None:
        config = ContextConfig()

        assert config.max_tracked_files == 50
        assert config.max_doc_lines == 5
        assert config.project_root.is_absolute()

    def test_rejects_zero_tracked_files(self) -> None:
        with pytest.raises(ValidationError):
            ContextConfig(max_tracked_files=0)

    def test_project_root_is_made_absolute(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        config = ContextConfig(project_root=Path("."))

        assert config.project_root == tmp_path.resolve()


class TestLogOutputConfig:
    def test_console_destinations(self) -> None:
        assert LogOutputConfig(destination="stderr").destination == "stderr"

    def test_relative_file_destination_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LogOutputConfig(destination="logs/out.log")


class TestCompactionConfig:
    def test_sections_present(self) -> None:
        config = CompactionConfig()

        assert config.logging.level == "INFO"
        assert config.server.log_file is None
