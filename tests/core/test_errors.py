"""Tests for error types and codes."""

import pytest

from compaction.core.errors import CompactionError, ConfigError, ErrorCode, ExtractionError


class TestErrorCode:
    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.GRAMMAR_UNAVAILABLE, 3000),
            (ErrorCode.SYNTAX_ERROR, 3000),
            (ErrorCode.EXTRACTION_FAILED, 3000),
        ],
    )
    def test_code_in_its_range(self, code: ErrorCode, expected_range: int) -> None:
        assert expected_range <= code.value < expected_range + 1000


class TestCompactionError:
    def test_to_dict(self) -> None:
        error = CompactionError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        assert error.to_dict() == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "details": {"key": "value"},
        }

    def test_str_is_human_readable(self) -> None:
        error = CompactionError(code=ErrorCode.EXTRACTION_FAILED, message="Something broke")

        assert str(error) == "[3003] EXTRACTION_FAILED: Something broke"

    def test_subclasses_are_catchable_as_base(self) -> None:
        with pytest.raises(CompactionError):
            raise ExtractionError.failed("rust", "boom")


class TestConfigError:
    def test_parse_error_carries_path(self) -> None:
        error = ConfigError.parse_error("/x/config.yaml", "bad indent")

        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/x/config.yaml" in error.message
        assert error.details == {"path": "/x/config.yaml", "reason": "bad indent"}

    def test_invalid_value_stringifies_value(self) -> None:
        error = ConfigError.invalid_value("context.max_tracked_files", 0, "too small")

        assert error.details["value"] == "0"
        assert "context.max_tracked_files" in error.message


class TestExtractionError:
    def test_syntax_error_message_names_position(self) -> None:
        error = ExtractionError.syntax_error(3, 7)

        assert error.message == "Syntax error at line 3, column 7"
        assert error.details == {"line": 3, "column": 7}

    def test_grammar_unavailable(self) -> None:
        error = ExtractionError.grammar_unavailable("rust", "tree_sitter_rust")

        assert error.code == ErrorCode.GRAMMAR_UNAVAILABLE
        assert "tree_sitter_rust" in error.message

    def test_failed_names_language(self) -> None:
        error = ExtractionError.failed("python", "ValueError: bad")

        assert error.details == {"language": "python", "reason": "ValueError: bad"}
