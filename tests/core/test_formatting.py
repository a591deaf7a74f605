"""Tests for size and header formatting."""

import pytest

from compaction.core.formatting import byte_length, format_header, format_percent, format_size


class TestFormatSize:
    @pytest.mark.parametrize(
        ("num_bytes", "expected"),
        [
            (0, "0 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.0 KB"),
            (2048, "2.0 KB"),
            (1536, "1.5 KB"),
            (1024 * 1024, "1.0 MB"),
            (3 * 1024 * 1024, "3.0 MB"),
        ],
    )
    def test_units(self, num_bytes: int, expected: str) -> None:
        assert format_size(num_bytes) == expected


class TestFormatPercent:
    def test_zero_whole_is_zero(self) -> None:
        assert format_percent(10, 0) == "0"

    def test_rounds_to_whole_number(self) -> None:
        assert format_percent(1, 3) == "33"
        assert format_percent(2, 3) == "67"


class TestByteLength:
    def test_counts_encoded_bytes(self) -> None:
        assert byte_length("abc") == 3
        assert byte_length("é") == 2


class TestFormatHeader:
    def test_header_line(self) -> None:
        assert format_header("src/lib.rs", "SUMMARY") == "// === src/lib.rs [SUMMARY] ==="
