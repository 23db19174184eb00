"""Tests for password argument parsing."""

from pathlib import Path

import pytest

from keyfmt.cli.passwords import parse_password_arg
from keyfmt.core.errors import BadPasswordArgError, InputIOError


class TestParsePasswordArg:
    """Tests for pass: and file: password sources."""

    def test_none(self) -> None:
        assert parse_password_arg(None) is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("pass:abc", "abc"), ("PASS:abc", "abc"), ("pass:a:b", "a:b"), ("pass:", "")],
    )
    def test_literal(self, value: str, expected: str) -> None:
        assert parse_password_arg(value) == expected

    def test_file_first_line(self, tmp_path: Path) -> None:
        path = tmp_path / "pw.txt"
        path.write_text("first\nsecond\n")
        assert parse_password_arg(f"file:{path}") == "first"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "pw.txt"
        path.write_text("")
        assert parse_password_arg(f"file:{path}") == ""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InputIOError):
            parse_password_arg(f"file:{tmp_path / 'absent'}")

    @pytest.mark.parametrize("value", ["abc", "env:HOME", ""])
    def test_bad_form(self, value: str) -> None:
        with pytest.raises(BadPasswordArgError):
            parse_password_arg(value)
