"""Tests for the error hierarchy."""

import pytest

from keyfmt.core.errors import (
    BadContainerError,
    DecryptionError,
    KeyfmtError,
    MissingInputError,
    NotSupportedError,
    TypeMismatchError,
    UnknownAlgorithmError,
    UnknownKeyTypeError,
)


class TestErrors:
    def test_missing_input_message(self) -> None:
        err = MissingInputError("password")
        assert err.what == "password"
        assert str(err) == "Missing input: password"

    def test_default_messages(self) -> None:
        assert str(UnknownKeyTypeError()) == "Unknown key type"
        assert "public key" in str(TypeMismatchError())

    @pytest.mark.parametrize(
        ("err", "parent"),
        [
            (DecryptionError, BadContainerError),
            (UnknownAlgorithmError, NotSupportedError),
            (BadContainerError, KeyfmtError),
            (TypeMismatchError, KeyfmtError),
        ],
    )
    def test_hierarchy(self, err: type, parent: type) -> None:
        assert issubclass(err, parent)
