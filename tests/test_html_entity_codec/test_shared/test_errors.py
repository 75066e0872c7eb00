"""Tests for the decode error taxonomy."""

import pytest

from html_entity_codec.shared.errors import DecodeError, DecodeErrorKind


class TestDecodeErrorKind:
    """Test the DecodeErrorKind enum."""

    def test_all_kinds_present(self):
        """Test the complete set of error kinds."""
        assert {kind.name for kind in DecodeErrorKind} == {
            "UNKNOWN_ENTITY",
            "MALFORMED_NUM_ESCAPE",
            "INVALID_CHARACTER",
            "PREMATURE_END",
            "ENCODING_ERROR",
            "IO_ERROR",
        }

    @pytest.mark.parametrize("kind,expected", [
        (DecodeErrorKind.ENCODING_ERROR, True),
        (DecodeErrorKind.IO_ERROR, True),
        (DecodeErrorKind.UNKNOWN_ENTITY, False),
        (DecodeErrorKind.MALFORMED_NUM_ESCAPE, False),
        (DecodeErrorKind.INVALID_CHARACTER, False),
        (DecodeErrorKind.PREMATURE_END, False),
    ])
    def test_is_stream_failure(self, kind, expected):
        """Test which kinds come from the byte source or sink."""
        assert kind.is_stream_failure is expected


class TestDecodeError:
    """Test the DecodeError exception."""

    def test_attributes(self):
        """Test that position, kind and fragment are exposed."""
        error = DecodeError(4, DecodeErrorKind.UNKNOWN_ENTITY, "&nosuch;")

        assert error.position == 4
        assert error.kind is DecodeErrorKind.UNKNOWN_ENTITY
        assert error.fragment == "&nosuch;"

    def test_message_with_fragment(self):
        """Test the message names the problem, position and fragment."""
        error = DecodeError(4, DecodeErrorKind.UNKNOWN_ENTITY, "&nosuch;")

        assert str(error) == "unknown named entity at position 4 ('&nosuch;')"

    def test_message_without_fragment(self):
        """Test the message for stream failures."""
        error = DecodeError(0, DecodeErrorKind.IO_ERROR)

        assert str(error) == "I/O error at position 0"
        assert error.fragment is None

    def test_equality_ignores_fragment(self):
        """Test that errors compare by position and kind."""
        first = DecodeError(2, DecodeErrorKind.PREMATURE_END, "&am")
        second = DecodeError(2, DecodeErrorKind.PREMATURE_END)

        assert first == second
        assert hash(first) == hash(second)
        assert first != DecodeError(3, DecodeErrorKind.PREMATURE_END)
        assert first != DecodeError(2, DecodeErrorKind.UNKNOWN_ENTITY)

    def test_not_equal_to_other_types(self):
        """Test comparison against unrelated objects."""
        assert DecodeError(0, DecodeErrorKind.IO_ERROR) != (0, DecodeErrorKind.IO_ERROR)

    def test_repr(self):
        """Test the debugging representation."""
        error = DecodeError(7, DecodeErrorKind.MALFORMED_NUM_ESCAPE)

        assert repr(error) == "DecodeError(position=7, kind=MALFORMED_NUM_ESCAPE)"

    def test_is_exception(self):
        """Test that DecodeError can be raised and caught."""
        with pytest.raises(DecodeError) as exc_info:
            raise DecodeError(1, DecodeErrorKind.ENCODING_ERROR)

        assert exc_info.value.kind is DecodeErrorKind.ENCODING_ERROR
