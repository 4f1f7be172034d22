"""Comprehensive tests for well-formedness validation."""

import pytest

from strict_transcoder.character.units import CodeUnits, CodeUnitWidth
from strict_transcoder.character.validation import (
    SequenceValidator,
    UTF8Validator,
    UTF16Validator,
    UTF32Validator,
    check,
    is_continuation_byte,
    utf8_sequence_length,
    validate,
)
from strict_transcoder.shared.errors import (
    CodePointOutOfRangeError,
    FailureReason,
    MalformedUtf8Error,
    MalformedUtf16Error,
)


class TestUtf8Helpers:
    """Test lead byte classification."""

    @pytest.mark.parametrize("lead,length", [
        (0x41, 1), (0x7F, 1),
        (0xC2, 2), (0xDF, 2),
        (0xE0, 3), (0xEF, 3),
        (0xF0, 4), (0xF4, 4),
        (0x80, None), (0xBF, None), (0xF8, None), (0xFF, None),
    ])
    def test_sequence_length(self, lead, length):
        assert utf8_sequence_length(lead) == length

    def test_continuation_byte(self):
        assert is_continuation_byte(0x80)
        assert is_continuation_byte(0xBF)
        assert not is_continuation_byte(0x7F)
        assert not is_continuation_byte(0xC0)


class TestUTF8Validator:
    """Test UTF-8 validation rules."""

    @pytest.mark.parametrize("data", [
        b"",
        b"Hello",
        "ñ".encode("utf-8"),
        "€".encode("utf-8"),
        "\U0001F600".encode("utf-8"),
        b"\xe0\xa0\x80",          # smallest three-byte scalar
        b"\xf0\x90\x80\x80",      # smallest four-byte scalar
    ])
    def test_well_formed(self, data):
        UTF8Validator().validate(CodeUnits.utf8(data))

    @pytest.mark.parametrize("data,position", [
        (b"\x80", 0),
        (b"A\xbf", 1),
        (b"\xf8\x80\x80\x80\x80", 0),
        (b"\xff", 0),
    ])
    def test_invalid_lead_byte(self, data, position):
        with pytest.raises(MalformedUtf8Error) as exc_info:
            UTF8Validator().validate(CodeUnits.utf8(data))
        assert exc_info.value.reason is FailureReason.INVALID_LEAD_BYTE
        assert exc_info.value.position == position

    @pytest.mark.parametrize("data,position", [
        (b"\xc3", 1),             # truncated two-byte run
        (b"\xe2\x82", 2),         # truncated three-byte run
        (b"\xe2\x41\xac", 1),     # ASCII where a continuation belongs
        (b"AB\xf0\x9f\x98", 5),
    ])
    def test_missing_continuation(self, data, position):
        with pytest.raises(MalformedUtf8Error) as exc_info:
            UTF8Validator().validate(CodeUnits.utf8(data))
        assert exc_info.value.reason is FailureReason.MISSING_CONTINUATION
        assert exc_info.value.position == position

    @pytest.mark.parametrize("data", [
        b"\xc0\x80",
        b"\xc1\xbf",
        b"\xe0\x80\x80",
        b"\xe0\x9f\xbf",
        b"\xf0\x80\x80\x80",
        b"\xf0\x8f\xbf\xbf",
    ])
    def test_overlong(self, data):
        with pytest.raises(MalformedUtf8Error) as exc_info:
            UTF8Validator().validate(CodeUnits.utf8(data))
        assert exc_info.value.reason is FailureReason.OVERLONG_ENCODING
        assert exc_info.value.position == 0

    def test_overlong_nul_message(self):
        with pytest.raises(MalformedUtf8Error, match="overlong encoding at position 2"):
            UTF8Validator().validate(CodeUnits.utf8(b"AB\xc0\x80"))

    def test_truncated_overlong_leader_reports_missing_continuation(self):
        with pytest.raises(MalformedUtf8Error) as exc_info:
            UTF8Validator().validate(CodeUnits.utf8(b"\xe0"))
        assert exc_info.value.reason is FailureReason.MISSING_CONTINUATION

    def test_stops_at_first_error(self):
        with pytest.raises(MalformedUtf8Error) as exc_info:
            UTF8Validator().validate(CodeUnits.utf8(b"ok\x80\xc0\x80"))
        assert exc_info.value.position == 2


class TestUTF16Validator:
    """Test surrogate pairing rules."""

    @pytest.mark.parametrize("units", [
        [],
        [0x0041, 0x00F1],
        [0xD83D, 0xDE00],
        [0xDBFF, 0xDFFF],
        [0xFFFF],
    ])
    def test_well_formed(self, units):
        UTF16Validator().validate(CodeUnits.utf16(units))

    def test_lone_high_at_end(self):
        with pytest.raises(MalformedUtf16Error) as exc_info:
            UTF16Validator().validate(CodeUnits.utf16([0x41, 0xD800]))
        assert exc_info.value.reason is FailureReason.LONE_HIGH_SURROGATE
        assert exc_info.value.position == 1

    def test_high_followed_by_non_low(self):
        with pytest.raises(MalformedUtf16Error) as exc_info:
            UTF16Validator().validate(CodeUnits.utf16([0xD800, 0x0041]))
        assert exc_info.value.reason is FailureReason.LONE_HIGH_SURROGATE
        assert exc_info.value.position == 0

    def test_two_highs(self):
        with pytest.raises(MalformedUtf16Error) as exc_info:
            UTF16Validator().validate(CodeUnits.utf16([0xD800, 0xD800]))
        assert exc_info.value.position == 0

    def test_lone_low(self):
        with pytest.raises(MalformedUtf16Error) as exc_info:
            UTF16Validator().validate(CodeUnits.utf16([0xDC00]))
        assert exc_info.value.reason is FailureReason.LONE_LOW_SURROGATE
        assert exc_info.value.position == 0

    def test_reversed_pair(self):
        with pytest.raises(MalformedUtf16Error) as exc_info:
            UTF16Validator().validate(CodeUnits.utf16([0xDE00, 0xD83D]))
        assert exc_info.value.reason is FailureReason.LONE_LOW_SURROGATE


class TestUTF32Validator:
    """Test scalar range rules."""

    def test_well_formed(self):
        UTF32Validator().validate(CodeUnits.utf32([0, 0x41, 0x10FFFF]))

    def test_surrogate_values_accepted(self):
        """Only the range is checked for UTF-32."""
        UTF32Validator().validate(CodeUnits.utf32([0xD800]))

    def test_out_of_range(self):
        with pytest.raises(CodePointOutOfRangeError) as exc_info:
            UTF32Validator().validate(CodeUnits.utf32([0x41, 0x110000]))
        assert exc_info.value.reason is FailureReason.CODE_POINT_OUT_OF_RANGE
        assert exc_info.value.position == 1
        assert exc_info.value.value == 0x110000


class TestSequenceValidator:
    """Test width dispatch and the non-raising check."""

    def test_dispatch_by_width(self):
        validator = SequenceValidator()
        validator.validate(CodeUnits.utf8(b"ok"))
        with pytest.raises(MalformedUtf16Error):
            validator.validate(CodeUnits.utf16([0xDC00]))

    def test_check_success(self):
        result = check(CodeUnits.utf32([0x1F600]))
        assert result.valid
        assert result.width is CodeUnitWidth.UTF32

    def test_check_failure(self):
        result = check(CodeUnits.utf8(b"\xc0\x80"))
        assert not result.valid
        assert result.reason is FailureReason.OVERLONG_ENCODING
        assert result.position == 0
        assert "overlong" in result.message

    def test_module_validate(self):
        validate(CodeUnits.utf16([0xD83D, 0xDE00]))
        with pytest.raises(MalformedUtf16Error):
            validate(CodeUnits.utf16([0xD800]))
