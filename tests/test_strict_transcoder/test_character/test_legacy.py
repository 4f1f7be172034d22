"""Tests for lossy legacy encodings and the ISO-10646 form."""

import pytest

from strict_transcoder.character.conversion import encode_text
from strict_transcoder.character.encoding import Encoding
from strict_transcoder.character.legacy import (
    count_substitutions,
    iso_8859_1_bytes_to_utf16,
    iso_10646_bytes_to_utf16,
    iso_10646_bytes_to_utf32,
    legacy_bytes_to_utf16,
    us_ascii_bytes_to_utf16,
    utf16_to_iso_8859_1_bytes,
    utf16_to_iso_10646_bytes,
    utf16_to_legacy_bytes,
    utf16_to_us_ascii_bytes,
    utf32_to_iso_10646_bytes,
)
from strict_transcoder.character.units import CodeUnits
from strict_transcoder.shared.errors import InvalidBufferLengthError


class TestUsAscii:
    """Test US-ASCII mapping."""

    def test_non_ascii_substituted(self):
        assert utf16_to_us_ascii_bytes(encode_text("Hello, ñ")) == b"Hello, ?"

    def test_boundary(self):
        assert utf16_to_us_ascii_bytes([0x7F, 0x80]) == b"\x7f?"

    def test_surrogate_pair_becomes_two_substitutions(self):
        assert utf16_to_us_ascii_bytes(encode_text("\U0001F600")) == b"??"

    def test_lone_surrogate_does_not_raise(self):
        assert utf16_to_us_ascii_bytes([0x41, 0xD800]) == b"A?"

    def test_custom_substitute(self):
        assert utf16_to_us_ascii_bytes(encode_text("né"), substitute="_") == b"n_"

    @pytest.mark.parametrize("substitute", ["", "ab", "é"])
    def test_invalid_substitute(self, substitute):
        with pytest.raises(ValueError, match="single ASCII character"):
            utf16_to_us_ascii_bytes([0x41], substitute=substitute)

    def test_decode_widens_bytes(self):
        assert us_ascii_bytes_to_utf16(b"Hi") == CodeUnits.utf16([0x48, 0x69])


class TestIso88591:
    """Test ISO-8859-1 mapping."""

    def test_latin1_range_kept(self):
        assert utf16_to_iso_8859_1_bytes(encode_text("Hello, ñ")) == b"Hello, \xf1"

    def test_above_latin1_substituted(self):
        assert utf16_to_iso_8859_1_bytes(encode_text("€ÿ")) == b"?\xff"

    def test_decode_is_identity_per_byte(self):
        data = bytes(range(256))
        assert iso_8859_1_bytes_to_utf16(data).units == tuple(range(256))


class TestLegacyDispatch:
    """Test the encoding-driven entry points."""

    def test_utf16_to_legacy_bytes(self):
        units = encode_text("ñ€")
        assert utf16_to_legacy_bytes(units, Encoding.US_ASCII) == b"??"
        assert utf16_to_legacy_bytes(units, Encoding.ISO_8859_1) == b"\xf1?"

    def test_non_legacy_encoding_rejected(self):
        with pytest.raises(ValueError, match="not a legacy"):
            utf16_to_legacy_bytes([0x41], Encoding.UTF8)
        with pytest.raises(ValueError, match="not a legacy"):
            legacy_bytes_to_utf16(b"A", Encoding.UTF16_BE)

    def test_legacy_bytes_to_utf16(self):
        assert legacy_bytes_to_utf16(b"\xe9", Encoding.ISO_8859_1).units == (0xE9,)

    def test_count_substitutions(self):
        units = encode_text("añ€\U0001F600")
        assert count_substitutions(units, Encoding.US_ASCII) == 4
        assert count_substitutions(units, Encoding.ISO_8859_1) == 3


class TestIso10646:
    """ISO-10646 is big-endian UTF-32 and lossless."""

    def test_encode(self):
        assert utf32_to_iso_10646_bytes([0x41]) == b"\x00\x00\x00\x41"
        assert utf16_to_iso_10646_bytes(encode_text("\U0001F600")) == b"\x00\x01\xf6\x00"

    def test_decode(self):
        assert iso_10646_bytes_to_utf32(b"\x00\x00\x00\x41").units == (0x41,)
        assert iso_10646_bytes_to_utf16(b"\x00\x01\xf6\x00").units == (0xD83D, 0xDE00)

    def test_invalid_length(self):
        with pytest.raises(InvalidBufferLengthError):
            iso_10646_bytes_to_utf32(b"\x00\x00\x41")
