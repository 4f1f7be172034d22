"""Tests for the configured transcoder facade."""

import logging

import pytest

from strict_transcoder.api import Transcoder, decode, encode, transcode
from strict_transcoder.api.transcoder import _default
from strict_transcoder.character.encoding import Encoding, EncodingFamily
from strict_transcoder.character.units import CodeUnits, CodeUnitWidth
from strict_transcoder.character.wide import CodecWideCharService, Utf16WidePlatform
from strict_transcoder.shared import (
    DiagnosticSeverity,
    EncodingMismatchError,
    FailureReason,
    MalformedUtf8Error,
    TranscoderConfig,
)

GRINNING_FACE = CodeUnits.utf16([0xD83D, 0xDE00])


@pytest.fixture
def strict():
    return Transcoder(TranscoderConfig.strict())


@pytest.fixture
def lenient():
    return Transcoder(TranscoderConfig.lenient())


class TestTranscoderBasics:
    """Test construction and validation."""

    def test_default_config(self):
        transcoder = Transcoder()
        assert transcoder.config == TranscoderConfig()
        assert transcoder.platform is not None

    def test_validate_never_raises(self, strict):
        result = strict.validate(CodeUnits.utf16([0xD800]))
        assert not result.valid
        assert result.reason is FailureReason.LONE_HIGH_SURROGATE

    def test_validate_logs_failure(self, strict, caplog):
        with caplog.at_level(logging.WARNING, logger="strict_transcoder.api.transcoder"):
            strict.validate(CodeUnits.utf8(b"\xc0\x80"))
        assert any("Validation failed" in r.getMessage() for r in caplog.records)


class TestTranscode:
    """Test facade transcoding."""

    def test_success_result(self, strict):
        result = strict.transcode(CodeUnits.utf32([0x1F600]), CodeUnitWidth.UTF16)

        assert result.success
        assert result.output == GRINNING_FACE
        assert result.metrics.input_units == 1
        assert result.metrics.output_units == 2
        assert result.metrics.processing_time_ms >= 0
        assert result.error is None

    def test_strict_raises(self, strict):
        with pytest.raises(MalformedUtf8Error):
            strict.transcode(CodeUnits.utf8(b"\xc0\x80"), CodeUnitWidth.UTF16)

    def test_lenient_returns_failure(self, lenient):
        result = lenient.transcode(CodeUnits.utf8(b"\xc0\x80"), CodeUnitWidth.UTF16)

        assert not result.success
        assert result.output is None
        assert result.reason is FailureReason.OVERLONG_ENCODING
        assert result.diagnostics[0].severity is DiagnosticSeverity.ERROR
        assert result.diagnostics[0].position == 0

    def test_diagnostics_can_be_disabled(self):
        transcoder = Transcoder(
            TranscoderConfig(raise_on_error=False, enable_diagnostics=False)
        )
        result = transcoder.transcode(CodeUnits.utf16([0xDC00]), CodeUnitWidth.UTF8)
        assert not result.success
        assert result.diagnostics == []

    def test_correlation_id_on_diagnostics(self):
        transcoder = Transcoder(
            TranscoderConfig(raise_on_error=False, correlation_id="req-7")
        )
        result = transcoder.transcode(CodeUnits.utf16([0xDC00]), CodeUnitWidth.UTF8)
        assert result.diagnostics[0].correlation_id == "req-7"


class TestEncode:
    """Test facade serialization."""

    def test_encode_by_enum(self, strict):
        assert strict.encode(GRINNING_FACE, Encoding.UTF8).output == b"\xf0\x9f\x98\x80"

    def test_encode_by_name_uses_configured_order(self):
        big = Transcoder(TranscoderConfig())
        little = Transcoder(TranscoderConfig(utf16_byte_order="little"))
        units = CodeUnits.utf16([0x41])

        assert big.encode(units, "utf-16").output == b"\x00A"
        assert little.encode(units, "utf-16").output == b"A\x00"

    def test_configured_bom(self):
        transcoder = Transcoder(TranscoderConfig.windows_interop())
        assert transcoder.encode(CodeUnits.utf16([0x41]), "utf-16").output == b"\xff\xfeA\x00"

    def test_configured_bom_skipped_where_undefined(self):
        transcoder = Transcoder(TranscoderConfig(add_bom=True))
        result = transcoder.encode(CodeUnits.utf16([0x41]), Encoding.UTF32_BE)
        assert result.output == b"\x00\x00\x00A"

    def test_explicit_bom_override(self):
        transcoder = Transcoder(TranscoderConfig(add_bom=True))
        assert transcoder.encode(CodeUnits.utf16([0x41]), "utf-8", add_bom=False).output == b"A"

    def test_lossy_encode_warns(self, strict):
        units = CodeUnits.utf16([0x48, 0xF1])
        result = strict.encode(units, Encoding.US_ASCII)

        assert result.success
        assert result.output == b"H?"
        assert result.metrics.substitutions == 1
        assert result.has_warnings

    @pytest.mark.parametrize("units", [
        CodeUnits.utf32([0x48, 0xF1]),
        CodeUnits.utf8("H\u00f1".encode("utf-8")),
    ])
    def test_lossy_encode_counts_any_input_width(self, strict, units):
        result = strict.encode(units, Encoding.US_ASCII)

        assert result.output == b"H?"
        assert result.metrics.substitutions == 1
        assert result.has_warnings

    def test_lossy_encode_counts_each_surrogate(self, strict):
        result = strict.encode(CodeUnits.utf32([0x1F600]), Encoding.ISO_8859_1)
        assert result.output == b"??"
        assert result.metrics.substitutions == 2

    def test_lossy_encode_rejects_malformed_input(self, lenient):
        result = lenient.encode(CodeUnits.utf8(b"\xc0\x80"), Encoding.US_ASCII)
        assert not result.success
        assert result.reason is FailureReason.OVERLONG_ENCODING

    def test_lossless_legacy_encode_has_no_warning(self, strict):
        result = strict.encode(CodeUnits.utf16([0x48, 0xF1]), Encoding.ISO_8859_1)
        assert result.output == b"H\xf1"
        assert not result.has_warnings

    def test_configured_substitution(self):
        transcoder = Transcoder(TranscoderConfig(substitution_char="_"))
        assert transcoder.encode(CodeUnits.utf16([0x20AC]), "ascii").output == b"_"

    def test_unknown_encoding_name(self, strict):
        with pytest.raises(ValueError, match="Unsupported encoding"):
            strict.encode(GRINNING_FACE, "klingon")


class TestDecode:
    """Test facade deserialization."""

    def test_family_strips_and_reports_bom(self, strict):
        result = strict.decode(b"\xff\xfeA\x00", EncodingFamily.UTF16)

        assert result.output == CodeUnits.utf16([0x41])
        assert result.detected_encoding == "utf-16-le"
        assert result.diagnostics[0].severity is DiagnosticSeverity.INFO

    def test_family_names(self, strict):
        assert strict.decode(b"\xef\xbb\xbfA", "utf-8").output == CodeUnits.utf16([0x41])
        assert strict.decode(b"\x00\x00\x00A", "utf32").output == CodeUnits.utf32([0x41])

    def test_exact_encoding(self, strict):
        result = strict.decode(b"A\x00", Encoding.UTF16_LE)
        assert result.output == CodeUnits.utf16([0x41])
        assert result.detected_encoding is None

    def test_legacy_decode(self, strict):
        assert strict.decode(b"\xe9", "iso-8859-1").output == CodeUnits.utf16([0xE9])

    def test_mismatch_lenient(self, lenient):
        result = lenient.decode(b"\xff\xfeA\x00", "utf-8")
        assert not result.success
        assert result.reason is FailureReason.ENCODING_MISMATCH

    def test_mismatch_strict(self, strict):
        with pytest.raises(EncodingMismatchError):
            strict.decode(b"\xfe\xff\x00A", EncodingFamily.UTF8)

    def test_invalid_length(self, lenient):
        result = lenient.decode(b"\x00\x00\x41", "utf-32")
        assert result.reason is FailureReason.INVALID_BUFFER_LENGTH


class TestWide:
    """Test wide conversions through the facade."""

    def test_wide_round_trip(self):
        platform = Utf16WidePlatform(CodecWideCharService())
        transcoder = Transcoder(platform=platform)

        wide = transcoder.to_wide(CodeUnits.utf32([0x1F600])).output
        assert wide == GRINNING_FACE
        back = transcoder.from_wide(wide, CodeUnitWidth.UTF32).output
        assert back == CodeUnits.utf32([0x1F600])


class TestModuleFunctions:
    """Test the level 1 functions."""

    def test_transcode(self):
        assert transcode(CodeUnits.utf32([0x1F600]), CodeUnitWidth.UTF16) == GRINNING_FACE

    def test_encode_decode(self):
        data = encode(GRINNING_FACE, Encoding.UTF16_LE, add_bom=True)
        assert data == b"\xff\xfe\x3d\xd8\x00\xde"
        assert decode(data) == GRINNING_FACE

    def test_raise_on_malformed(self):
        with pytest.raises(MalformedUtf8Error):
            decode(b"\xc0\x80", "utf-8")

    def test_default_transcoder_is_shared(self):
        assert _default() is _default()
        assert _default().config.raise_on_error
