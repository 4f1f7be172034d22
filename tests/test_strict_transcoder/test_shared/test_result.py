"""Tests for result objects and diagnostics."""

import pytest

from strict_transcoder.character.units import CodeUnitWidth
from strict_transcoder.shared.errors import FailureReason, MalformedUtf8Error
from strict_transcoder.shared.result import (
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    ValidationResult,
)


class TestDiagnosticEntry:
    """Test DiagnosticEntry validation."""

    def test_creation(self):
        entry = DiagnosticEntry(
            severity=DiagnosticSeverity.WARNING,
            message="lossy",
            component="transcoder",
            position=4,
        )
        assert entry.severity is DiagnosticSeverity.WARNING
        assert entry.position == 4
        assert entry.timestamp > 0

    def test_empty_message_rejected(self):
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "transcoder")

    def test_empty_component_rejected(self):
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "note", "")


class TestPerformanceMetrics:
    """Test calculated performance metrics."""

    def test_units_per_second(self):
        metrics = PerformanceMetrics(processing_time_ms=100.0, input_units=1000)
        assert metrics.units_per_second == 10000.0

    def test_units_per_second_zero_time(self):
        assert PerformanceMetrics(input_units=10).units_per_second == 0.0

    def test_expansion_ratio(self):
        metrics = PerformanceMetrics(input_units=2, output_units=4)
        assert metrics.expansion_ratio == 2.0
        assert PerformanceMetrics().expansion_ratio == 0.0


class TestValidationResult:
    """Test the validation outcome value."""

    def test_success(self):
        result = ValidationResult.success(CodeUnitWidth.UTF8)
        assert result.valid is True
        assert bool(result) is True
        assert result.reason is None
        assert result.position is None
        result.raise_for_failure()

    def test_failure_copies_error_details(self):
        error = MalformedUtf8Error("overlong", FailureReason.OVERLONG_ENCODING, 0)
        result = ValidationResult.failure(CodeUnitWidth.UTF8, error)

        assert result.valid is False
        assert not result
        assert result.reason is FailureReason.OVERLONG_ENCODING
        assert result.position == 0
        assert result.message == "overlong"
        assert result.error is error

    def test_raise_for_failure(self):
        error = MalformedUtf8Error("bad", FailureReason.INVALID_LEAD_BYTE, 1)
        result = ValidationResult.failure(CodeUnitWidth.UTF8, error)
        with pytest.raises(MalformedUtf8Error):
            result.raise_for_failure()


class TestConversionResult:
    """Test conversion results and their diagnostics."""

    def test_defaults(self):
        result = ConversionResult(success=True, output=b"")
        assert result.diagnostics == []
        assert result.reason is None
        assert result.has_warnings is False
        assert result.detected_encoding is None

    def test_add_diagnostic(self):
        result = ConversionResult(success=True)
        result.add_diagnostic(
            DiagnosticSeverity.WARNING, "lossy", component="transcoder",
            correlation_id="req-1",
        )
        assert result.has_warnings is True
        assert result.diagnostics[0].correlation_id == "req-1"

    def test_reason_from_error(self):
        error = MalformedUtf8Error("bad", FailureReason.MISSING_CONTINUATION, 2)
        result = ConversionResult(success=False, error=error)
        assert result.reason is FailureReason.MISSING_CONTINUATION
