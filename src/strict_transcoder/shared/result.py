"""Result objects and diagnostic types for transcoding operations.

This module defines the value objects handed back to callers who prefer
results over exceptions: validation outcomes, conversion results with
diagnostics, and per-call performance metrics.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .errors import FailureReason, TranscodingError

if TYPE_CHECKING:
    from strict_transcoder.character.units import CodeUnitWidth


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Lossy or unusual but successful conversions
    ERROR = auto()      # Rejected input


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single conversion."""

    processing_time_ms: float = 0.0
    input_units: int = 0
    output_units: int = 0
    substitutions: int = 0

    @property
    def units_per_second(self) -> float:
        """Calculate input code units processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.input_units * 1000.0) / self.processing_time_ms

    @property
    def expansion_ratio(self) -> float:
        """Ratio of output units to input units."""
        if self.input_units == 0:
            return 0.0
        return self.output_units / self.input_units


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a well-formedness check.

    Attributes:
        valid: Whether the sequence is well-formed
        width: Code unit width that was checked
        reason: Failure reason, None when valid
        position: Index of the first offending unit, None when valid
        message: Human readable description of the failure
        error: The exception describing the failure
    """
    valid: bool
    width: "CodeUnitWidth"
    reason: Optional[FailureReason] = None
    position: Optional[int] = None
    message: str = ""
    error: Optional[TranscodingError] = None

    @classmethod
    def success(cls, width: "CodeUnitWidth") -> "ValidationResult":
        return cls(valid=True, width=width)

    @classmethod
    def failure(
        cls, width: "CodeUnitWidth", error: TranscodingError
    ) -> "ValidationResult":
        return cls(
            valid=False,
            width=width,
            reason=error.reason,
            position=error.position,
            message=str(error),
            error=error,
        )

    def raise_for_failure(self) -> None:
        """Re-raise the original exception if validation failed."""
        if self.error is not None:
            raise self.error

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class ConversionResult:
    """Result of a facade conversion with diagnostics and metrics.

    Attributes:
        success: Whether the conversion produced output
        output: Converted ``CodeUnits`` or ``bytes``, None on failure
        diagnostics: Diagnostics collected during the call
        metrics: Timing and size information
        detected_encoding: Encoding indicated by a BOM, when one was read
        error: The failure, when ``success`` is False
    """
    success: bool
    output: Any = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    detected_encoding: Optional[str] = None
    error: Optional[TranscodingError] = None

    @property
    def reason(self) -> Optional[FailureReason]:
        """Failure reason, None on success."""
        return self.error.reason if self.error is not None else None

    @property
    def has_warnings(self) -> bool:
        return any(
            d.severity == DiagnosticSeverity.WARNING for d in self.diagnostics
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Append a diagnostic entry."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=correlation_id,
            )
        )
