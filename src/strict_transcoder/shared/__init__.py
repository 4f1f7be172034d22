"""Shared utilities for the strict transcoder.

This module provides the error taxonomy, result types, configuration objects
and logging helpers used across all layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    TranscoderConfig,
)
from .errors import (
    CodePointOutOfRangeError,
    EncodingMismatchError,
    FailureReason,
    InvalidBufferLengthError,
    MalformedUtf8Error,
    MalformedUtf16Error,
    TranscodingError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    ConversionResult,
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    ValidationResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "TranscoderConfig",
    "CodePointOutOfRangeError",
    "EncodingMismatchError",
    "FailureReason",
    "InvalidBufferLengthError",
    "MalformedUtf8Error",
    "MalformedUtf16Error",
    "TranscodingError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ConversionResult",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "ValidationResult",
]
