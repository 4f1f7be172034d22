"""Error taxonomy for transcoding and validation failures.

Every data error raised by the engine is a ``TranscodingError`` carrying a
machine-readable ``FailureReason`` and, where one exists, the index of the
first offending code unit or byte.
"""

from enum import Enum
from typing import Optional


class FailureReason(Enum):
    """Why a sequence or buffer was rejected."""

    INVALID_LEAD_BYTE = "invalid_lead_byte"
    MISSING_CONTINUATION = "missing_continuation"
    OVERLONG_ENCODING = "overlong_encoding"
    LONE_HIGH_SURROGATE = "lone_high_surrogate"
    LONE_LOW_SURROGATE = "lone_low_surrogate"
    CODE_POINT_OUT_OF_RANGE = "code_point_out_of_range"
    INVALID_BUFFER_LENGTH = "invalid_buffer_length"
    ENCODING_MISMATCH = "encoding_mismatch"


class TranscodingError(ValueError):
    """Base exception for malformed input."""

    def __init__(
        self,
        message: str,
        reason: FailureReason,
        position: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.position = position


class MalformedUtf8Error(TranscodingError):
    """Exception raised for an ill-formed UTF-8 sequence."""


class MalformedUtf16Error(TranscodingError):
    """Exception raised for an unpaired UTF-16 surrogate."""


class CodePointOutOfRangeError(TranscodingError):
    """Exception raised when a value exceeds U+10FFFF."""

    def __init__(self, message: str, position: Optional[int] = None,
                 value: Optional[int] = None) -> None:
        super().__init__(message, FailureReason.CODE_POINT_OUT_OF_RANGE, position)
        self.value = value


class InvalidBufferLengthError(TranscodingError):
    """Exception raised when a byte count is not a multiple of the unit size."""

    def __init__(self, message: str, length: int, unit_size: int) -> None:
        super().__init__(
            message, FailureReason.INVALID_BUFFER_LENGTH, length - length % unit_size
        )
        self.length = length
        self.unit_size = unit_size


class EncodingMismatchError(TranscodingError):
    """Exception raised when a BOM contradicts the expected encoding family."""

    def __init__(self, message: str, detected: str, expected: str) -> None:
        super().__init__(message, FailureReason.ENCODING_MISMATCH, 0)
        self.detected = detected
        self.expected = expected

