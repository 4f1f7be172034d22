"""Strict well-formedness validation for UTF-8, UTF-16 and UTF-32.

Each validator stops at the first offending code unit and raises the
matching ``TranscodingError``. ``check()`` wraps the same rules in a
``ValidationResult`` for callers that prefer a value over an exception.
"""

from typing import ClassVar, Dict, Optional

from strict_transcoder.shared.errors import (
    CodePointOutOfRangeError,
    FailureReason,
    MalformedUtf8Error,
    MalformedUtf16Error,
    TranscodingError,
)
from strict_transcoder.shared.result import ValidationResult

from .units import (
    MAX_SCALAR_VALUE,
    CodeUnits,
    CodeUnitWidth,
    is_high_surrogate,
    is_low_surrogate,
)

# UTF-8 lead byte masks and patterns
ASCII_MASK = 0x80
LEAD_2BYTE_MASK = 0xE0
LEAD_2BYTE_PATTERN = 0xC0
LEAD_3BYTE_MASK = 0xF0
LEAD_3BYTE_PATTERN = 0xE0
LEAD_4BYTE_MASK = 0xF8
LEAD_4BYTE_PATTERN = 0xF0
CONTINUATION_MASK = 0xC0
CONTINUATION_PATTERN = 0x80

# Overlong leaders and the second-byte ranges that make them overlong
OVERLONG_2BYTE_LEADS = frozenset({0xC0, 0xC1})
OVERLONG_3BYTE_LEAD = 0xE0
OVERLONG_3BYTE_SECOND_MAX = 0x9F
OVERLONG_4BYTE_LEAD = 0xF0
OVERLONG_4BYTE_SECOND_MAX = 0x8F


def utf8_sequence_length(lead: int) -> Optional[int]:
    """Return the run length announced by a UTF-8 lead byte.

    Returns:
        1 to 4, or None for a byte that cannot start a run
    """
    if lead & ASCII_MASK == 0:
        return 1
    if lead & LEAD_2BYTE_MASK == LEAD_2BYTE_PATTERN:
        return 2
    if lead & LEAD_3BYTE_MASK == LEAD_3BYTE_PATTERN:
        return 3
    if lead & LEAD_4BYTE_MASK == LEAD_4BYTE_PATTERN:
        return 4
    return None


def is_continuation_byte(value: int) -> bool:
    return value & CONTINUATION_MASK == CONTINUATION_PATTERN


class UTF8Validator:
    """UTF-8 validation with lead byte, continuation and overlong checks."""

    def validate(self, units: CodeUnits) -> None:
        """Validate a UTF-8 sequence.

        Args:
            units: UTF-8 code units

        Raises:
            MalformedUtf8Error: At the first malformed run
        """
        data = units.units
        length = len(data)
        i = 0
        while i < length:
            lead = data[i]
            run = utf8_sequence_length(lead)
            if run is None:
                raise MalformedUtf8Error(
                    f"Invalid UTF-8 sequence: invalid lead byte 0x{lead:02X} "
                    f"at position {i}",
                    FailureReason.INVALID_LEAD_BYTE,
                    i,
                )
            if run > 1 and self._is_overlong(data, i, run):
                raise MalformedUtf8Error(
                    f"Invalid UTF-8 sequence: overlong encoding at position {i}",
                    FailureReason.OVERLONG_ENCODING,
                    i,
                )
            for offset in range(1, run):
                if i + offset >= length or not is_continuation_byte(data[i + offset]):
                    raise MalformedUtf8Error(
                        f"Invalid UTF-8 sequence: missing continuation byte "
                        f"at position {i + offset}",
                        FailureReason.MISSING_CONTINUATION,
                        i + offset,
                    )
            i += run

    def _is_overlong(self, data: tuple, pos: int, run: int) -> bool:
        """Check the known overlong leaders for a run starting at pos."""
        lead = data[pos]
        if run == 2:
            return lead in OVERLONG_2BYTE_LEADS
        if pos + 1 >= len(data):
            # Truncated run, reported as a missing continuation instead
            return False
        second = data[pos + 1]
        if run == 3:
            return (lead == OVERLONG_3BYTE_LEAD
                    and CONTINUATION_PATTERN <= second <= OVERLONG_3BYTE_SECOND_MAX)
        return (lead == OVERLONG_4BYTE_LEAD
                and CONTINUATION_PATTERN <= second <= OVERLONG_4BYTE_SECOND_MAX)


class UTF16Validator:
    """UTF-16 validation of surrogate pairing."""

    def validate(self, units: CodeUnits) -> None:
        """Validate a UTF-16 sequence.

        Raises:
            MalformedUtf16Error: At the first unpaired surrogate
        """
        data = units.units
        length = len(data)
        i = 0
        while i < length:
            unit = data[i]
            if is_high_surrogate(unit):
                if i + 1 >= length or not is_low_surrogate(data[i + 1]):
                    raise MalformedUtf16Error(
                        f"Invalid UTF-16 sequence: lone high surrogate "
                        f"0x{unit:04X} at position {i}",
                        FailureReason.LONE_HIGH_SURROGATE,
                        i,
                    )
                i += 2
            elif is_low_surrogate(unit):
                raise MalformedUtf16Error(
                    f"Invalid UTF-16 sequence: lone low surrogate "
                    f"0x{unit:04X} at position {i}",
                    FailureReason.LONE_LOW_SURROGATE,
                    i,
                )
            else:
                i += 1


class UTF32Validator:
    """UTF-32 validation of the scalar value range."""

    def validate(self, units: CodeUnits) -> None:
        """Validate a UTF-32 sequence.

        Raises:
            CodePointOutOfRangeError: For the first unit above U+10FFFF
        """
        for i, unit in enumerate(units.units):
            if unit > MAX_SCALAR_VALUE:
                raise CodePointOutOfRangeError(
                    f"Invalid UTF-32 sequence: code point 0x{unit:X} at "
                    f"position {i} exceeds U+10FFFF",
                    position=i,
                    value=unit,
                )


class SequenceValidator:
    """Dispatch validation to the rule set of a sequence's width."""

    VALIDATORS: ClassVar[Dict[CodeUnitWidth, object]] = {
        CodeUnitWidth.UTF8: UTF8Validator(),
        CodeUnitWidth.UTF16: UTF16Validator(),
        CodeUnitWidth.UTF32: UTF32Validator(),
    }

    def validate(self, units: CodeUnits) -> None:
        """Validate ``units`` under the rules of its own width."""
        self.VALIDATORS[units.width].validate(units)  # type: ignore[attr-defined]

    def check(self, units: CodeUnits) -> ValidationResult:
        """Validate without raising.

        Returns:
            ValidationResult describing success or the first failure
        """
        try:
            self.validate(units)
        except TranscodingError as e:
            return ValidationResult.failure(units.width, e)
        return ValidationResult.success(units.width)


_validator = SequenceValidator()


def validate(units: CodeUnits) -> None:
    """Raise a ``TranscodingError`` if ``units`` is not well-formed."""
    _validator.validate(units)


def check(units: CodeUnits) -> ValidationResult:
    """Return a ``ValidationResult`` for ``units``."""
    return _validator.check(units)


def validate_utf8(units: CodeUnits) -> None:
    UTF8Validator().validate(units)


def validate_utf16(units: CodeUnits) -> None:
    UTF16Validator().validate(units)


def validate_utf32(units: CodeUnits) -> None:
    UTF32Validator().validate(units)
