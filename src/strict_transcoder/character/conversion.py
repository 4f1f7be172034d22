"""Lossless conversion among UTF-8, UTF-16 and UTF-32.

Every entry point validates its source under the rules of the source width
before transcoding. Conversions go through scalar values, so UTF-32 <->
UTF-16 produces exactly what composing through UTF-8 would.
"""

from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from strict_transcoder.shared.errors import (
    CodePointOutOfRangeError,
    FailureReason,
    MalformedUtf16Error,
)

from .units import (
    BMP_MAX,
    HIGH_SURROGATE_START,
    LOW_SURROGATE_START,
    MAX_SCALAR_VALUE,
    SUPPLEMENTARY_OFFSET,
    CodeUnits,
    CodeUnitWidth,
    UnitsLike,
    coerce_units,
    is_high_surrogate,
    is_low_surrogate,
)
from .validation import (
    utf8_sequence_length,
    validate_utf8,
    validate_utf16,
    validate_utf32,
)

# Largest scalar value encodable in 1, 2 and 3 UTF-8 bytes
UTF8_1BYTE_MAX = 0x7F
UTF8_2BYTE_MAX = 0x7FF
UTF8_3BYTE_MAX = 0xFFFF

# Payload masks of UTF-8 lead bytes by run length
LEAD_PAYLOAD_MASKS = {1: 0x7F, 2: 0x1F, 3: 0x0F, 4: 0x07}
CONTINUATION_PAYLOAD_MASK = 0x3F


def _decode_utf8(data: Sequence[int]) -> List[int]:
    """Decode validated UTF-8 units into scalar values."""
    scalars: List[int] = []
    i = 0
    length = len(data)
    while i < length:
        run = utf8_sequence_length(data[i]) or 1
        value = data[i] & LEAD_PAYLOAD_MASKS[run]
        for offset in range(1, run):
            value = (value << 6) | (data[i + offset] & CONTINUATION_PAYLOAD_MASK)
        if value > MAX_SCALAR_VALUE:
            raise CodePointOutOfRangeError(
                f"Invalid UTF-8 sequence: decodes to 0x{value:X} at position {i}, "
                "above U+10FFFF",
                position=i,
                value=value,
            )
        scalars.append(value)
        i += run
    return scalars


def _encode_utf8(scalars: Iterable[int]) -> List[int]:
    out: List[int] = []
    for i, value in enumerate(scalars):
        if value <= UTF8_1BYTE_MAX:
            out.append(value)
        elif value <= UTF8_2BYTE_MAX:
            out.append(0xC0 | (value >> 6))
            out.append(0x80 | (value & 0x3F))
        elif value <= UTF8_3BYTE_MAX:
            out.append(0xE0 | (value >> 12))
            out.append(0x80 | ((value >> 6) & 0x3F))
            out.append(0x80 | (value & 0x3F))
        elif value <= MAX_SCALAR_VALUE:
            out.append(0xF0 | (value >> 18))
            out.append(0x80 | ((value >> 12) & 0x3F))
            out.append(0x80 | ((value >> 6) & 0x3F))
            out.append(0x80 | (value & 0x3F))
        else:
            raise CodePointOutOfRangeError(
                f"Code point 0x{value:X} at position {i} exceeds U+10FFFF",
                position=i,
                value=value,
            )
    return out


def _decode_utf16(data: Sequence[int]) -> List[int]:
    """Decode validated UTF-16 units, combining surrogate pairs."""
    scalars: List[int] = []
    i = 0
    length = len(data)
    while i < length:
        unit = data[i]
        if is_high_surrogate(unit):
            low = data[i + 1]
            scalars.append(
                SUPPLEMENTARY_OFFSET
                + ((unit - HIGH_SURROGATE_START) << 10)
                + (low - LOW_SURROGATE_START)
            )
            i += 2
        else:
            scalars.append(unit)
            i += 1
    return scalars


def _encode_utf16(scalars: Iterable[int]) -> List[int]:
    out: List[int] = []
    for i, value in enumerate(scalars):
        if value > MAX_SCALAR_VALUE:
            raise CodePointOutOfRangeError(
                f"Code point 0x{value:X} at position {i} exceeds U+10FFFF",
                position=i,
                value=value,
            )
        if is_high_surrogate(value):
            raise MalformedUtf16Error(
                f"Cannot encode surrogate code point 0x{value:04X} at position {i}: "
                "lone high surrogate",
                FailureReason.LONE_HIGH_SURROGATE,
                i,
            )
        if is_low_surrogate(value):
            raise MalformedUtf16Error(
                f"Cannot encode surrogate code point 0x{value:04X} at position {i}: "
                "lone low surrogate",
                FailureReason.LONE_LOW_SURROGATE,
                i,
            )
        if value <= BMP_MAX:
            out.append(value)
        else:
            offset = value - SUPPLEMENTARY_OFFSET
            out.append(HIGH_SURROGATE_START + (offset >> 10))
            out.append(LOW_SURROGATE_START + (offset & 0x3FF))
    return out


def utf16_to_utf8(units: UnitsLike) -> CodeUnits:
    """Convert UTF-16 to UTF-8.

    Args:
        units: UTF-16 code units

    Returns:
        UTF-8 code units

    Raises:
        MalformedUtf16Error: If the source holds an unpaired surrogate
    """
    source = coerce_units(units, CodeUnitWidth.UTF16)
    validate_utf16(source)
    return CodeUnits.utf8(_encode_utf8(_decode_utf16(source.units)))


def utf32_to_utf8(units: UnitsLike) -> CodeUnits:
    """Convert UTF-32 to UTF-8.

    Raises:
        CodePointOutOfRangeError: If a unit exceeds U+10FFFF
    """
    source = coerce_units(units, CodeUnitWidth.UTF32)
    validate_utf32(source)
    return CodeUnits.utf8(_encode_utf8(source.units))


def utf8_to_utf16(units: UnitsLike) -> CodeUnits:
    """Convert UTF-8 to UTF-16, expanding supplementary scalars to pairs.

    Raises:
        MalformedUtf8Error: If the source is not well-formed UTF-8
        CodePointOutOfRangeError: If a run decodes above U+10FFFF
        MalformedUtf16Error: If a run decodes to a surrogate code point
    """
    source = coerce_units(units, CodeUnitWidth.UTF8)
    validate_utf8(source)
    return CodeUnits.utf16(_encode_utf16(_decode_utf8(source.units)))


def utf8_to_utf32(units: UnitsLike) -> CodeUnits:
    """Convert UTF-8 to UTF-32."""
    source = coerce_units(units, CodeUnitWidth.UTF8)
    validate_utf8(source)
    return CodeUnits.utf32(_decode_utf8(source.units))


def utf32_to_utf16(units: UnitsLike) -> CodeUnits:
    """Convert UTF-32 to UTF-16."""
    source = coerce_units(units, CodeUnitWidth.UTF32)
    validate_utf32(source)
    return CodeUnits.utf16(_encode_utf16(source.units))


def utf16_to_utf32(units: UnitsLike) -> CodeUnits:
    """Convert UTF-16 to UTF-32."""
    source = coerce_units(units, CodeUnitWidth.UTF16)
    validate_utf16(source)
    return CodeUnits.utf32(_decode_utf16(source.units))


def _identity(width: CodeUnitWidth) -> Callable[[UnitsLike], CodeUnits]:
    validators = {
        CodeUnitWidth.UTF8: validate_utf8,
        CodeUnitWidth.UTF16: validate_utf16,
        CodeUnitWidth.UTF32: validate_utf32,
    }

    def convert(units: UnitsLike) -> CodeUnits:
        source = coerce_units(units, width)
        validators[width](source)
        return source

    return convert


CONVERTERS: Dict[Tuple[CodeUnitWidth, CodeUnitWidth], Callable[[UnitsLike], CodeUnits]] = {
    (CodeUnitWidth.UTF8, CodeUnitWidth.UTF8): _identity(CodeUnitWidth.UTF8),
    (CodeUnitWidth.UTF8, CodeUnitWidth.UTF16): utf8_to_utf16,
    (CodeUnitWidth.UTF8, CodeUnitWidth.UTF32): utf8_to_utf32,
    (CodeUnitWidth.UTF16, CodeUnitWidth.UTF8): utf16_to_utf8,
    (CodeUnitWidth.UTF16, CodeUnitWidth.UTF16): _identity(CodeUnitWidth.UTF16),
    (CodeUnitWidth.UTF16, CodeUnitWidth.UTF32): utf16_to_utf32,
    (CodeUnitWidth.UTF32, CodeUnitWidth.UTF8): utf32_to_utf8,
    (CodeUnitWidth.UTF32, CodeUnitWidth.UTF16): utf32_to_utf16,
    (CodeUnitWidth.UTF32, CodeUnitWidth.UTF32): _identity(CodeUnitWidth.UTF32),
}


def transcode(units: CodeUnits, target: CodeUnitWidth) -> CodeUnits:
    """Convert ``units`` to the ``target`` width.

    A same-width call validates and returns the input unchanged.
    """
    return CONVERTERS[(units.width, target)](units)


def to_scalars(units: CodeUnits) -> Tuple[int, ...]:
    """Validate ``units`` and return its scalar values."""
    return transcode(units, CodeUnitWidth.UTF32).units


def from_scalars(scalars: Iterable[int], width: CodeUnitWidth) -> CodeUnits:
    """Encode scalar values in the given transcoding form."""
    scalars = list(scalars)
    if width is CodeUnitWidth.UTF8:
        return CodeUnits.utf8(_encode_utf8(scalars))
    if width is CodeUnitWidth.UTF16:
        return CodeUnits.utf16(_encode_utf16(scalars))
    utf32 = CodeUnits.utf32(scalars)
    validate_utf32(utf32)
    return utf32


def encode_text(text: str, width: CodeUnitWidth = CodeUnitWidth.UTF16) -> CodeUnits:
    """Encode a Python string as code units of ``width``.

    Raises:
        MalformedUtf16Error: If ``width`` is UTF-16 and the string holds a
            lone surrogate
    """
    return from_scalars((ord(char) for char in text), width)


def decode_text(units: CodeUnits) -> str:
    """Validate ``units`` and return them as a Python string."""
    return "".join(chr(value) for value in to_scalars(units))
