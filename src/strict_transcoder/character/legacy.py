"""Lossy mappings to and from legacy byte encodings.

US-ASCII and ISO-8859-1 map one UTF-16 code unit to one byte. Units outside
the target range become a substitution byte (``?`` unless configured
otherwise); these paths never raise. ISO-10646 is the four-byte big-endian
UTF-32 form and is lossless.
"""

from typing import Dict

from .encoding import (
    BytesLike,
    Encoding,
    utf16_to_utf32_bytes,
    utf32_bytes_to_utf16,
    utf32_bytes_to_utf32,
    utf32_to_utf32_bytes,
)
from .units import CodeUnits, CodeUnitWidth, UnitsLike, coerce_units

SUBSTITUTION_BYTE = 0x3F  # "?"

US_ASCII_MAX = 0x7F
ISO_8859_1_MAX = 0xFF

LEGACY_RANGES: Dict[Encoding, int] = {
    Encoding.US_ASCII: US_ASCII_MAX,
    Encoding.ISO_8859_1: ISO_8859_1_MAX,
}


def _substitution_byte(substitute: str) -> int:
    if len(substitute) != 1 or ord(substitute) > US_ASCII_MAX:
        raise ValueError(
            f"Substitution must be a single ASCII character, got {substitute!r}"
        )
    return ord(substitute)


def _narrow(units: UnitsLike, limit: int, substitute: str) -> bytes:
    source = coerce_units(units, CodeUnitWidth.UTF16)
    fallback = _substitution_byte(substitute)
    return bytes(unit if unit <= limit else fallback for unit in source.units)


def utf16_to_us_ascii_bytes(units: UnitsLike, substitute: str = "?") -> bytes:
    """Map UTF-16 units to US-ASCII, replacing units above 0x7F."""
    return _narrow(units, US_ASCII_MAX, substitute)


def utf16_to_iso_8859_1_bytes(units: UnitsLike, substitute: str = "?") -> bytes:
    """Map UTF-16 units to ISO-8859-1, replacing units above 0xFF."""
    return _narrow(units, ISO_8859_1_MAX, substitute)


def us_ascii_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    """Widen each byte to a UTF-16 unit of the same value."""
    return CodeUnits.utf16(bytes(data))


def iso_8859_1_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    """Widen each byte to a UTF-16 unit of the same value."""
    return CodeUnits.utf16(bytes(data))


def count_substitutions(units: UnitsLike, encoding: Encoding) -> int:
    """Number of units that ``encoding`` cannot represent."""
    source = coerce_units(units, CodeUnitWidth.UTF16)
    limit = LEGACY_RANGES[encoding]
    return sum(1 for unit in source.units if unit > limit)


def utf16_to_legacy_bytes(
    units: UnitsLike, encoding: Encoding, substitute: str = "?"
) -> bytes:
    """Dispatch a lossy encode to US-ASCII or ISO-8859-1."""
    if encoding not in LEGACY_RANGES:
        raise ValueError(f"{encoding.value} is not a legacy single-byte encoding")
    return _narrow(units, LEGACY_RANGES[encoding], substitute)


def legacy_bytes_to_utf16(data: BytesLike, encoding: Encoding) -> CodeUnits:
    if encoding is Encoding.US_ASCII:
        return us_ascii_bytes_to_utf16(data)
    if encoding is Encoding.ISO_8859_1:
        return iso_8859_1_bytes_to_utf16(data)
    raise ValueError(f"{encoding.value} is not a legacy single-byte encoding")


def utf16_to_iso_10646_bytes(units: UnitsLike) -> bytes:
    return utf16_to_utf32_bytes(units)


def utf32_to_iso_10646_bytes(units: UnitsLike) -> bytes:
    return utf32_to_utf32_bytes(units)


def iso_10646_bytes_to_utf32(data: BytesLike) -> CodeUnits:
    return utf32_bytes_to_utf32(data)


def iso_10646_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    return utf32_bytes_to_utf16(data)
