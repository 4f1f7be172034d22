"""Byte-level codecs with byte order and BOM handling.

This module serializes code unit sequences to byte buffers (UTF-8,
UTF-16BE/LE and big-endian UTF-32 "ISO-10646") and parses byte buffers back,
detecting a leading byte order mark when one is present.
"""

from enum import Enum
from typing import ClassVar, List, Optional, Tuple, Union

from strict_transcoder.shared.errors import (
    EncodingMismatchError,
    InvalidBufferLengthError,
)

from .conversion import (
    transcode,
    utf8_to_utf16,
    utf16_to_utf8,
    utf16_to_utf32,
    utf32_to_utf16,
)
from .units import CodeUnits, CodeUnitWidth, UnitsLike, coerce_units
from .validation import validate_utf8, validate_utf16, validate_utf32

BytesLike = Union[bytes, bytearray, memoryview]

# Byte order marks
BOM_UTF8 = b"\xef\xbb\xbf"
BOM_UTF16BE = b"\xfe\xff"
BOM_UTF16LE = b"\xff\xfe"

UTF16_UNIT_SIZE = 2
UTF32_UNIT_SIZE = 4


class Encoding(Enum):
    """Byte encodings understood by the codec layer."""
    UTF8 = "utf-8"
    UTF16_BE = "utf-16-be"
    UTF16_LE = "utf-16-le"
    UTF32_BE = "utf-32-be"
    US_ASCII = "us-ascii"
    ISO_8859_1 = "iso-8859-1"

    @property
    def bom(self) -> Optional[bytes]:
        """BOM literal for this encoding, None where none is defined."""
        return _BOMS.get(self)

    @property
    def family(self) -> Optional["EncodingFamily"]:
        """Unicode family of this encoding, None for legacy encodings."""
        return _FAMILIES.get(self)

    @property
    def is_lossy(self) -> bool:
        return self in (Encoding.US_ASCII, Encoding.ISO_8859_1)

    @classmethod
    def from_name(cls, name: str) -> "Encoding":
        """Look up an encoding by name or common alias."""
        normalized = name.strip().lower().replace("_", "-")
        normalized = ENCODING_ALIASES.get(normalized, normalized)
        for encoding in cls:
            if encoding.value == normalized:
                return encoding
        raise ValueError(f"Unsupported encoding: {name}")


class EncodingFamily(Enum):
    """Entry point families for BOM-detecting decoders."""
    UTF8 = "utf-8"
    UTF16 = "utf-16"
    UTF32 = "utf-32"


_BOMS = {
    Encoding.UTF8: BOM_UTF8,
    Encoding.UTF16_BE: BOM_UTF16BE,
    Encoding.UTF16_LE: BOM_UTF16LE,
}

_FAMILIES = {
    Encoding.UTF8: EncodingFamily.UTF8,
    Encoding.UTF16_BE: EncodingFamily.UTF16,
    Encoding.UTF16_LE: EncodingFamily.UTF16,
    Encoding.UTF32_BE: EncodingFamily.UTF32,
}

ENCODING_ALIASES = {
    "utf8": "utf-8",
    "utf-16be": "utf-16-be",
    "utf-16le": "utf-16-le",
    "utf16be": "utf-16-be",
    "utf16le": "utf-16-le",
    "utf-32": "utf-32-be",
    "utf-32be": "utf-32-be",
    "utf32": "utf-32-be",
    "iso-10646": "utf-32-be",
    "ucs-4": "utf-32-be",
    "ascii": "us-ascii",
    "latin-1": "iso-8859-1",
    "latin1": "iso-8859-1",
    "iso8859-1": "iso-8859-1",
}


class BOMDetector:
    """Byte Order Mark (BOM) detection for the UTF-8 and UTF-16 forms."""

    # Checked in order: UTF-8, then UTF-16LE, then UTF-16BE
    BOM_PATTERNS: ClassVar[List[Tuple[bytes, Encoding]]] = [
        (BOM_UTF8, Encoding.UTF8),
        (BOM_UTF16LE, Encoding.UTF16_LE),
        (BOM_UTF16BE, Encoding.UTF16_BE),
    ]

    def detect(self, data: BytesLike) -> Optional[Encoding]:
        """Detect encoding based on BOM.

        Args:
            data: Byte data to analyze

        Returns:
            Encoding indicated by a leading BOM, None if there is none
        """
        data = bytes(data[:len(BOM_UTF8)])
        for bom_bytes, encoding in self.BOM_PATTERNS:
            if data.startswith(bom_bytes):
                return encoding
        return None

    def strip(self, data: BytesLike) -> Tuple[Optional[Encoding], bytes]:
        """Split a buffer into its detected encoding and the payload after the BOM."""
        encoding = self.detect(data)
        if encoding is None:
            return None, bytes(data)
        return encoding, bytes(data[len(_BOMS[encoding]):])


_detector = BOMDetector()


def starts_with_bom_utf8(data: BytesLike) -> bool:
    return bytes(data[:3]) == BOM_UTF8


def starts_with_bom_utf16be(data: BytesLike) -> bool:
    return bytes(data[:2]) == BOM_UTF16BE


def starts_with_bom_utf16le(data: BytesLike) -> bool:
    return bytes(data[:2]) == BOM_UTF16LE


def has_bom(data: BytesLike, encoding: Optional[Encoding] = None) -> bool:
    """Check for a leading BOM, of ``encoding`` when one is given."""
    if encoding is None:
        return _detector.detect(data) is not None
    bom = encoding.bom
    return bom is not None and bytes(data[:len(bom)]) == bom


def detect_bom(data: BytesLike) -> Optional[Encoding]:
    """Return the encoding indicated by a leading BOM, if any."""
    return _detector.detect(data)


# Serialization

def utf16_to_utf8_bytes(units: UnitsLike, add_bom: bool = False) -> bytes:
    """Serialize UTF-16 as UTF-8 bytes, optionally prefixed with its BOM."""
    payload = utf16_to_utf8(units).to_bytes()
    return BOM_UTF8 + payload if add_bom else payload


def utf16_to_utf16be_bytes(units: UnitsLike, add_bom: bool = False) -> bytes:
    """Serialize UTF-16 as big-endian bytes."""
    source = coerce_units(units, CodeUnitWidth.UTF16)
    validate_utf16(source)
    out = bytearray(BOM_UTF16BE if add_bom else b"")
    for unit in source.units:
        out.append((unit >> 8) & 0xFF)
        out.append(unit & 0xFF)
    return bytes(out)


def utf16_to_utf16le_bytes(units: UnitsLike, add_bom: bool = False) -> bytes:
    """Serialize UTF-16 as little-endian bytes."""
    source = coerce_units(units, CodeUnitWidth.UTF16)
    validate_utf16(source)
    out = bytearray(BOM_UTF16LE if add_bom else b"")
    for unit in source.units:
        out.append(unit & 0xFF)
        out.append((unit >> 8) & 0xFF)
    return bytes(out)


def utf16_to_utf16_bytes(units: UnitsLike, add_bom: bool = False) -> bytes:
    """Serialize UTF-16 in the default (big-endian) byte order."""
    return utf16_to_utf16be_bytes(units, add_bom)


def utf32_to_utf32_bytes(units: UnitsLike) -> bytes:
    """Serialize UTF-32 as four bytes per scalar, most significant first."""
    source = coerce_units(units, CodeUnitWidth.UTF32)
    validate_utf32(source)
    out = bytearray()
    for value in source.units:
        out.append((value >> 24) & 0xFF)
        out.append((value >> 16) & 0xFF)
        out.append((value >> 8) & 0xFF)
        out.append(value & 0xFF)
    return bytes(out)


def utf16_to_utf32_bytes(units: UnitsLike) -> bytes:
    return utf32_to_utf32_bytes(utf16_to_utf32(units))


# Deserialization

def _check_length(data: bytes, unit_size: int, label: str) -> None:
    if len(data) % unit_size != 0:
        raise InvalidBufferLengthError(
            f"Invalid byte buffer length {len(data)} for {label} conversion: "
            f"not a multiple of {unit_size}",
            length=len(data),
            unit_size=unit_size,
        )


def utf16be_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    """Decode big-endian UTF-16 bytes (no BOM handling)."""
    data = bytes(data)
    _check_length(data, UTF16_UNIT_SIZE, "UTF-16BE")
    units = CodeUnits.utf16(
        (data[i] << 8) | data[i + 1] for i in range(0, len(data), 2)
    )
    validate_utf16(units)
    return units


def utf16le_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    """Decode little-endian UTF-16 bytes (no BOM handling).

    The full buffer is decoded; NUL units are kept like any other unit.
    """
    data = bytes(data)
    _check_length(data, UTF16_UNIT_SIZE, "UTF-16LE")
    units = CodeUnits.utf16(
        data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)
    )
    validate_utf16(units)
    return units


def utf8_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    """Decode a UTF-8 buffer, stripping a UTF-8 BOM if present.

    Raises:
        EncodingMismatchError: If the buffer starts with a UTF-16 BOM
    """
    encoding, payload = _detector.strip(data)
    if encoding is not None and encoding is not Encoding.UTF8:
        raise EncodingMismatchError(
            f"Invalid BOM for UTF-8: buffer starts with a {encoding.value} BOM",
            detected=encoding.value,
            expected=EncodingFamily.UTF8.value,
        )
    return utf8_to_utf16(CodeUnits.utf8(payload))


def utf16_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    """Decode a UTF-16 buffer, honouring a UTF-16 BOM; big-endian without one.

    Raises:
        EncodingMismatchError: If the buffer starts with the UTF-8 BOM
    """
    encoding, payload = _detector.strip(data)
    if encoding is Encoding.UTF8:
        raise EncodingMismatchError(
            "Invalid BOM for UTF-16: buffer starts with a utf-8 BOM",
            detected=encoding.value,
            expected=EncodingFamily.UTF16.value,
        )
    if encoding is Encoding.UTF16_LE:
        return utf16le_bytes_to_utf16(payload)
    return utf16be_bytes_to_utf16(payload)


def utf32_bytes_to_utf32(data: BytesLike) -> CodeUnits:
    """Decode big-endian UTF-32 bytes.

    Raises:
        InvalidBufferLengthError: If the length is not a multiple of four
        CodePointOutOfRangeError: If a value exceeds U+10FFFF
    """
    data = bytes(data)
    _check_length(data, UTF32_UNIT_SIZE, "UTF-32")
    units = CodeUnits.utf32(
        int.from_bytes(data[i:i + 4], "big") for i in range(0, len(data), 4)
    )
    validate_utf32(units)
    return units


def utf32_bytes_to_utf16(data: BytesLike) -> CodeUnits:
    return utf32_to_utf16(utf32_bytes_to_utf32(data))


def from_bytes(
    data: BytesLike, family: EncodingFamily = EncodingFamily.UTF16
) -> CodeUnits:
    """Decode a buffer through the BOM-detecting entry point of ``family``.

    UTF-8 and UTF-16 families return UTF-16 code units; the UTF-32 family
    (no BOM support) returns UTF-32 code units and rejects any BOM.
    """
    if family is EncodingFamily.UTF8:
        return utf8_bytes_to_utf16(data)
    if family is EncodingFamily.UTF16:
        return utf16_bytes_to_utf16(data)
    detected = _detector.detect(data)
    if detected is not None:
        raise EncodingMismatchError(
            f"Invalid BOM for UTF-32: buffer starts with a {detected.value} BOM",
            detected=detected.value,
            expected=EncodingFamily.UTF32.value,
        )
    return utf32_bytes_to_utf32(data)


def to_bytes(
    units: CodeUnits,
    encoding: Encoding,
    add_bom: bool = False,
    substitute: str = "?",
) -> bytes:
    """Serialize ``units`` (any width) in ``encoding``.

    ``substitute`` replaces unrepresentable units in the lossy legacy
    encodings.

    Raises:
        ValueError: If a BOM is requested for an encoding that has none
    """
    if add_bom and encoding.bom is None:
        raise ValueError(f"BOM is not supported for {encoding.value}")
    if encoding is Encoding.UTF32_BE:
        return utf32_to_utf32_bytes(transcode(units, CodeUnitWidth.UTF32))
    if encoding is Encoding.UTF8 and units.width is CodeUnitWidth.UTF8:
        validate_utf8(units)
        payload = units.to_bytes()
        return BOM_UTF8 + payload if add_bom else payload

    utf16 = _as_utf16(units)
    if encoding is Encoding.UTF8:
        return utf16_to_utf8_bytes(utf16, add_bom)
    if encoding is Encoding.UTF16_BE:
        return utf16_to_utf16be_bytes(utf16, add_bom)
    if encoding is Encoding.UTF16_LE:
        return utf16_to_utf16le_bytes(utf16, add_bom)

    from .legacy import utf16_to_legacy_bytes

    return utf16_to_legacy_bytes(utf16, encoding, substitute)


def decode_bytes(data: BytesLike, encoding: Encoding) -> CodeUnits:
    """Decode ``data`` as exactly ``encoding`` into UTF-16, without BOM sniffing."""
    if encoding is Encoding.UTF8:
        return utf8_to_utf16(CodeUnits.utf8(bytes(data)))
    if encoding is Encoding.UTF16_BE:
        return utf16be_bytes_to_utf16(data)
    if encoding is Encoding.UTF16_LE:
        return utf16le_bytes_to_utf16(data)
    if encoding is Encoding.UTF32_BE:
        return utf32_bytes_to_utf16(data)

    from .legacy import legacy_bytes_to_utf16

    return legacy_bytes_to_utf16(data, encoding)


def _as_utf16(units: CodeUnits) -> CodeUnits:
    if units.width is CodeUnitWidth.UTF16:
        return units
    if units.width is CodeUnitWidth.UTF8:
        return utf8_to_utf16(units)
    return utf32_to_utf16(units)

