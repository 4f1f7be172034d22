"""Character processing layer for the strict transcoder.

This module provides code unit sequences, well-formedness validation,
conversion among the Unicode transcoding forms and the native wide form,
byte-level codecs with BOM handling, and lossy legacy encodings.
"""

from .conversion import (
    decode_text,
    encode_text,
    from_scalars,
    to_scalars,
    transcode,
    utf8_to_utf16,
    utf8_to_utf32,
    utf16_to_utf8,
    utf16_to_utf32,
    utf32_to_utf8,
    utf32_to_utf16,
)
from .encoding import (
    BOM_UTF8,
    BOM_UTF16BE,
    BOM_UTF16LE,
    BOMDetector,
    Encoding,
    EncodingFamily,
    decode_bytes,
    detect_bom,
    from_bytes,
    has_bom,
    to_bytes,
)
from .units import CodeUnits, CodeUnitWidth
from .validation import (
    SequenceValidator,
    UTF8Validator,
    UTF16Validator,
    UTF32Validator,
    check,
    validate,
)
from .wide import (
    CodecWideCharService,
    Utf16WidePlatform,
    Utf32WidePlatform,
    WideCharService,
    WidePlatform,
    Win32WideCharService,
    native_platform,
    select_platform,
)

__all__ = [
    # Modules
    "units",
    "validation",
    "conversion",
    "encoding",
    "legacy",
    "wide",
    # Data model
    "CodeUnits",
    "CodeUnitWidth",
    # Validation
    "SequenceValidator",
    "UTF8Validator",
    "UTF16Validator",
    "UTF32Validator",
    "check",
    "validate",
    # Conversion
    "transcode",
    "to_scalars",
    "from_scalars",
    "encode_text",
    "decode_text",
    "utf8_to_utf16",
    "utf8_to_utf32",
    "utf16_to_utf8",
    "utf16_to_utf32",
    "utf32_to_utf8",
    "utf32_to_utf16",
    # Byte codec
    "BOM_UTF8",
    "BOM_UTF16BE",
    "BOM_UTF16LE",
    "BOMDetector",
    "Encoding",
    "EncodingFamily",
    "decode_bytes",
    "detect_bom",
    "from_bytes",
    "has_bom",
    "to_bytes",
    # Wide form
    "WideCharService",
    "Win32WideCharService",
    "CodecWideCharService",
    "WidePlatform",
    "Utf16WidePlatform",
    "Utf32WidePlatform",
    "native_platform",
    "select_platform",
]
