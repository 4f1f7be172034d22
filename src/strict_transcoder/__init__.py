"""Strict Transcoder.

Lossless conversion between UTF-8, UTF-16, UTF-32 and the platform wide
character form, byte codecs with BOM and byte-order handling, and lossy
US-ASCII / ISO-8859-1 mappings. Malformed input is rejected at the first
offending unit with a typed error.

Progressive API Disclosure:
- Level 1: Simple functions - transcode(), encode(), decode()
- Level 2: Configured facade - Transcoder class
- Level 3: Character layer - strict_transcoder.character
"""

__version__ = "0.1.0"
__author__ = "Strict Transcoder Team"

from .api import Transcoder, decode, encode, transcode
from .character import (
    CodeUnits,
    CodeUnitWidth,
    Encoding,
    EncodingFamily,
    check,
    decode_text,
    encode_text,
    validate,
)
from .shared.config import TranscoderConfig
from .shared.errors import FailureReason, TranscodingError
from .shared.result import ConversionResult, ValidationResult

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "transcode",
    "encode",
    "decode",
    "validate",
    "check",
    "encode_text",
    "decode_text",

    # Level 2: Configured facade
    "Transcoder",
    "TranscoderConfig",

    # Data model and results
    "CodeUnits",
    "CodeUnitWidth",
    "Encoding",
    "EncodingFamily",
    "ConversionResult",
    "ValidationResult",
    "FailureReason",
    "TranscodingError",
]
