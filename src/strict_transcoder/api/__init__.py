"""Configured transcoder API.

Level 1 is the module-level ``transcode``/``encode``/``decode`` functions;
level 2 is the ``Transcoder`` class driven by a ``TranscoderConfig``.
"""

from .transcoder import Transcoder, decode, encode, transcode

__all__ = [
    "Transcoder",
    "decode",
    "encode",
    "transcode",
]
