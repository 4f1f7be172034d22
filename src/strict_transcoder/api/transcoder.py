"""Configured transcoder facade with progressive disclosure.

This module wraps the pure character-layer functions in a ``Transcoder``
class that applies a ``TranscoderConfig``, times each call, collects
diagnostics and, when configured, returns failures as results instead of
raising. Module-level ``transcode``/``encode``/``decode`` use a default
strict facade.
"""

import logging
import time
from functools import lru_cache
from typing import Any, Callable, Optional, Union

from strict_transcoder.character import legacy, wide
from strict_transcoder.character.conversion import transcode as _transcode
from strict_transcoder.character.encoding import (
    BytesLike,
    Encoding,
    EncodingFamily,
    decode_bytes,
    detect_bom,
    from_bytes,
    to_bytes,
)
from strict_transcoder.character.units import CodeUnits, CodeUnitWidth, UnitsLike
from strict_transcoder.character.validation import check
from strict_transcoder.shared import (
    ConversionResult,
    DiagnosticSeverity,
    TranscoderConfig,
    TranscodingError,
    ValidationResult,
    get_logger,
)

MS_PER_SECOND = 1000

DecodeSource = Union[Encoding, EncodingFamily]


class Transcoder:
    """Configured entry point for validation, transcoding and byte codecs.

    Instances hold only immutable configuration and may be shared between
    threads.

    Examples:
        >>> transcoder = Transcoder(TranscoderConfig.lenient())
        >>> result = transcoder.decode(b"\\xc0\\x80", Encoding.UTF8)
        >>> result.success, result.reason.value
        (False, 'overlong_encoding')
    """

    def __init__(
        self,
        config: Optional[TranscoderConfig] = None,
        platform: Optional[wide.WidePlatform] = None,
    ) -> None:
        """Initialize the facade.

        Args:
            config: Transcoder configuration, strict defaults when omitted
            platform: Wide-character strategy, the host's when omitted
        """
        self.config = config or TranscoderConfig()
        self.platform = platform or wide.native_platform()
        self.correlation_id = self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "transcoder")

    def validate(self, units: CodeUnits) -> ValidationResult:
        """Check ``units`` for well-formedness; never raises."""
        result = check(units)
        if not result.valid:
            self.logger.failure(
                "Validation failed", result.error, extra={"width": units.width.name}
            )
        return result

    def transcode(self, units: CodeUnits, target: CodeUnitWidth) -> ConversionResult:
        """Convert ``units`` to the ``target`` transcoding form."""
        return self._run(
            f"transcode {units.width.name}->{target.name}",
            len(units),
            lambda result: _transcode(units, target),
        )

    def encode(
        self,
        units: CodeUnits,
        encoding: Union[Encoding, str],
        add_bom: Optional[bool] = None,
    ) -> ConversionResult:
        """Serialize ``units`` as ``encoding`` bytes.

        Args:
            units: Code units of any width
            encoding: Target encoding; the name ``"utf-16"`` picks the
                configured byte order
            add_bom: Override of the configured BOM setting

        Returns:
            ConversionResult with ``bytes`` output
        """
        encoding = self.resolve_encoding(encoding)
        if add_bom is None:
            # A configured BOM only applies where the encoding defines one
            bom = self.config.add_bom and encoding.bom is not None
        else:
            bom = add_bom

        def run(result: ConversionResult) -> bytes:
            if not encoding.is_lossy:
                return to_bytes(units, encoding, bom, self.config.substitution_char)
            utf16 = _transcode(units, CodeUnitWidth.UTF16)
            lost = legacy.count_substitutions(utf16, encoding)
            result.metrics.substitutions = lost
            if lost:
                self._diagnose(
                    result,
                    DiagnosticSeverity.WARNING,
                    f"{lost} code units not representable in {encoding.value} "
                    f"were replaced by {self.config.substitution_char!r}",
                )
            return to_bytes(utf16, encoding, bom, self.config.substitution_char)

        return self._run(f"encode {encoding.value}", len(units), run)

    def decode(
        self,
        data: BytesLike,
        source: Union[DecodeSource, str] = EncodingFamily.UTF16,
    ) -> ConversionResult:
        """Parse a byte buffer.

        Args:
            data: Bytes to decode
            source: An ``Encoding`` decodes exactly that encoding; an
                ``EncodingFamily`` detects a BOM first. Names are accepted:
                ``"utf-8"``, ``"utf-16"`` and ``"utf-32"`` select families.

        Returns:
            ConversionResult with UTF-16 output (UTF-32 for the UTF-32 family)
        """
        source = self.resolve_source(source)

        def run(result: ConversionResult) -> CodeUnits:
            detected = detect_bom(data)
            if isinstance(source, EncodingFamily):
                if detected is not None:
                    result.detected_encoding = detected.value
                    self._diagnose(
                        result,
                        DiagnosticSeverity.INFO,
                        f"Stripped {detected.value} byte order mark",
                        details={"bom_length": len(detected.bom or b"")},
                    )
                return from_bytes(data, source)
            return decode_bytes(data, source)

        return self._run(f"decode {source.value}", len(data), run)

    def to_wide(self, units: CodeUnits) -> ConversionResult:
        """Convert ``units`` to the platform wide form."""
        return self._run(
            "to_wide", len(units), lambda result: self.platform.to_wide(units)
        )

    def from_wide(
        self, units: UnitsLike, target: CodeUnitWidth = CodeUnitWidth.UTF16
    ) -> ConversionResult:
        """Convert a platform wide string to ``target``."""
        source = self.platform.wide(units)
        return self._run(
            "from_wide",
            len(source),
            lambda result: self.platform.from_wide(source, target),
        )

    def resolve_encoding(self, encoding: Union[Encoding, str]) -> Encoding:
        """Map a name to an ``Encoding``, applying the configured UTF-16 order."""
        if isinstance(encoding, Encoding):
            return encoding
        if encoding.strip().lower() in ("utf-16", "utf16"):
            if self.config.utf16_byte_order == "little":
                return Encoding.UTF16_LE
            return Encoding.UTF16_BE
        return Encoding.from_name(encoding)

    def resolve_source(self, source: Union[DecodeSource, str]) -> DecodeSource:
        if isinstance(source, (Encoding, EncodingFamily)):
            return source
        name = source.strip().lower()
        for family in EncodingFamily:
            if family.value == name or family.value.replace("-", "") == name:
                return family
        return Encoding.from_name(source)

    def _run(
        self,
        operation: str,
        input_units: int,
        func: Callable[[ConversionResult], Any],
    ) -> ConversionResult:
        """Time ``func`` and fold its outcome into a ``ConversionResult``."""
        start_time = time.perf_counter()
        result = ConversionResult(success=False)
        result.metrics.input_units = input_units
        try:
            output = func(result)
        except TranscodingError as e:
            result.metrics.processing_time_ms = (
                (time.perf_counter() - start_time) * MS_PER_SECOND
            )
            result.error = e
            self._diagnose(
                result, DiagnosticSeverity.ERROR, str(e), position=e.position
            )
            self.logger.failure(f"{operation} failed", e)
            if self.config.raise_on_error:
                raise
            return result

        result.metrics.processing_time_ms = (
            (time.perf_counter() - start_time) * MS_PER_SECOND
        )
        result.success = True
        result.output = output
        result.metrics.output_units = len(output)
        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                f"{operation} completed",
                extra={
                    "input_units": input_units,
                    "output_units": len(output),
                    "processing_time_ms": result.metrics.processing_time_ms,
                },
            )
        return result

    def _diagnose(
        self,
        result: ConversionResult,
        severity: DiagnosticSeverity,
        message: str,
        position: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> None:
        if self.config.enable_diagnostics:
            result.add_diagnostic(
                severity,
                message,
                component="transcoder",
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )


@lru_cache(maxsize=None)
def _default() -> Transcoder:
    return Transcoder()


def transcode(units: CodeUnits, target: CodeUnitWidth) -> CodeUnits:
    """Convert ``units`` to ``target``, raising on malformed input.

    Examples:
        >>> transcode(CodeUnits.utf32([0x1F600]), CodeUnitWidth.UTF16).units
        (55357, 56832)
    """
    return _default().transcode(units, target).output


def encode(
    units: CodeUnits, encoding: Union[Encoding, str], add_bom: bool = False
) -> bytes:
    """Serialize ``units`` as ``encoding`` bytes, raising on malformed input."""
    return _default().encode(units, encoding, add_bom).output


def decode(
    data: BytesLike, source: Union[DecodeSource, str] = EncodingFamily.UTF16
) -> CodeUnits:
    """Decode ``data``, raising on malformed input or a mismatched BOM."""
    return _default().decode(data, source).output
