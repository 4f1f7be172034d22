"""Conversion to and from the platform-native wide-character form.

The wide form is whatever ``wchar_t`` is on the host: 32-bit units holding
UTF-32 on most Unix systems, 16-bit units holding UTF-16 on Windows. A
``WidePlatform`` strategy is selected once for the host; on 16-bit platforms
conversions to the narrow native code page go through a pluggable
``WideCharService`` (the operating system on Windows).
"""

import codecs
import ctypes
import locale
import sys
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import ClassVar, Optional, Sequence, Tuple

from .conversion import (
    transcode,
    utf8_to_utf16,
    utf8_to_utf32,
    utf16_to_utf32,
    utf32_to_utf8,
    utf32_to_utf16,
)
from .units import CodeUnits, CodeUnitWidth, UnitsLike, coerce_units
from .validation import validate_utf16

UTF16_LE = "utf-16-le"
SURROGATE_PASS = "surrogatepass"


class WideCharService(ABC):
    """Conversion service between 16-bit wide units and narrow code-page bytes.

    Implementations return an empty result when the underlying conversion
    reports zero output; that is not treated as an error.
    """

    @property
    @abstractmethod
    def code_page(self) -> str:
        """Name or number of the narrow code page."""

    @abstractmethod
    def wide_to_multibyte(self, units: Sequence[int]) -> bytes:
        """Convert 16-bit wide units to narrow bytes."""

    @abstractmethod
    def multibyte_to_wide(self, data: bytes) -> Tuple[int, ...]:
        """Convert narrow bytes to 16-bit wide units."""


class Win32WideCharService(WideCharService):
    """``WideCharToMultiByte``/``MultiByteToWideChar`` through ctypes."""

    CP_ACP = 0
    CP_UTF8 = 65001

    def __init__(self, code_page: int = CP_ACP) -> None:
        self._code_page = code_page
        self._kernel32: Optional[ctypes.CDLL] = None

    @property
    def code_page(self) -> str:
        return str(self._code_page)

    def _api(self) -> ctypes.CDLL:
        if self._kernel32 is None:
            from ctypes import wintypes

            kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)  # type: ignore[attr-defined]
            kernel32.WideCharToMultiByte.argtypes = [
                wintypes.UINT, wintypes.DWORD, wintypes.LPCWSTR, ctypes.c_int,
                wintypes.LPSTR, ctypes.c_int, wintypes.LPCSTR, wintypes.LPBOOL,
            ]
            kernel32.WideCharToMultiByte.restype = ctypes.c_int
            kernel32.MultiByteToWideChar.argtypes = [
                wintypes.UINT, wintypes.DWORD, wintypes.LPCSTR, ctypes.c_int,
                wintypes.LPWSTR, ctypes.c_int,
            ]
            kernel32.MultiByteToWideChar.restype = ctypes.c_int
            self._kernel32 = kernel32
        return self._kernel32

    def wide_to_multibyte(self, units: Sequence[int]) -> bytes:
        if not units:
            return b""
        from ctypes import wintypes

        api = self._api()
        source = (ctypes.c_uint16 * len(units))(*units)
        source_ptr = ctypes.cast(source, wintypes.LPCWSTR)
        length = api.WideCharToMultiByte(
            self._code_page, 0, source_ptr, len(units), None, 0, None, None
        )
        if length <= 0:
            return b""
        buffer = ctypes.create_string_buffer(length)
        written = api.WideCharToMultiByte(
            self._code_page, 0, source_ptr, len(units), buffer, length, None, None
        )
        return buffer.raw[:max(written, 0)]

    def multibyte_to_wide(self, data: bytes) -> Tuple[int, ...]:
        if not data:
            return ()
        from ctypes import wintypes

        api = self._api()
        length = api.MultiByteToWideChar(self._code_page, 0, data, len(data), None, 0)
        if length <= 0:
            return ()
        buffer = (ctypes.c_uint16 * length)()
        written = api.MultiByteToWideChar(
            self._code_page, 0, data, len(data),
            ctypes.cast(buffer, wintypes.LPWSTR), length,
        )
        return tuple(buffer[:max(written, 0)])


class CodecWideCharService(WideCharService):
    """Code-page conversion through Python's codec registry.

    Unmappable characters become ``?`` and undecodable bytes become U+FFFD,
    the same substitutions the Windows API applies by default.
    """

    def __init__(self, code_page: str = "cp1252") -> None:
        try:
            self._codec = codecs.lookup(code_page).name
        except LookupError as e:
            raise ValueError(f"Unknown code page: {code_page}") from e

    @property
    def code_page(self) -> str:
        return self._codec

    def wide_to_multibyte(self, units: Sequence[int]) -> bytes:
        if not units:
            return b""
        raw = b"".join(unit.to_bytes(2, "little") for unit in units)
        text = raw.decode(UTF16_LE, SURROGATE_PASS)
        return text.encode(self._codec, "replace")

    def multibyte_to_wide(self, data: bytes) -> Tuple[int, ...]:
        if not data:
            return ()
        raw = bytes(data).decode(self._codec, "replace").encode(UTF16_LE, SURROGATE_PASS)
        return tuple(
            int.from_bytes(raw[i:i + 2], "little") for i in range(0, len(raw), 2)
        )


class WidePlatform(ABC):
    """Conversion strategy for one native wide-character width."""

    width: ClassVar[CodeUnitWidth]

    def wide(self, units: UnitsLike) -> CodeUnits:
        """Interpret ``units`` as a wide string of this platform."""
        return coerce_units(units, self.width)

    def to_wide(self, units: CodeUnits) -> CodeUnits:
        """Validate any transcoding form and convert it to the wide form."""
        return transcode(units, self.width)

    def from_wide(self, wide: UnitsLike, target: CodeUnitWidth) -> CodeUnits:
        """Convert a wide string to ``target``; a same-width target is a re-tag."""
        source = self.wide(wide)
        if target is self.width:
            return source
        return transcode(source, target)

    @abstractmethod
    def wstring_to_string(self, wide: UnitsLike) -> bytes:
        """Wide string to narrow native text."""

    @abstractmethod
    def string_to_wstring(self, data: bytes) -> CodeUnits:
        """Narrow native text to a wide string."""

    @abstractmethod
    def string_to_utf16(self, data: bytes) -> CodeUnits:
        """Narrow native text to UTF-16."""

    @abstractmethod
    def wstring_to_utf16(self, wide: UnitsLike) -> CodeUnits:
        """Wide string to UTF-16."""

    @abstractmethod
    def utf16_to_string(self, units: UnitsLike) -> bytes:
        """UTF-16 to narrow native text."""

    @abstractmethod
    def utf16_to_wstring(self, units: UnitsLike) -> CodeUnits:
        """UTF-16 to a wide string."""


class Utf32WidePlatform(WidePlatform):
    """Hosts with 32-bit ``wchar_t``: wide is UTF-32, narrow text is UTF-8."""

    width = CodeUnitWidth.UTF32

    def wstring_to_string(self, wide: UnitsLike) -> bytes:
        return utf32_to_utf8(self.wide(wide)).to_bytes()

    def string_to_wstring(self, data: bytes) -> CodeUnits:
        return utf8_to_utf32(CodeUnits.utf8(bytes(data)))

    def string_to_utf16(self, data: bytes) -> CodeUnits:
        return utf8_to_utf16(CodeUnits.utf8(bytes(data)))

    def wstring_to_utf16(self, wide: UnitsLike) -> CodeUnits:
        return utf32_to_utf16(self.wide(wide))

    def utf16_to_string(self, units: UnitsLike) -> bytes:
        return utf32_to_utf8(utf16_to_utf32(units)).to_bytes()

    def utf16_to_wstring(self, units: UnitsLike) -> CodeUnits:
        return utf16_to_utf32(units)


class Utf16WidePlatform(WidePlatform):
    """Hosts with 16-bit ``wchar_t``: wide is UTF-16, narrow text is a code page."""

    width = CodeUnitWidth.UTF16

    def __init__(self, service: WideCharService) -> None:
        self.service = service

    def wstring_to_string(self, wide: UnitsLike) -> bytes:
        return self.service.wide_to_multibyte(self.wide(wide).units)

    def string_to_wstring(self, data: bytes) -> CodeUnits:
        return CodeUnits.utf16(self.service.multibyte_to_wide(bytes(data)))

    def string_to_utf16(self, data: bytes) -> CodeUnits:
        return self.string_to_wstring(data)

    def wstring_to_utf16(self, wide: UnitsLike) -> CodeUnits:
        return self.wide(wide)

    def utf16_to_string(self, units: UnitsLike) -> bytes:
        source = coerce_units(units, CodeUnitWidth.UTF16)
        validate_utf16(source)
        return self.service.wide_to_multibyte(source.units)

    def utf16_to_wstring(self, units: UnitsLike) -> CodeUnits:
        source = coerce_units(units, CodeUnitWidth.UTF16)
        validate_utf16(source)
        return source


def select_platform(
    wchar_size: Optional[int] = None,
    system: Optional[str] = None,
    service: Optional[WideCharService] = None,
) -> WidePlatform:
    """Pick the wide strategy for a host.

    Args:
        wchar_size: Size of ``wchar_t`` in bytes, defaults to the running host
        system: ``sys.platform`` value, defaults to the running host
        service: Code-page service for 16-bit hosts; defaults to the Windows
            API on win32 and to the locale's preferred codec elsewhere

    Returns:
        The matching ``WidePlatform``
    """
    size = ctypes.sizeof(ctypes.c_wchar) if wchar_size is None else wchar_size
    if size == 4:
        return Utf32WidePlatform()
    if size != 2:
        raise ValueError(f"Unsupported wchar_t size: {size}")
    if service is None:
        if (system or sys.platform) == "win32":
            service = Win32WideCharService()
        else:
            service = CodecWideCharService(locale.getpreferredencoding(False))
    return Utf16WidePlatform(service)


@lru_cache(maxsize=None)
def native_platform() -> WidePlatform:
    """The wide strategy of the running host, selected once."""
    return select_platform()


def _platform(platform: Optional[WidePlatform]) -> WidePlatform:
    return platform if platform is not None else native_platform()


def to_wide(units: CodeUnits, platform: Optional[WidePlatform] = None) -> CodeUnits:
    return _platform(platform).to_wide(units)


def from_wide(
    wide: UnitsLike,
    target: CodeUnitWidth = CodeUnitWidth.UTF16,
    platform: Optional[WidePlatform] = None,
) -> CodeUnits:
    return _platform(platform).from_wide(wide, target)


def wstring_to_string(wide: UnitsLike, platform: Optional[WidePlatform] = None) -> bytes:
    return _platform(platform).wstring_to_string(wide)


def string_to_wstring(data: bytes, platform: Optional[WidePlatform] = None) -> CodeUnits:
    return _platform(platform).string_to_wstring(data)


def string_to_utf16(data: bytes, platform: Optional[WidePlatform] = None) -> CodeUnits:
    return _platform(platform).string_to_utf16(data)


def wstring_to_utf16(wide: UnitsLike, platform: Optional[WidePlatform] = None) -> CodeUnits:
    return _platform(platform).wstring_to_utf16(wide)


def utf16_to_string(units: UnitsLike, platform: Optional[WidePlatform] = None) -> bytes:
    return _platform(platform).utf16_to_string(units)


def utf16_to_wstring(units: UnitsLike, platform: Optional[WidePlatform] = None) -> CodeUnits:
    return _platform(platform).utf16_to_wstring(units)
