"""Code unit sequences for the three Unicode transcoding forms.

A ``CodeUnits`` value is an immutable, width-tagged run of integers. The
constructor only checks that every unit fits the storage width; whether the
run is well-formed Unicode is decided by the validation layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Tuple, Union, overload

# Unicode scalar value limits
MAX_SCALAR_VALUE = 0x10FFFF
BMP_MAX = 0xFFFF
SUPPLEMENTARY_OFFSET = 0x10000

# Surrogate ranges
HIGH_SURROGATE_START = 0xD800
HIGH_SURROGATE_END = 0xDBFF
LOW_SURROGATE_START = 0xDC00
LOW_SURROGATE_END = 0xDFFF


class CodeUnitWidth(Enum):
    """Storage width of a code unit, in bits."""
    UTF8 = 8
    UTF16 = 16
    UTF32 = 32

    @property
    def max_unit(self) -> int:
        """Largest value a single code unit of this width can hold."""
        return (1 << self.value) - 1

    @property
    def byte_size(self) -> int:
        """Number of bytes occupied by one code unit."""
        return self.value // 8


@dataclass(frozen=True)
class CodeUnits:
    """Ordered, immutable sequence of code units of one width.

    Attributes:
        width: Code unit width of the sequence
        units: The code unit values
    """
    width: CodeUnitWidth
    units: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Normalize units to a tuple and check the storage range."""
        units = tuple(self.units)
        limit = self.width.max_unit
        for index, unit in enumerate(units):
            if not isinstance(unit, int) or isinstance(unit, bool):
                raise TypeError(
                    f"Code unit at index {index} is not an integer: {unit!r}"
                )
            if not 0 <= unit <= limit:
                raise ValueError(
                    f"Code unit 0x{unit:X} at index {index} does not fit "
                    f"in {self.width.value} bits"
                )
        object.__setattr__(self, "units", units)

    @classmethod
    def utf8(cls, data: Union[bytes, bytearray, Iterable[int]] = b"") -> "CodeUnits":
        """Build a UTF-8 sequence from bytes or byte values."""
        return cls(CodeUnitWidth.UTF8, tuple(data))

    @classmethod
    def utf16(cls, units: Iterable[int] = ()) -> "CodeUnits":
        """Build a UTF-16 sequence from 16-bit unit values."""
        return cls(CodeUnitWidth.UTF16, tuple(units))

    @classmethod
    def utf32(cls, units: Iterable[int] = ()) -> "CodeUnits":
        """Build a UTF-32 sequence from 32-bit unit values."""
        return cls(CodeUnitWidth.UTF32, tuple(units))

    def to_bytes(self) -> bytes:
        """Return the units of a UTF-8 sequence as ``bytes``."""
        if self.width is not CodeUnitWidth.UTF8:
            raise TypeError(
                f"Only UTF-8 sequences map directly to bytes, got {self.width.name}"
            )
        return bytes(self.units)

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self) -> Iterator[int]:
        return iter(self.units)

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> "CodeUnits": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[int, "CodeUnits"]:
        if isinstance(index, slice):
            return CodeUnits(self.width, self.units[index])
        return self.units[index]

    def __repr__(self) -> str:
        digits = self.width.byte_size * 2
        body = " ".join(f"{unit:0{digits}X}" for unit in self.units[:16])
        if len(self.units) > 16:
            body += " ..."
        return f"CodeUnits({self.width.name}, [{body}])"


UnitsLike = Union[CodeUnits, bytes, bytearray, Iterable[int]]


def coerce_units(value: UnitsLike, width: CodeUnitWidth) -> CodeUnits:
    """Wrap raw input as ``CodeUnits`` of the given width.

    Args:
        value: A ``CodeUnits`` of the same width, bytes, or integer values
        width: Expected code unit width

    Returns:
        The input as a ``CodeUnits`` instance

    Raises:
        TypeError: If a ``CodeUnits`` of a different width is supplied
    """
    if isinstance(value, CodeUnits):
        if value.width is not width:
            raise TypeError(
                f"Expected {width.name} code units, got {value.width.name}"
            )
        return value
    if isinstance(value, str):
        raise TypeError("Text must be converted with encode_text() first")
    return CodeUnits(width, tuple(value))


def is_high_surrogate(unit: int) -> bool:
    return HIGH_SURROGATE_START <= unit <= HIGH_SURROGATE_END


def is_low_surrogate(unit: int) -> bool:
    return LOW_SURROGATE_START <= unit <= LOW_SURROGATE_END
