"""Sized numeric field annotations.

Python has one ``int`` and one ``float``. Destination records that need a
narrower width annotate fields with these aliases; the binder rejects
values that do not fit instead of truncating them::

    @dataclass
    class Pixel:
        x: Uint16
        y: Uint16
        alpha: Float32 | None = None

A bare ``int`` is treated as ``Int64`` and a bare ``float`` as ``Float64``.
"""

from dataclasses import dataclass
from typing import Annotated


@dataclass(frozen=True, slots=True)
class IntWidth:
    """Bit width and signedness of an integer field."""

    bits: int
    signed: bool = True

    @property
    def min(self) -> int:
        return -(2 ** (self.bits - 1)) if self.signed else 0

    @property
    def max(self) -> int:
        return 2 ** (self.bits - 1) - 1 if self.signed else 2**self.bits - 1

    def __contains__(self, value: int) -> bool:
        return self.min <= value <= self.max

    @property
    def label(self) -> str:
        return f"{'int' if self.signed else 'uint'}{self.bits}"


@dataclass(frozen=True, slots=True)
class FloatWidth:
    """Bit width of a floating-point field (32 or 64)."""

    bits: int = 64

    @property
    def label(self) -> str:
        return f"float{self.bits}"


INT64 = IntWidth(64)
FLOAT64 = FloatWidth(64)

type Int8 = Annotated[int, IntWidth(8)]
type Int16 = Annotated[int, IntWidth(16)]
type Int32 = Annotated[int, IntWidth(32)]
type Int64 = Annotated[int, INT64]

type Uint = Annotated[int, IntWidth(64, signed=False)]
type Uint8 = Annotated[int, IntWidth(8, signed=False)]
type Uint16 = Annotated[int, IntWidth(16, signed=False)]
type Uint32 = Annotated[int, IntWidth(32, signed=False)]
type Uint64 = Annotated[int, IntWidth(64, signed=False)]

type Float32 = Annotated[float, FloatWidth(32)]
type Float64 = Annotated[float, FLOAT64]
