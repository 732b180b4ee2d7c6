import enum
from dataclasses import dataclass
from typing import NamedTuple

from amaranth.lib import data

BIAS = 15
EXPONENT_MAX = 31
FRACTION_BITS = 10
SIGNIFICAND_BITS = FRACTION_BITS + 1
PRODUCT_BITS = 2 * SIGNIFICAND_BITS

FRACTION_MASK = (1 << FRACTION_BITS) - 1
HIDDEN_BIT = 1 << FRACTION_BITS
MAGNITUDE_MASK = 0x7FFF

CANONICAL_NAN = 0x7FFF
POSITIVE_INFINITY = EXPONENT_MAX << FRACTION_BITS


class Float16(data.Struct):
    fraction: 10
    exponent: 5
    sign: 1

    def is_zero(self):
        return (self.exponent == 0) & (self.fraction == 0)

    def is_inf(self):
        return (self.exponent == EXPONENT_MAX) & (self.fraction == 0)

    def is_nan(self):
        return (self.exponent == EXPONENT_MAX) & (self.fraction != 0)


def status_flags(result: Float16):
    """Overflow, zero and NaN conditions decoded from a packed result signal."""
    bits = result.as_value()
    return bits[:15] == POSITIVE_INFINITY, bits[:15] == 0, bits == CANONICAL_NAN


class FP16Class(enum.Enum):
    ZERO = "zero"
    SUBNORMAL = "subnormal"
    NORMAL = "normal"
    INFINITY = "infinity"
    NAN = "nan"


class ExtendedSignificand(NamedTuple):
    """Working form of a finite operand: hidden bit prepended, exponent clamped to >= 1.

    ``sticky`` records whether non-zero bits were already dropped on the way in.
    """

    sign: int
    exponent: int
    significand: int
    sticky: bool = False

    # An extended significand is finite by construction; these let it stand in
    # for a decoded operand in the special-case checks.
    @property
    def is_nan(self) -> bool:
        return False

    @property
    def is_inf(self) -> bool:
        return False


def pack(sign: int, exponent: int, fraction: int) -> int:
    if sign not in (0, 1):
        raise ValueError(f"sign must be 0 or 1, got {sign!r}")
    if not 0 <= exponent <= EXPONENT_MAX:
        raise ValueError(f"exponent out of range: {exponent!r}")
    if not 0 <= fraction <= FRACTION_MASK:
        raise ValueError(f"fraction out of range: {fraction!r}")
    return (sign << 15) | (exponent << FRACTION_BITS) | fraction


@dataclass(frozen=True)
class FP16:
    """A half-precision bit pattern with its fields and classification."""

    bits: int

    def __post_init__(self):
        if not isinstance(self.bits, int) or not 0 <= self.bits <= 0xFFFF:
            raise ValueError(f"not a 16-bit pattern: {self.bits!r}")

    @classmethod
    def from_bits(cls, bits: int):
        return cls(bits)

    @classmethod
    def pack(cls, sign: int, exponent: int, fraction: int):
        return cls(pack(sign, exponent, fraction))

    def to_bits(self) -> int:
        return self.bits

    def unpack(self) -> tuple[int, int, int]:
        return self.sign, self.exponent, self.fraction

    @property
    def sign(self) -> int:
        return (self.bits >> 15) & 0x1

    @property
    def exponent(self) -> int:
        return (self.bits >> FRACTION_BITS) & 0x1F

    @property
    def fraction(self) -> int:
        return self.bits & FRACTION_MASK

    @property
    def kind(self) -> FP16Class:
        if self.exponent == 0:
            return FP16Class.ZERO if self.fraction == 0 else FP16Class.SUBNORMAL
        if self.exponent == EXPONENT_MAX:
            return FP16Class.INFINITY if self.fraction == 0 else FP16Class.NAN
        return FP16Class.NORMAL

    @property
    def is_zero(self) -> bool:
        return self.kind is FP16Class.ZERO

    @property
    def is_subnormal(self) -> bool:
        return self.kind is FP16Class.SUBNORMAL

    @property
    def is_inf(self) -> bool:
        return self.kind is FP16Class.INFINITY

    @property
    def is_nan(self) -> bool:
        return self.kind is FP16Class.NAN

    def extend(self) -> ExtendedSignificand:
        # Subnormals share exponent 1's scale but have no hidden bit.
        if self.exponent == 0:
            return ExtendedSignificand(self.sign, 1, self.fraction)
        return ExtendedSignificand(self.sign, self.exponent, self.fraction | HIDDEN_BIT)

    def __repr__(self):
        return f"FP16(0x{self.bits:04X})"


def decode(bits: int) -> FP16:
    return FP16(bits)


@dataclass(frozen=True)
class AddResult:
    """Adder (and MAC) outcome.

    ``overflow``, ``zero`` and ``nan`` are read off the packed ``result``, so
    they always agree with it. ``precision_lost`` is set when any non-zero bit
    was discarded while producing ``result``.
    """

    result: int
    precision_lost: bool = False

    @property
    def value(self) -> FP16:
        return FP16(self.result)

    @property
    def overflow(self) -> bool:
        return (self.result & MAGNITUDE_MASK) == POSITIVE_INFINITY

    @property
    def zero(self) -> bool:
        return (self.result & MAGNITUDE_MASK) == 0

    @property
    def nan(self) -> bool:
        return self.result == CANONICAL_NAN


@dataclass(frozen=True)
class MulResult:
    """Multiplier outcome; ``underflow`` marks a product flushed to zero."""

    result: int
    underflow: bool = False

    @property
    def value(self) -> FP16:
        return FP16(self.result)

    @property
    def overflow(self) -> bool:
        return (self.result & MAGNITUDE_MASK) == POSITIVE_INFINITY

    @property
    def zero(self) -> bool:
        return (self.result & MAGNITUDE_MASK) == 0

    @property
    def nan(self) -> bool:
        return self.result == CANONICAL_NAN
