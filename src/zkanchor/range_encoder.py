"""
Range encoding

`lo <= v <= hi` holds exactly when both `v - lo` and `hi - v` have a
`B`-bit decomposition. A negative difference wraps around the modulus to a
value close to `p`, which has no such decomposition as long as `2^B` is far
below `p` (checked once in `ProtocolParams`).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union

from .errors import FieldOverflowError, InvalidRangeError, OutOfRangeError
from .field import Field, FieldElement

Element = Union[int, FieldElement]


@dataclass(frozen=True)
class BitDecomposition:
    """Little-endian 0/1 field elements of fixed width"""

    bits: tuple

    def __post_init__(self):
        object.__setattr__(self, "bits", tuple(self.bits))

    @classmethod
    def from_element(cls, value: FieldElement, width: int) -> BitDecomposition:
        field = value.field
        return cls(tuple(field(b) for b in value.to_bits(width)))

    def __len__(self):
        return len(self.bits)

    def __iter__(self):
        return iter(self.bits)

    @property
    def width(self) -> int:
        return len(self.bits)

    def is_boolean(self) -> bool:
        return all(b.value in (0, 1) for b in self.bits)

    def reconstruct(self, field: Field) -> FieldElement:
        """`sum(bits[i] * 2^i)` evaluated in `field`"""
        acc = field.zero()
        for i, b in enumerate(self.bits):
            acc += b * (1 << i)
        return acc


@dataclass(frozen=True)
class RangeQuery:
    """Inclusive range [lo, hi] of unsigned integers"""

    lo: FieldElement
    hi: FieldElement

    @classmethod
    def of(cls, field: Field, lo: Element, hi: Element) -> RangeQuery:
        return cls(field(lo), field(hi))

    def validate(self, bit_width: int):
        """
        Raises:
            InvalidRangeError: bounds do not fit into `bit_width` bits or lo > hi
        """
        self.lo.field.ensure_same(self.hi.field)

        limit = 1 << bit_width
        if self.lo.value >= limit or self.hi.value >= limit:
            raise InvalidRangeError(
                f"Range [{self.lo}, {self.hi}] does not fit into {bit_width} bits"
            )
        if self.lo.value > self.hi.value:
            raise InvalidRangeError(f"Empty range: {self.lo} > {self.hi}")

    def contains(self, value: Element) -> bool:
        v = self.lo.field(value).value
        return self.lo.value <= v <= self.hi.value

    def to_bytes(self) -> bytes:
        return self.lo.to_bytes() + self.hi.to_bytes()


@dataclass(frozen=True)
class RangeWitness:
    """Auxiliary witness of `lo <= v <= hi`"""

    lower: BitDecomposition  # bits of v - lo
    upper: BitDecomposition  # bits of hi - v

    @property
    def bit_width(self) -> int:
        return self.lower.width


def encode(value: FieldElement, lo: Element, hi: Element, bit_width: int) -> RangeWitness:
    """
    Produce the bit decompositions of `value - lo` and `hi - value`

    Raises:
        OutOfRangeError: `value` lies outside [lo, hi] under `bit_width`-bit
        unsigned interpretation
    """
    if not isinstance(value, FieldElement):
        raise TypeError(f"Value must be a FieldElement, got {type(value)}")

    field = value.field
    d_lo = value - field(lo)
    d_hi = field(hi) - value

    try:
        lower = BitDecomposition.from_element(d_lo, bit_width)
    except FieldOverflowError as exc:
        raise OutOfRangeError(f"{value} is below the lower bound {lo}") from exc

    try:
        upper = BitDecomposition.from_element(d_hi, bit_width)
    except FieldOverflowError as exc:
        raise OutOfRangeError(f"{value} is above the upper bound {hi}") from exc

    return RangeWitness(lower, upper)


def is_decomposition_of(bits: BitDecomposition, target: FieldElement) -> bool:
    """Booleanity of every bit plus the reconstruction check"""
    return bits.is_boolean() and bits.reconstruct(target.field) == target
