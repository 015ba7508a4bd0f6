"""
Prime field arithmetic

Every other component works through `Field` and `FieldElement`; the modulus
is injected once, usually from the scalar field of the configured curve.
"""

from __future__ import annotations
from typing import Sequence, Union

from .ecc import EllipticCurve
from .errors import (
    FieldOverflowError,
    NonCanonicalEncodingError,
    NotInvertibleError,
    ParameterMismatchError,
)
from .utils import byte_length


class Field:
    """
    Prime field modulo `modulus`

    Args:
        modulus: prime modulus `p`
        name: optional label used in error messages
    """

    def __init__(self, modulus: int, name: str = None):
        if not isinstance(modulus, int) or modulus < 3:
            raise ParameterMismatchError(f"Invalid field modulus: {modulus}")

        self.modulus = modulus
        self.name = name or hex(modulus)
        self.bit_length = modulus.bit_length()
        self.byte_length = byte_length(modulus)

    @classmethod
    def from_curve(cls, curve: str) -> Field:
        """Scalar field of `curve`"""
        E = EllipticCurve(curve)
        return cls(E.order, E.name)

    def __call__(self, value: Union[int, FieldElement]) -> FieldElement:
        if isinstance(value, FieldElement):
            self.ensure_same(value.field)
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Cannot embed {type(value)} into {self}")
        return FieldElement(value % self.modulus, self)

    def __eq__(self, other):
        return isinstance(other, Field) and self.modulus == other.modulus

    def __hash__(self):
        return hash(self.modulus)

    def __repr__(self):
        return f"Field({self.name})"

    def ensure_same(self, other: Field):
        if self != other:
            raise ParameterMismatchError(
                f"Field mismatch: {self} and {other} cannot be mixed"
            )

    def zero(self) -> FieldElement:
        return FieldElement(0, self)

    def one(self) -> FieldElement:
        return FieldElement(1, self)

    def from_bytes(self, data: bytes) -> FieldElement:
        """
        Decode the fixed-width little-endian encoding. Wrong lengths and
        values >= p are rejected.
        """
        if len(data) != self.byte_length:
            raise NonCanonicalEncodingError(
                f"Expected {self.byte_length} bytes, got {len(data)}"
            )

        value = int.from_bytes(data, "little")
        if value >= self.modulus:
            raise NonCanonicalEncodingError("Encoded value is not below the modulus")

        return FieldElement(value, self)

    def from_bits(self, bits: Sequence[int]) -> FieldElement:
        """Recombine little-endian bits; entries must be 0 or 1"""
        acc = 0
        for i, b in enumerate(bits):
            b = int(b)
            if b not in (0, 1):
                raise ValueError(f"Bit {i} is {b}, expected 0 or 1")
            acc += b << i
        return self(acc)


class FieldElement:
    """Immutable element of `field`, always kept in [0, p)"""

    __slots__ = ("_value", "_field")

    def __init__(self, value: int, field: Field):
        if not 0 <= value < field.modulus:
            raise NonCanonicalEncodingError(f"{value} is not reduced modulo p")
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_field", field)

    def __setattr__(self, name, value):
        raise AttributeError("FieldElement is immutable")

    def __reduce__(self):
        return (FieldElement, (self._value, self._field))

    @property
    def value(self) -> int:
        return self._value

    @property
    def field(self) -> Field:
        return self._field

    def _coerce(self, other) -> int:
        if isinstance(other, FieldElement):
            self._field.ensure_same(other.field)
            return other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return other % self._field.modulus
        raise TypeError(f"Operation with {type(other)} is not allowed")

    def _new(self, value: int) -> FieldElement:
        return FieldElement(value % self._field.modulus, self._field)

    def __add__(self, other):
        return self._new(self._value + self._coerce(other))

    def __radd__(self, other):
        return self.__add__(other)

    def __sub__(self, other):
        return self._new(self._value - self._coerce(other))

    def __rsub__(self, other):
        return self._new(self._coerce(other) - self._value)

    def __mul__(self, other):
        return self._new(self._value * self._coerce(other))

    def __rmul__(self, other):
        return self.__mul__(other)

    def __neg__(self):
        return self._new(-self._value)

    def __pow__(self, exponent: int):
        return self._new(pow(self._value, exponent, self._field.modulus))

    def invert(self) -> FieldElement:
        if self._value == 0:
            raise NotInvertibleError("Zero has no multiplicative inverse")
        return self._new(pow(self._value, -1, self._field.modulus))

    def __truediv__(self, other):
        return self * self._field(self._coerce(other)).invert()

    def __eq__(self, other):
        if isinstance(other, FieldElement):
            return self._field == other.field and self._value == other.value
        return NotImplemented

    def __hash__(self):
        return hash((self._value, self._field.modulus))

    def __int__(self):
        return self._value

    def __index__(self):
        return self._value

    def __bool__(self):
        return self._value != 0

    def __repr__(self):
        return f"FieldElement({self._value})"

    def __str__(self):
        return str(self._value)

    def to_bits(self, width: int) -> list[int]:
        """
        Little-endian binary decomposition of exactly `width` bits

        Raises:
            FieldOverflowError: the value needs more than `width` bits
        """
        if width < 0:
            raise ValueError("Width must not be negative")
        if self._value.bit_length() > width:
            raise FieldOverflowError(
                f"Value needs {self._value.bit_length()} bits, only {width} allowed"
            )
        return [(self._value >> i) & 1 for i in range(width)]

    def to_bytes(self) -> bytes:
        """Fixed-width little-endian encoding"""
        return self._value.to_bytes(self._field.byte_length, "little")
