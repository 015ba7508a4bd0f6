"""Protocol parameters fixed per deployment"""

from __future__ import annotations
import hashlib
import math
import os
from dataclasses import dataclass, field as dataclass_field
from functools import cached_property

from .constant import DEFAULT_BIT_WIDTH, DEFAULT_DEPTH, DEFAULT_PROTOCOL_TAG, SBOX_ALPHA
from .errors import ConfigError, ParameterMismatchError
from .field import Field, FieldElement


@dataclass(frozen=True)
class ProtocolParams:
    """
    Parameters shared by prover and verifier

    Args:
        curve: curve whose scalar field is used, e.g. `BN254` or `BLS12_381`
        depth: Merkle tree depth `D` (capacity `2^D`)
        bit_width: range bit width `B`
        tag: domain tag mixed into the anchor
    """

    curve: str = "BN254"
    depth: int = DEFAULT_DEPTH
    bit_width: int = DEFAULT_BIT_WIDTH
    tag: int = DEFAULT_PROTOCOL_TAG
    _field: Field = dataclass_field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "curve", self.curve.upper())
        # raises ConfigError on unknown curve
        object.__setattr__(self, "_field", Field.from_curve(self.curve))
        self.validate()

    @property
    def field(self) -> Field:
        return self._field

    @property
    def capacity(self) -> int:
        return 1 << self.depth

    @property
    def tag_element(self) -> FieldElement:
        return self._field(self.tag)

    def validate(self):
        p = self._field.modulus

        if not isinstance(self.depth, int) or self.depth < 1:
            raise ConfigError(f"Tree depth must be a positive integer, got {self.depth}")

        if not isinstance(self.bit_width, int) or self.bit_width < 1:
            raise ParameterMismatchError(
                f"Range bit width must be a positive integer, got {self.bit_width}"
            )

        # d_lo + d_hi < 2^(B+1) must not wrap around p
        if 1 << (self.bit_width + 1) >= p:
            raise ParameterMismatchError(
                f"Range bit width {self.bit_width} is too large for a "
                f"{self._field.bit_length}-bit field"
            )

        if not 0 <= self.tag < p:
            raise ParameterMismatchError("Domain tag must be a canonical field element")

        if math.gcd(SBOX_ALPHA, p - 1) != 1:
            raise ParameterMismatchError(
                f"x^{SBOX_ALPHA} is not a permutation of the field of {self.curve}"
            )

    @classmethod
    def from_env(cls) -> ProtocolParams:
        """
        Read parameters from `ZKANCHOR_CURVE`, `ZKANCHOR_TREE_DEPTH`,
        `ZKANCHOR_RANGE_BITS` and `ZKANCHOR_DOMAIN_TAG` (decimal or 0x-hex)
        """
        try:
            return cls(
                curve=os.environ.get("ZKANCHOR_CURVE", "BN254"),
                depth=int(os.environ.get("ZKANCHOR_TREE_DEPTH", DEFAULT_DEPTH)),
                bit_width=int(os.environ.get("ZKANCHOR_RANGE_BITS", DEFAULT_BIT_WIDTH)),
                tag=int(os.environ.get("ZKANCHOR_DOMAIN_TAG", str(DEFAULT_PROTOCOL_TAG)), 0),
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid protocol parameter in environment: {exc}") from exc

    def to_bytes(self) -> bytes:
        """Canonical encoding: modulus, depth, bit width and tag"""
        width = self._field.byte_length
        return (
            self._field.modulus.to_bytes(width, "little")
            + self.depth.to_bytes(2, "little")
            + self.bit_width.to_bytes(2, "little")
            + self.tag.to_bytes(width, "little")
        )

    @cached_property
    def fingerprint(self) -> bytes:
        return hashlib.sha256(b"zkanchor-params" + self.to_bytes()).digest()

    def ensure_compatible(self, other: ProtocolParams):
        if self.fingerprint != other.fingerprint:
            raise ParameterMismatchError(f"Parameters differ: {self} and {other}")

    def ensure_fingerprint(self, fingerprint: bytes):
        if fingerprint != self.fingerprint:
            raise ParameterMismatchError(
                "Proof was produced under different protocol parameters"
            )
