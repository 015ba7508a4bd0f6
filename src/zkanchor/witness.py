"""
Private and public inputs of the anchored range statement

Private vector layout (fixed, consumed by the backend in this order):

    [leaf,
     sibling_0 .. sibling_{D-1},
     direction_0 .. direction_{D-1},
     (v - lo)_0 .. (v - lo)_{B-1},
     (hi - v)_0 .. (hi - v)_{B-1}]

Public vector layout: [anchor, lo, hi]
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Union

from .errors import ShapeMismatchError
from .field import Field, FieldElement
from .merkle import MerklePath
from .params import ProtocolParams
from .range_encoder import BitDecomposition, RangeQuery, RangeWitness


@dataclass(frozen=True)
class PublicInputs:
    anchor: FieldElement
    lo: FieldElement
    hi: FieldElement

    @property
    def query(self) -> RangeQuery:
        return RangeQuery(self.lo, self.hi)

    def to_vector(self) -> list[FieldElement]:
        return [self.anchor, self.lo, self.hi]

    def to_bytes(self) -> bytes:
        return b"".join(x.to_bytes() for x in self.to_vector())

    @classmethod
    def from_bytes(cls, data: bytes, field: Field) -> PublicInputs:
        n = field.byte_length
        if len(data) != 3 * n:
            raise ShapeMismatchError(f"Public inputs must be {3 * n} bytes, got {len(data)}")
        return cls(*(field.from_bytes(data[i * n : (i + 1) * n]) for i in range(3)))


@dataclass(frozen=True)
class Witness:
    leaf: FieldElement
    siblings: tuple
    directions: tuple
    lower: BitDecomposition
    upper: BitDecomposition

    @property
    def depth(self) -> int:
        return len(self.siblings)

    @property
    def bit_width(self) -> int:
        return self.lower.width

    @property
    def field(self) -> Field:
        return self.leaf.field

    def to_vector(self) -> list[FieldElement]:
        return (
            [self.leaf]
            + list(self.siblings)
            + list(self.directions)
            + list(self.lower)
            + list(self.upper)
        )

    @classmethod
    def from_vector(
        cls, vector: Sequence[Union[int, FieldElement]], params: ProtocolParams
    ) -> Witness:
        D, B = params.depth, params.bit_width
        expected = 1 + 2 * D + 2 * B
        if len(vector) != expected:
            raise ShapeMismatchError(
                f"Witness vector must hold {expected} elements, got {len(vector)}"
            )

        v = [params.field(x) for x in vector]
        return cls(
            leaf=v[0],
            siblings=tuple(v[1 : 1 + D]),
            directions=tuple(v[1 + D : 1 + 2 * D]),
            lower=BitDecomposition(tuple(v[1 + 2 * D : 1 + 2 * D + B])),
            upper=BitDecomposition(tuple(v[1 + 2 * D + B :])),
        )


class WitnessAssembler:
    """
    Lay out the private inputs in the order the circuit expects

    Args:
        params: protocol parameters fixing `D` and `B`
    """

    def __init__(self, params: ProtocolParams):
        self.params = params

    def assemble(
        self,
        leaf_value: Union[int, FieldElement],
        merkle_path: MerklePath,
        range_witness: RangeWitness,
    ) -> Witness:
        D, B = self.params.depth, self.params.bit_width
        field = self.params.field

        if len(merkle_path) != D:
            raise ShapeMismatchError(f"Merkle path length {len(merkle_path)} != depth {D}")

        for name, bits in (("lower", range_witness.lower), ("upper", range_witness.upper)):
            if bits.width != B:
                raise ShapeMismatchError(
                    f"{name} decomposition has {bits.width} bits, expected {B}"
                )

        return Witness(
            leaf=field(leaf_value),
            siblings=tuple(field(s) for s in merkle_path.siblings),
            directions=tuple(field(d) for d in merkle_path.directions),
            lower=BitDecomposition(tuple(field(b) for b in range_witness.lower)),
            upper=BitDecomposition(tuple(field(b) for b in range_witness.upper)),
        )
