"""
Native re-implementation of the circuit checks

Used as a pre-flight gate before the external backend is invoked and as the
semantic reference in tests. A rejected witness yields `False` (or a
`CheckResult` with a reason); malformed inputs raise.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .anchor import derive_anchor
from .errors import InvalidRangeError, ShapeMismatchError
from .merkle import MerkleHasher, MerklePath, compute_root
from .params import ProtocolParams
from .range_encoder import is_decomposition_of
from .witness import PublicInputs, Witness


class FailureReason(Enum):
    INVALID_RANGE = "invalid_range"
    NON_BOOLEAN_DIRECTION = "non_boolean_direction"
    ANCHOR_MISMATCH = "anchor_mismatch"
    LOWER_BOUND_VIOLATED = "lower_bound_violated"
    UPPER_BOUND_VIOLATED = "upper_bound_violated"
    BACKEND_REJECTED = "backend_rejected"


@dataclass(frozen=True)
class CheckResult:
    accepted: bool
    reason: Optional[FailureReason] = None
    detail: str = ""

    def __bool__(self):
        return self.accepted

    @classmethod
    def accept(cls) -> CheckResult:
        return cls(True)

    @classmethod
    def reject(cls, reason: FailureReason, detail: str = "") -> CheckResult:
        return cls(False, reason, detail)


class NativeVerifier:
    """
    Args:
        params: protocol parameters the witness must conform to
    """

    def __init__(self, params: ProtocolParams):
        self.params = params
        self.hasher = MerkleHasher(params.field)

    def _check_shape(self, public: PublicInputs, witness: Witness):
        field = self.params.field

        for x in public.to_vector() + witness.to_vector():
            field.ensure_same(x.field)

        if witness.depth != self.params.depth or len(witness.directions) != self.params.depth:
            raise ShapeMismatchError(
                f"Witness path has {witness.depth} levels, expected {self.params.depth}"
            )

        B = self.params.bit_width
        if witness.lower.width != B or witness.upper.width != B:
            raise ShapeMismatchError(f"Witness decompositions must hold {B} bits")

    def diagnose(self, public: PublicInputs, witness: Witness) -> CheckResult:
        self._check_shape(public, witness)

        try:
            public.query.validate(self.params.bit_width)
        except InvalidRangeError as exc:
            return CheckResult.reject(FailureReason.INVALID_RANGE, str(exc))

        if any(d.value not in (0, 1) for d in witness.directions):
            return CheckResult.reject(FailureReason.NON_BOOLEAN_DIRECTION)

        path = MerklePath(witness.siblings, tuple(d.value for d in witness.directions))
        root = compute_root(self.hasher, witness.leaf, path)

        anchor = derive_anchor(root, public.lo, public.hi, self.params.tag_element)
        if anchor != public.anchor:
            return CheckResult.reject(
                FailureReason.ANCHOR_MISMATCH,
                "witness root and public range do not produce the public anchor",
            )

        if not is_decomposition_of(witness.lower, witness.leaf - public.lo):
            return CheckResult.reject(FailureReason.LOWER_BOUND_VIOLATED)

        if not is_decomposition_of(witness.upper, public.hi - witness.leaf):
            return CheckResult.reject(FailureReason.UPPER_BOUND_VIOLATED)

        return CheckResult.accept()

    def check(self, public: PublicInputs, witness: Witness) -> bool:
        return self.diagnose(public, witness).accepted
