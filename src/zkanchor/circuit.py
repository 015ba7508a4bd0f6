"""
Constraint system of the anchored range statement

Public wires: anchor, lo, hi. Private wires start with the witness vector in
`Witness.to_vector()` order, followed by the intermediate wires of the
gadgets. The shape of the system depends only on `ProtocolParams`.
"""

from __future__ import annotations
import logging

from .arithmetization import ConstraintSystem
from .constant import ANCHOR_DOMAIN
from .gadgets import BitsToNum, MerklePathGadget, Poseidon
from .params import ProtocolParams
from .witness import PublicInputs, Witness

logger = logging.getLogger(__name__)


class AnchoredRangeCircuit:
    """
    Args:
        params: protocol parameters fixing the field, `D`, `B` and the tag
    """

    def __init__(self, params: ProtocolParams):
        self.params = params
        field = params.field

        self.merkle = MerklePathGadget(field, params.depth)
        self.anchor_hash = Poseidon(field, 4)
        self.b2n = BitsToNum(params.bit_width)

    def synthesize(self, public: PublicInputs, witness: Witness) -> ConstraintSystem:
        """
        Build the constraint system and fill in every wire. A false
        statement yields an unsatisfied system, never an exception.
        """
        params = self.params
        cs = ConstraintSystem(params.field)

        anchor, lo, hi = (cs.public_input(x.value) for x in public.to_vector())

        leaf = cs.alloc(witness.leaf.value)
        siblings = [cs.alloc(s.value) for s in witness.siblings]
        directions = [cs.alloc(d.value) for d in witness.directions]
        lower_bits = [cs.alloc(b.value) for b in witness.lower]
        upper_bits = [cs.alloc(b.value) for b in witness.upper]

        root = self.merkle(cs, leaf, siblings, directions)

        tag = cs.constant(params.tag)
        derived = self.anchor_hash(cs, [root, lo, hi, tag], domain=ANCHOR_DOMAIN)
        cs.enforce_equal(derived, anchor)

        cs.enforce_equal(self.b2n(cs, lower_bits), leaf - lo)
        cs.enforce_equal(self.b2n(cs, upper_bits), hi - leaf)

        logger.debug(
            "Synthesized %d constraints over %d wires", cs.num_constraints, cs.num_witness
        )
        return cs

    def setup_shape(self):
        """Compile the circuit over an all-zero assignment"""
        field = self.params.field
        D, B = self.params.depth, self.params.bit_width
        zero = field.zero()

        public = PublicInputs(zero, zero, zero)
        witness = Witness.from_vector([0] * (1 + 2 * D + 2 * B), self.params)
        return self.synthesize(public, witness).compile()
