"""
Show that leaf #5 of a committed tree lies in [2, 8] without revealing it,
checking the statement natively and against the compiled constraint system
"""

from zkanchor import (
    AnchoredRangeCircuit,
    NativeVerifier,
    ProtocolParams,
    PublicInputs,
    RangeQuery,
    WitnessAssembler,
    derive_anchor,
    encode,
)
from zkanchor.errors import OutOfRangeError
from zkanchor.merkle import MerkleTree

params = ProtocolParams(depth=4, bit_width=16)
field = params.field

tree = MerkleTree.from_params(params)
root = tree.build([3, 14, 15, 92, 65, 5, 35, 89, 79, 32])
print("Root:", root)

# prover side
index = 5
query = RangeQuery.of(field, 2, 8)
leaf = tree.leaf(index)

anchor = derive_anchor(root, query.lo, query.hi, params.tag_element)
public = PublicInputs(anchor, query.lo, query.hi)
witness = WitnessAssembler(params).assemble(
    leaf, tree.path_for(index), encode(leaf, query.lo, query.hi, params.bit_width)
)

assert NativeVerifier(params).check(public, witness)

cs = AnchoredRangeCircuit(params).synthesize(public, witness)
r1cs = cs.compile()
print(f"Constraints: {r1cs.n_constraints}, wires: {r1cs.n_witness}")

assert r1cs.is_sat(cs.public_witness, cs.private_witness)
print(f"Leaf #{index} is in [{query.lo}, {query.hi}] under anchor {anchor}")

# the same leaf cannot be encoded for [6, 8]
try:
    encode(leaf, 6, 8, params.bit_width)
except OutOfRangeError as exc:
    print("Rejected:", exc)
