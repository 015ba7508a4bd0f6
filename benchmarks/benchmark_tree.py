import sys

from zkanchor.circuit import AnchoredRangeCircuit
from zkanchor.merkle import MerkleTree
from zkanchor.params import ProtocolParams
from zkanchor.utils import Timer


def run(depth, bit_width=64):
    params = ProtocolParams(depth=depth, bit_width=bit_width)

    tree = MerkleTree.from_params(params)
    with Timer(f"Build tree of depth {depth}"):
        tree.build(list(range(tree.capacity)))

    circuit = AnchoredRangeCircuit(params)
    with Timer(f"Compile circuit of depth {depth}"):
        r1cs = circuit.setup_shape()

    print(f"{r1cs.n_constraints} constraints, {r1cs.n_witness} wires")


if __name__ == "__main__":
    depths = [int(x) for x in sys.argv[1:]] or [4, 8, 12]
    for depth in depths:
        run(depth)
