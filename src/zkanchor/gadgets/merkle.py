from ..arithmetization.constraints import ConstraintSystem, ConstraintTemplate
from ..constant import MERKLE_NODE_DOMAIN
from ..field import Field
from .poseidon import Poseidon


class MerklePathGadget(ConstraintTemplate):
    """
    Recompute a Merkle root from a leaf and its authentication path

    inputs: `leaf`, `[sibling[0], ...]`, `[direction[0], ...]`
    outputs: `root`
    args: `field`, `depth`

    A direction of 1 means the current node is the right child.
    """

    def __init__(self, field: Field, depth: int):
        super().__init__()
        self.depth = depth
        self.hash = Poseidon(field, 2)

    def main(self, cs: ConstraintSystem, leaf, siblings: list, directions: list):
        assert len(siblings) == self.depth and len(directions) == self.depth

        cur = leaf
        for sib, d in zip(siblings, directions):
            cs.enforce(d, d, d)

            # left = cur + d * (sib - cur)
            left = cs.alloc(
                cs.value(cur) + cs.value(d) * (cs.value(sib) - cs.value(cur))
            )
            cs.enforce(d, sib - cur, left - cur)
            right = sib + cur - left

            cur = self.hash(cs, [left, right], domain=MERKLE_NODE_DOMAIN)

        return cur
