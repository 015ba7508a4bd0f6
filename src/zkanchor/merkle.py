"""
Fixed-depth binary Merkle tree over field elements

Nodes live in one flat list, level-major: the node at (level, position)
is stored at `2^level - 1 + position`, level 0 being the root and level
`depth` the leaves.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Sequence, Union

from joblib import Parallel, delayed

from . import constant
from .constant import MERKLE_EMPTY_DOMAIN, MERKLE_NODE_DOMAIN
from .errors import (
    IndexOutOfRangeError,
    MerkleError,
    PathLengthMismatchError,
    TooManyLeavesError,
)
from .field import Field, FieldElement
from .poseidon import PoseidonParams, get_poseidon, permute
from .utils import get_n_jobs, split_list

logger = logging.getLogger(__name__)

PARALLEL_CHUNK_SIZE = 512


class MerkleHasher:
    """
    Two-to-one node hash: Poseidon(left, right) with the capacity element
    set to the node domain
    """

    def __init__(self, field: Field):
        self.field = field
        self.poseidon = get_poseidon(field, 2)
        self.empty_leaf = self.poseidon.hash([0, 0], MERKLE_EMPTY_DOMAIN)

    @property
    def params(self) -> PoseidonParams:
        return self.poseidon.params

    def hash_node(
        self, left: Union[int, FieldElement], right: Union[int, FieldElement]
    ) -> FieldElement:
        return self.poseidon.hash([left, right], MERKLE_NODE_DOMAIN)


def _hash_pairs(params: PoseidonParams, pairs: Sequence[tuple[int, int]]) -> list[int]:
    return [permute(params, [MERKLE_NODE_DOMAIN, l, r])[0] for l, r in pairs]


@dataclass(frozen=True)
class MerklePath:
    """
    Sibling chain from a leaf up to the root. `directions[i]` is 1 when the
    node at that level is a right child.
    """

    siblings: tuple
    directions: tuple

    def __post_init__(self):
        object.__setattr__(self, "siblings", tuple(self.siblings))
        object.__setattr__(self, "directions", tuple(int(d) for d in self.directions))

        if len(self.siblings) != len(self.directions):
            raise PathLengthMismatchError(
                f"{len(self.siblings)} siblings but {len(self.directions)} direction bits"
            )
        if any(d not in (0, 1) for d in self.directions):
            raise MerkleError("Direction bits must be 0 or 1")

        if not all(isinstance(s, FieldElement) for s in self.siblings):
            raise TypeError("Siblings must be FieldElements")
        for s in self.siblings[1:]:
            self.siblings[0].field.ensure_same(s.field)

    def __len__(self):
        return len(self.siblings)

    @property
    def index(self) -> int:
        """Leaf index encoded by the direction bits"""
        return sum(d << i for i, d in enumerate(self.directions))

    def to_bytes(self) -> bytes:
        """Each level: sibling encoding followed by one direction byte"""
        out = b""
        for sibling, direction in zip(self.siblings, self.directions):
            out += sibling.to_bytes() + bytes([direction])
        return out

    @classmethod
    def from_bytes(cls, data: bytes, field: Field, depth: int) -> MerklePath:
        step = field.byte_length + 1
        if len(data) != depth * step:
            raise PathLengthMismatchError(
                f"Path of depth {depth} must be {depth * step} bytes, got {len(data)}"
            )

        siblings = []
        directions = []
        for i in range(depth):
            chunk = data[i * step : (i + 1) * step]
            siblings.append(field.from_bytes(chunk[:-1]))
            directions.append(chunk[-1])

        return cls(tuple(siblings), tuple(directions))


def compute_root(
    hasher: MerkleHasher, leaf: Union[int, FieldElement], path: MerklePath
) -> FieldElement:
    """Fold the hash chain from `leaf` along `path`"""
    current = hasher.field(leaf)
    for sibling, direction in zip(path.siblings, path.directions):
        if direction:
            current = hasher.hash_node(sibling, current)
        else:
            current = hasher.hash_node(current, sibling)
    return current


def verify_path(
    hasher: MerkleHasher,
    root: Union[int, FieldElement],
    leaf: Union[int, FieldElement],
    path: MerklePath,
) -> bool:
    """Check that `path` links `leaf` to `root`"""
    return compute_root(hasher, leaf, path) == hasher.field(root)


class MerkleTree:
    """
    Complete binary Merkle tree of fixed `depth`, built once and then frozen

    Args:
        hasher: node hasher bound to the configured field
        depth: number of levels above the leaves
    """

    def __init__(self, hasher: MerkleHasher, depth: int):
        if depth < 1:
            raise MerkleError(f"Depth must be at least 1, got {depth}")

        self.hasher = hasher
        self.field = hasher.field
        self.depth = depth
        self.capacity = 1 << depth
        self.n_leaves = 0
        self._nodes = None

    @classmethod
    def from_params(cls, params) -> MerkleTree:
        return cls(MerkleHasher(params.field), params.depth)

    @staticmethod
    def _offset(level: int) -> int:
        return (1 << level) - 1

    @property
    def is_built(self) -> bool:
        return self._nodes is not None

    def _ensure_built(self):
        if self._nodes is None:
            raise MerkleError("Tree has not been built")

    def _hash_level(self, children: list[int]) -> list[int]:
        pairs = list(zip(children[0::2], children[1::2]))
        params = self.hasher.params

        if len(pairs) < constant.PARALLEL_LEVEL_THRESHOLD:
            return _hash_pairs(params, pairs)

        chunks = Parallel(n_jobs=get_n_jobs())(
            delayed(_hash_pairs)(params, chunk)
            for chunk in split_list(pairs, PARALLEL_CHUNK_SIZE)
        )
        return [h for chunk in chunks for h in chunk]

    def build(self, leaves: Sequence[Union[int, FieldElement]]) -> FieldElement:
        """
        Insert `leaves` in order, pad with the empty leaf and compute every
        level up to the root
        """
        if self._nodes is not None:
            raise MerkleError("Tree is already built and frozen")

        if len(leaves) > self.capacity:
            raise TooManyLeavesError(
                f"{len(leaves)} leaves do not fit into a tree of depth {self.depth}"
            )

        values = [self.field(leaf).value for leaf in leaves]
        values += [self.hasher.empty_leaf.value] * (self.capacity - len(values))

        nodes = [0] * (2 * self.capacity - 1)
        nodes[self._offset(self.depth) :] = values

        # level k depends on the whole of level k + 1
        for level in range(self.depth - 1, -1, -1):
            start = self._offset(level + 1)
            children = nodes[start : start + (1 << (level + 1))]
            nodes[self._offset(level) : start] = self._hash_level(children)

        self._nodes = nodes
        self.n_leaves = len(leaves)

        logger.debug(
            "built Merkle tree of depth %d with %d/%d leaves",
            self.depth,
            self.n_leaves,
            self.capacity,
        )

        return self.root

    @property
    def root(self) -> FieldElement:
        self._ensure_built()
        return FieldElement(self._nodes[0], self.field)

    def node(self, level: int, position: int) -> FieldElement:
        self._ensure_built()
        if not 0 <= level <= self.depth or not 0 <= position < (1 << level):
            raise IndexOutOfRangeError(f"No node at level {level}, position {position}")
        return FieldElement(self._nodes[self._offset(level) + position], self.field)

    def leaf(self, index: int) -> FieldElement:
        if not 0 <= index < self.n_leaves:
            raise IndexOutOfRangeError(f"Leaf index {index} out of range")
        return self.node(self.depth, index)

    def leaves(self) -> list[FieldElement]:
        return [self.leaf(i) for i in range(self.n_leaves)]

    def __len__(self):
        return self.n_leaves

    def path_for(self, index: int) -> MerklePath:
        """Sibling chain of leaf `index`, ordered from leaf to root"""
        self._ensure_built()
        if not 0 <= index < self.n_leaves:
            raise IndexOutOfRangeError(
                f"Leaf index {index} out of range for {self.n_leaves} leaves"
            )

        siblings = []
        directions = []
        position = index
        for level in range(self.depth, 0, -1):
            sibling = self._nodes[self._offset(level) + (position ^ 1)]
            siblings.append(FieldElement(sibling, self.field))
            directions.append(position & 1)
            position >>= 1

        return MerklePath(tuple(siblings), tuple(directions))

    def verify(
        self,
        root: Union[int, FieldElement],
        leaf: Union[int, FieldElement],
        path: MerklePath,
    ) -> bool:
        if len(path) != self.depth:
            raise PathLengthMismatchError(
                f"Path length {len(path)} differs from tree depth {self.depth}"
            )
        return verify_path(self.hasher, root, leaf, path)
