import pytest
from joblib import parallel_backend

from zkanchor import constant, merkle
from zkanchor.errors import (
    IndexOutOfRangeError,
    MerkleError,
    ParameterMismatchError,
    PathLengthMismatchError,
    TooManyLeavesError,
)
from zkanchor.field import Field
from zkanchor.merkle import MerkleHasher, MerklePath, MerkleTree, compute_root, verify_path


def test_every_path_verifies(tree):
    root = tree.root

    for i in range(len(tree)):
        path = tree.path_for(i)
        assert path.index == i
        assert tree.verify(root, tree.leaf(i), path)
        assert compute_root(tree.hasher, i, path) == root


def test_structure(tree):
    hasher = tree.hasher

    assert tree.node(0, 0) == tree.root
    assert tree.node(4, 3) == tree.leaf(3)
    assert tree.node(3, 1) == hasher.hash_node(tree.leaf(2), tree.leaf(3))
    assert tree.leaves() == [tree.field(i) for i in range(10)]

    # unused slots hold the empty leaf
    assert tree.node(4, 10) == hasher.empty_leaf
    assert tree.node(4, 15) == hasher.empty_leaf


def test_tampered_path_rejected(tree):
    root = tree.root
    path = tree.path_for(5)

    assert not tree.verify(root, 6, path)
    assert not tree.verify(root + 1, 5, path)

    siblings = list(path.siblings)
    siblings[2] += 1
    assert not tree.verify(root, 5, MerklePath(siblings, path.directions))

    directions = list(path.directions)
    directions[0] ^= 1
    assert not tree.verify(root, 5, MerklePath(path.siblings, directions))


def test_deterministic_root(params, tree):
    other = MerkleTree.from_params(params)
    other.build(list(range(10)))
    assert other.root == tree.root

    shuffled = MerkleTree.from_params(params)
    shuffled.build([1, 0] + list(range(2, 10)))
    assert shuffled.root != tree.root


def test_empty_tree(params):
    hasher = MerkleHasher(params.field)
    tree = MerkleTree(hasher, 3)
    tree.build([])

    expected = hasher.empty_leaf
    for _ in range(3):
        expected = hasher.hash_node(expected, expected)

    assert tree.root == expected
    assert len(tree) == 0


def test_domain_separation(field):
    hasher = MerkleHasher(field)
    assert hasher.empty_leaf != hasher.hash_node(0, 0)


def test_errors(params, tree):
    small = MerkleTree(MerkleHasher(params.field), 2)
    with pytest.raises(TooManyLeavesError):
        small.build([1, 2, 3, 4, 5])

    with pytest.raises(MerkleError):
        small.root

    with pytest.raises(MerkleError):
        tree.build([1])

    with pytest.raises(MerkleError):
        MerkleTree(MerkleHasher(params.field), 0)

    with pytest.raises(IndexOutOfRangeError):
        tree.path_for(10)

    with pytest.raises(IndexOutOfRangeError):
        tree.path_for(-1)

    with pytest.raises(IndexOutOfRangeError):
        tree.node(5, 0)

    short = MerklePath(tree.path_for(0).siblings[:3], (0, 0, 0))
    with pytest.raises(PathLengthMismatchError):
        tree.verify(tree.root, 0, short)

    with pytest.raises(PathLengthMismatchError):
        MerklePath((tree.root,), (0, 1))

    with pytest.raises(MerkleError):
        MerklePath((tree.root,), (2,))


def test_path_bytes(field, tree):
    path = tree.path_for(7)
    data = path.to_bytes()

    assert len(data) == 4 * (field.byte_length + 1)
    assert MerklePath.from_bytes(data, field, 4) == path
    assert verify_path(tree.hasher, tree.root, 7, MerklePath.from_bytes(data, field, 4))

    with pytest.raises(PathLengthMismatchError):
        MerklePath.from_bytes(data, field, 3)

    corrupted = data[:-1] + b"\x02"
    with pytest.raises(MerkleError):
        MerklePath.from_bytes(corrupted, field, 4)


def test_parallel_build_matches_inline(params, tree, monkeypatch):
    monkeypatch.setattr(constant, "PARALLEL_LEVEL_THRESHOLD", 2)
    monkeypatch.setattr(merkle, "PARALLEL_CHUNK_SIZE", 3)

    parallel = MerkleTree.from_params(params)
    with parallel_backend("threading", n_jobs=2):
        parallel.build(list(range(10)))

    assert parallel.root == tree.root
    assert parallel.path_for(9) == tree.path_for(9)


def test_parallel_jobs_from_env(monkeypatch):
    from zkanchor.utils import get_n_jobs, split_list

    monkeypatch.delenv("ZKANCHOR_PARALLEL_CPU", raising=False)
    assert get_n_jobs() == -1

    monkeypatch.setenv("ZKANCHOR_PARALLEL_CPU", "2")
    assert get_n_jobs() == 2

    assert split_list(list(range(7)), 3) == [[0, 1, 2], [3, 4, 5], [6]]


def test_path_requires_field_elements(field, tree):
    with pytest.raises(TypeError):
        MerklePath((1, 2, 3, 4), (0, 0, 0, 0))

    path = tree.path_for(3)
    with pytest.raises(TypeError):
        MerklePath(tuple(s.value for s in path.siblings), path.directions)

    foreign = Field(97)(1)
    with pytest.raises(ParameterMismatchError):
        MerklePath(path.siblings[:3] + (foreign,), path.directions)

    # canonical width for every sibling
    assert len(path.to_bytes()) == 4 * (field.byte_length + 1)
