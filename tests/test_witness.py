import pytest

from zkanchor.anchor import derive_anchor
from zkanchor.errors import NonCanonicalEncodingError, ShapeMismatchError
from zkanchor.merkle import MerklePath
from zkanchor.range_encoder import encode
from zkanchor.witness import PublicInputs, Witness, WitnessAssembler


@pytest.fixture
def witness(params, tree):
    leaf = tree.leaf(5)
    range_witness = encode(leaf, 2, 8, params.bit_width)
    return WitnessAssembler(params).assemble(leaf, tree.path_for(5), range_witness)


def test_layout(params, tree, witness):
    D, B = params.depth, params.bit_width
    vector = witness.to_vector()

    assert len(vector) == 1 + 2 * D + 2 * B
    assert vector[0] == tree.leaf(5)
    assert vector[1 : 1 + D] == list(tree.path_for(5).siblings)
    # leaf 5 = 0b0101 is a right child at levels 0 and 2
    assert [d.value for d in vector[1 + D : 1 + 2 * D]] == [1, 0, 1, 0]
    # 5 - 2 = 3 and 8 - 5 = 3
    assert [b.value for b in vector[1 + 2 * D : 1 + 2 * D + 3]] == [1, 1, 0]
    assert [b.value for b in vector[-B:]][:3] == [1, 1, 0]

    assert Witness.from_vector(vector, params) == witness
    assert Witness.from_vector([x.value for x in vector], params) == witness


def test_shape_errors(params, tree, witness):
    with pytest.raises(ShapeMismatchError):
        Witness.from_vector(witness.to_vector()[:-1], params)

    path = tree.path_for(5)
    short = MerklePath(path.siblings[:3], path.directions[:3])
    range_witness = encode(tree.leaf(5), 2, 8, params.bit_width)
    with pytest.raises(ShapeMismatchError):
        WitnessAssembler(params).assemble(tree.leaf(5), short, range_witness)

    narrow = encode(tree.leaf(5), 2, 8, params.bit_width - 1)
    with pytest.raises(ShapeMismatchError):
        WitnessAssembler(params).assemble(tree.leaf(5), path, narrow)


def test_public_inputs(field, params, tree):
    anchor = derive_anchor(tree.root, 2, 8, params.tag_element)
    public = PublicInputs(anchor, field(2), field(8))

    data = public.to_bytes()
    assert len(data) == 3 * field.byte_length
    assert PublicInputs.from_bytes(data, field) == public
    assert public.query.lo == field(2)

    with pytest.raises(ShapeMismatchError):
        PublicInputs.from_bytes(data + b"\x00", field)

    with pytest.raises(NonCanonicalEncodingError):
        PublicInputs.from_bytes(b"\xff" * len(data), field)
