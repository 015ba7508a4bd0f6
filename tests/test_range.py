import pytest

from zkanchor.errors import InvalidRangeError, OutOfRangeError, RangeError
from zkanchor.range_encoder import BitDecomposition, RangeQuery, encode, is_decomposition_of

B = 16


def test_boundaries(field):
    lo, hi = field(2), field(8)

    for v in (2, 5, 8):
        w = encode(field(v), lo, hi, B)
        assert w.bit_width == B
        assert w.lower.reconstruct(field) == field(v) - lo
        assert w.upper.reconstruct(field) == hi - field(v)
        assert is_decomposition_of(w.lower, field(v) - lo)

    with pytest.raises(OutOfRangeError):
        encode(field(1), lo, hi, B)

    with pytest.raises(OutOfRangeError):
        encode(field(9), lo, hi, B)


def test_extremes(field):
    top = (1 << B) - 1

    w = encode(field(0), 0, top, B)
    assert list(w.lower) == [field(0)] * B
    assert list(w.upper) == [field(1)] * B

    w = encode(field(7), 7, 7, B)
    assert w.lower.reconstruct(field) == field(0)
    assert w.upper.reconstruct(field) == field(0)

    with pytest.raises(RangeError):
        encode(field(top + 1), 0, top, B)


def test_query_validation(field):
    RangeQuery.of(field, 0, (1 << B) - 1).validate(B)

    with pytest.raises(InvalidRangeError):
        RangeQuery.of(field, 0, 1 << B).validate(B)

    with pytest.raises(InvalidRangeError):
        RangeQuery.of(field, 9, 8).validate(B)

    query = RangeQuery.of(field, 2, 8)
    assert query.contains(2) and query.contains(8)
    assert not query.contains(9)
    assert len(query.to_bytes()) == 2 * field.byte_length


def test_non_boolean_decomposition(field):
    # 2 * 2^0 + 0 * 2^1 reconstructs 2, but the bits are not boolean
    bits = BitDecomposition((field(2), field(0)))

    assert bits.reconstruct(field) == field(2)
    assert not bits.is_boolean()
    assert not is_decomposition_of(bits, field(2))


def test_encode_requires_field_element(field):
    with pytest.raises(TypeError):
        encode(5, 2, 8, B)
