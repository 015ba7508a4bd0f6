import pytest

from zkanchor.arithmetization import ConstraintSystem, LinearCombination
from zkanchor.field import Field


@pytest.fixture
def cs_data():
    # y = x^3 + x + 5
    F = Field(97)
    cs = ConstraintSystem(F)

    y = cs.public_input(35)
    x = cs.alloc(3)
    v1 = cs.alloc(9)
    v2 = cs.alloc(27)

    cs.enforce(x, x, v1)
    cs.enforce(v1, x, v2)
    cs.enforce(v2 + x + 5, cs.one, y)

    return cs


def test_linear_combination():
    p = 97
    a = LinearCombination({1: 2}, p)
    b = LinearCombination({1: 95, 2: 1}, p)

    assert (a + b).terms == {2: 1}
    assert (a - a).terms == {}
    assert (3 * a).terms == {1: 6}
    assert (a + 1).terms == {0: 1, 1: 2}
    assert (1 - a).terms == {0: 1, 1: 95}
    assert a.evaluate([1, 10, 20]) == 20

    with pytest.raises(SyntaxError):
        a * b


def test_satisfied(cs_data):
    cs = cs_data

    assert cs.is_satisfied()
    assert cs.public_witness == [1, 35]
    assert cs.private_witness == [3, 9, 27]

    r1cs = cs.compile()
    assert r1cs.n_constraints == 3
    assert r1cs.n_witness == 5
    assert r1cs.is_sat(cs.public_witness, cs.private_witness)
    assert not r1cs.is_sat([1, 36], cs.private_witness)
    assert not r1cs.is_sat(cs.public_witness, [3, 9, 28])

    assert r1cs.A.to_dense()[2] == [5, 0, 1, 0, 1]


def test_unsatisfied(cs_data):
    cs = cs_data
    cs.assignment[4] = 28

    assert not cs.is_satisfied()
    assert cs.unsatisfied() == [1, 2]


def test_wire_order():
    cs = ConstraintSystem(Field(97))
    cs.public_input(1)
    cs.alloc(2)

    with pytest.raises(ValueError):
        cs.public_input(3)


def test_witness_length(cs_data):
    r1cs = cs_data.compile()

    with pytest.raises(ValueError):
        r1cs.is_sat([1], [35, 3, 9, 27])

    with pytest.raises(ValueError):
        r1cs.is_sat([1, 35], [3, 9])


def test_digest_ignores_values(cs_data):
    F = Field(97)
    cs = ConstraintSystem(F)

    y = cs.public_input(0)
    x = cs.alloc(0)
    v1 = cs.alloc(0)
    v2 = cs.alloc(0)

    cs.enforce(x, x, v1)
    cs.enforce(v1, x, v2)
    cs.enforce(v2 + x + 5, cs.one, y)

    assert cs.compile().digest() == cs_data.compile().digest()

    cs.enforce(x, x, x)
    assert cs.compile().digest() != cs_data.compile().digest()
