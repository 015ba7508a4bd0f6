from ..arithmetization.constraints import (
    ConstraintSystem,
    ConstraintTemplate,
    LinearCombination,
)


class BitsToNum(ConstraintTemplate):
    """
    Convert n-bits binary to number, constraining every bit to be boolean

    inputs: `[bit[0], bit[1], bit[2], ..., bit[n-1]]`
    outputs: `out` (linear combination, no new wire)
    args: `n`
    """

    def __init__(self, n: int):
        super().__init__()
        self.n_bit = n

    def main(self, cs: ConstraintSystem, bits: list) -> LinearCombination:
        assert len(bits) == self.n_bit

        for b in bits:
            cs.enforce(b, b, b)

        out = cs.constant(0)
        for i, b in enumerate(bits):
            out += b * (1 << i)

        return out


class NumToBits(ConstraintTemplate):
    """
    Convert number to n-bits binary

    inputs: `inp`
    outputs: `[bit[0], bit[1], bit[2], ..., bit[n-1]]`
    args: `n`

    Bits are allocated from the current value of `inp`; a value that does not
    fit in `n` bits leaves the system unsatisfied.
    """

    def __init__(self, n: int):
        super().__init__()
        self.n_bit = n
        self.b2n = BitsToNum(n)

    def main(self, cs: ConstraintSystem, inp) -> list:
        x = cs.value(inp)
        bits = [cs.alloc((x >> i) & 1) for i in range(self.n_bit)]

        cs.enforce_equal(self.b2n(cs, bits), inp)

        return bits
