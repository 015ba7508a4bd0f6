"""
R1CS template of Poseidon hash

Mirrors `zkanchor.poseidon.permute` constraint by constraint, so the output
wire carries exactly the native digest.

Heavily referenced from:
https://github.com/iden3/circomlib/blob/master/circuits/poseidon.circom
"""

from ..arithmetization.constraints import (
    ConstraintSystem,
    ConstraintTemplate,
    LinearCombination,
)
from ..field import Field
from ..poseidon import poseidon_params


class Sigma(ConstraintTemplate):
    """x^5 in three multiplications"""

    def main(self, cs: ConstraintSystem, inp: LinearCombination):
        p = cs.p
        x = cs.value(inp)

        inp2 = cs.alloc(x * x % p)
        inp4 = cs.alloc(pow(x, 4, p))
        out = cs.alloc(pow(x, 5, p))

        cs.enforce(inp, inp, inp2)
        cs.enforce(inp2, inp2, inp4)
        cs.enforce(inp4, inp, out)

        return out


class Ark(ConstraintTemplate):
    def __init__(self, t, C, r):
        super().__init__()
        self.t = t
        self.C = C
        self.r = r

    def main(self, cs: ConstraintSystem, inp: list):
        # constant additions are linear, so no constraint is needed
        return [inp[i] + self.C[self.r * self.t + i] for i in range(self.t)]


class Mix(ConstraintTemplate):
    def __init__(self, t, M):
        super().__init__()
        self.t = t
        self.M = M

    def main(self, cs: ConstraintSystem, inp: list):
        out = []
        for i in range(self.t):
            lc = cs.constant(0)
            for j in range(self.t):
                lc += inp[j] * self.M[i][j]

            w = cs.alloc(cs.value(lc))
            cs.enforce(lc, cs.one, w)
            out.append(w)

        return out


class Poseidon(ConstraintTemplate):
    """
    Poseidon hash template

    inputs: `[inp[0], ..., inp[n-1]]`
    outputs: `out`
    args: `field`, `n_inputs`
    """

    def __init__(self, field: Field, n_inputs: int):
        super().__init__()
        self.n_inputs = n_inputs
        self.params = poseidon_params(field.modulus, n_inputs + 1)
        self.sigma = Sigma()
        self.mix = Mix(self.params.t, self.params.M)

    def main(self, cs: ConstraintSystem, inputs: list, domain: int = 0):
        params = self.params
        t = params.t

        assert len(inputs) == self.n_inputs

        state = [cs.constant(domain)] + list(inputs)
        for r in range(params.n_rounds):
            state = Ark(t, params.C, r)(cs, state)

            if params.is_full_round(r):
                state = [self.sigma(cs, s) for s in state]
            else:
                state[0] = self.sigma(cs, state[0])

            state = self.mix(cs, state)

        return state[0]
