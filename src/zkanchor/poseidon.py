"""
Poseidon hash over the configured prime field

Heavily referenced from:
https://eprint.iacr.org/2019/458.pdf (Poseidon paper, Appendix F)
https://github.com/iden3/circomlib/blob/master/circuits/poseidon.circom

Round constants and the Cauchy MDS matrix are sampled from the Grain LFSR
seeded with (field, sbox, n, t, R_F, R_P), so each modulus gets its own
parameter set and nothing here depends on a fixed curve. On BN254 this
reproduces the circomlib instance.
"""

from __future__ import annotations
from functools import lru_cache
from typing import Sequence, Union

from .constant import N_ROUNDS_F, N_ROUNDS_P, SBOX_ALPHA
from .errors import ParameterMismatchError
from .field import Field, FieldElement


class GrainLFSR:
    """80-bit Grain LFSR with self-shrinking output"""

    def __init__(self, n_bits: int, t: int, n_rounds_f: int, n_rounds_p: int):
        init = (
            _to_bits(1, 2)  # prime field
            + _to_bits(0, 4)  # x^alpha s-box
            + _to_bits(n_bits, 12)
            + _to_bits(t, 12)
            + _to_bits(n_rounds_f, 10)
            + _to_bits(n_rounds_p, 10)
            + [1] * 30
        )

        # bit i of the register is the i-th oldest bit
        self.state = 0
        for i, b in enumerate(init):
            self.state |= b << i

        for _ in range(160):
            self._step()

    def _step(self) -> int:
        s = self.state
        new_bit = ((s >> 62) ^ (s >> 51) ^ (s >> 38) ^ (s >> 23) ^ (s >> 13) ^ s) & 1
        self.state = (s >> 1) | (new_bit << 79)
        return new_bit

    def next_bit(self) -> int:
        while True:
            b1 = self._step()
            b2 = self._step()
            if b1:
                return b2

    def next_int(self, n_bits: int) -> int:
        """Sample `n_bits` bits, most significant first"""
        acc = 0
        for _ in range(n_bits):
            acc = (acc << 1) | self.next_bit()
        return acc

    def next_element(self, p: int) -> int:
        """Rejection-sample an integer in [0, p)"""
        n = p.bit_length()
        while True:
            x = self.next_int(n)
            if x < p:
                return x


def _to_bits(value: int, width: int) -> list[int]:
    return [(value >> (width - 1 - i)) & 1 for i in range(width)]


class PoseidonParams:
    """
    Poseidon instance parameters

    Args:
        p: prime modulus
        t: state width (number of inputs + 1)
    """

    def __init__(self, p: int, t: int):
        if not 2 <= t <= len(N_ROUNDS_P) + 1:
            raise ValueError(f"Unsupported Poseidon width t={t}")

        self.p = p
        self.t = t
        self.alpha = SBOX_ALPHA
        self.n_rounds_f = N_ROUNDS_F
        self.n_rounds_p = N_ROUNDS_P[t - 2]

        if pow(2, p - 1, p) != 1 or (p - 1) % self.alpha == 0:
            raise ParameterMismatchError(
                f"x^{self.alpha} is not a permutation modulo {p}"
            )

        grain = GrainLFSR(p.bit_length(), t, self.n_rounds_f, self.n_rounds_p)

        n_constants = (self.n_rounds_f + self.n_rounds_p) * t
        self.C = [grain.next_element(p) for _ in range(n_constants)]
        self.M = self._cauchy_matrix(grain)

    def _cauchy_matrix(self, grain: GrainLFSR) -> list[list[int]]:
        # Cauchy points are reduced mod p, not rejection-sampled
        p, t = self.p, self.t
        n = p.bit_length()
        while True:
            xs = [grain.next_int(n) % p for _ in range(t)]
            ys = [grain.next_int(n) % p for _ in range(t)]

            if len(set(xs + ys)) != 2 * t:
                continue
            if any((x + y) % p == 0 for x in xs for y in ys):
                continue

            return [[pow(x + y, -1, p) for y in ys] for x in xs]

    @property
    def n_rounds(self):
        return self.n_rounds_f + self.n_rounds_p

    def is_full_round(self, r: int) -> bool:
        half = self.n_rounds_f // 2
        return r < half or r >= half + self.n_rounds_p


@lru_cache(maxsize=None)
def poseidon_params(p: int, t: int) -> PoseidonParams:
    return PoseidonParams(p, t)


def permute(params: PoseidonParams, state: Sequence[int]) -> list[int]:
    """Poseidon permutation over integer state of width `t`"""
    p, t, C, M = params.p, params.t, params.C, params.M
    alpha = params.alpha

    if len(state) != t:
        raise ValueError(f"State width must be {t}, got {len(state)}")

    state = list(state)
    for r in range(params.n_rounds):
        state = [(s + C[r * t + i]) % p for i, s in enumerate(state)]

        if params.is_full_round(r):
            state = [pow(s, alpha, p) for s in state]
        else:
            state[0] = pow(state[0], alpha, p)

        state = [sum(M[i][j] * state[j] for j in range(t)) % p for i in range(t)]

    return state


class Poseidon:
    """
    Fixed-arity Poseidon hash

    Args:
        field: field the hash operates in
        n_inputs: number of absorbed elements (1..16)
    """

    def __init__(self, field: Field, n_inputs: int):
        self.field = field
        self.n_inputs = n_inputs
        self.params = poseidon_params(field.modulus, n_inputs + 1)

    def __call__(self, *inputs, domain: int = 0) -> FieldElement:
        return self.hash(inputs, domain)

    def hash(
        self, inputs: Sequence[Union[int, FieldElement]], domain: int = 0
    ) -> FieldElement:
        """
        Hash `inputs` with the capacity element set to `domain`
        """
        if len(inputs) != self.n_inputs:
            raise ValueError(f"Expected {self.n_inputs} inputs, got {len(inputs)}")

        state = [domain % self.field.modulus] + [self.field(x).value for x in inputs]
        return self.field(permute(self.params, state)[0])


@lru_cache(maxsize=None)
def get_poseidon(field: Field, n_inputs: int) -> Poseidon:
    return Poseidon(field, n_inputs)
