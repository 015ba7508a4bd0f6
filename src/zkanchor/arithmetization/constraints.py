from __future__ import annotations
from typing import Union

from ..field import Field


class LinearCombination:
    """
    Sum of `coeff * wire` terms; wire 0 carries the constant one
    """

    __slots__ = ("terms", "p")

    def __init__(self, terms: dict, p: int):
        self.terms = {k: v % p for k, v in terms.items() if v % p}
        self.p = p

    @classmethod
    def constant(cls, value: int, p: int) -> LinearCombination:
        return cls({0: value}, p)

    def _lift(self, other) -> LinearCombination:
        if isinstance(other, LinearCombination):
            if other.p != self.p:
                raise ValueError("Linear combinations over different fields")
            return other
        if isinstance(other, int):
            return LinearCombination.constant(other, self.p)
        raise TypeError(f"Operation with {type(other)} is not allowed")

    def __add__(self, other):
        other = self._lift(other)
        terms = dict(self.terms)
        for k, v in other.terms.items():
            terms[k] = terms.get(k, 0) + v
        return LinearCombination(terms, self.p)

    def __radd__(self, other):
        return self.__add__(other)

    def __neg__(self):
        return LinearCombination({k: -v for k, v in self.terms.items()}, self.p)

    def __sub__(self, other):
        return self + (-self._lift(other))

    def __rsub__(self, other):
        return self._lift(other) - self

    def __mul__(self, other):
        if not isinstance(other, int):
            raise SyntaxError(
                "Only scalar multiplication is linear; use ConstraintSystem.enforce"
            )
        return LinearCombination({k: v * other for k, v in self.terms.items()}, self.p)

    def __rmul__(self, other):
        return self.__mul__(other)

    def evaluate(self, assignment: list[int]) -> int:
        return sum(assignment[k] * v for k, v in self.terms.items()) % self.p

    def __repr__(self):
        if not self.terms:
            return "0"
        return " + ".join(
            str(v) if k == 0 else f"{v}*w{k}" for k, v in sorted(self.terms.items())
        )


Term = Union[LinearCombination, int]


class ConstraintSystem:
    """
    Rank-1 constraint system that records wire values while constraints are
    added. Wire 0 is the constant one, then public inputs, then private wires.

    Args:
        field: field the constraints are defined over
    """

    def __init__(self, field: Field):
        self.field = field
        self.p = field.modulus
        self.assignment = [1]
        self.n_public = 0
        self.constraints = []

    @property
    def one(self) -> LinearCombination:
        return LinearCombination({0: 1}, self.p)

    @property
    def num_constraints(self) -> int:
        return len(self.constraints)

    @property
    def num_witness(self) -> int:
        return len(self.assignment)

    def public_input(self, value: int) -> LinearCombination:
        """Allocate a public wire. All public wires come before private ones."""
        if len(self.assignment) != self.n_public + 1:
            raise ValueError("Public inputs must be allocated before private wires")
        self.n_public += 1
        return self.alloc(value)

    def alloc(self, value: int) -> LinearCombination:
        self.assignment.append(int(value) % self.p)
        return LinearCombination({len(self.assignment) - 1: 1}, self.p)

    def constant(self, value: int) -> LinearCombination:
        return LinearCombination.constant(value, self.p)

    def _lift(self, term: Term) -> LinearCombination:
        if isinstance(term, LinearCombination):
            return term
        return self.constant(term)

    def enforce(self, a: Term, b: Term, c: Term):
        """Add constraint `a * b = c`"""
        self.constraints.append((self._lift(a), self._lift(b), self._lift(c)))

    def enforce_equal(self, a: Term, b: Term):
        """Add constraint `(a - b) * 1 = 0`"""
        self.enforce(self._lift(a) - b, self.one, 0)

    def value(self, lc: Term) -> int:
        return self._lift(lc).evaluate(self.assignment)

    def unsatisfied(self) -> list[int]:
        """Indices of constraints violated by the current assignment"""
        rows = []
        for i, (a, b, c) in enumerate(self.constraints):
            if self.value(a) * self.value(b) % self.p != self.value(c):
                rows.append(i)
        return rows

    def is_satisfied(self) -> bool:
        return not self.unsatisfied()

    @property
    def public_witness(self) -> list[int]:
        """Constant one followed by public inputs"""
        return self.assignment[: self.n_public + 1]

    @property
    def private_witness(self) -> list[int]:
        return self.assignment[self.n_public + 1 :]

    def compile(self):
        """
        Compile the constraints into R1CS sparse matrices
        """
        from .r1cs import R1CS

        return R1CS.from_constraint_system(self)


class ConstraintTemplate:
    """
    Reusable constraint pattern. Subclasses implement `main`, which adds
    constraints to `cs` and returns the output wires.
    """

    def main(self, cs: ConstraintSystem, *args):
        raise NotImplementedError()

    def __call__(self, cs: ConstraintSystem, *args, **kwargs):
        return self.main(cs, *args, **kwargs)
