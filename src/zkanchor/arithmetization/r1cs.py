from __future__ import annotations
import hashlib

from ..array import SparseArray
from .constraints import ConstraintSystem


class R1CS:
    """
    Rank-1 constraint system in matrix form: `(A.z) * (B.z) = C.z` for the
    full witness `z = public_witness + private_witness`
    """

    def __init__(self, A: SparseArray, B: SparseArray, C: SparseArray, n_public: int):
        self.A = A
        self.B = B
        self.C = C
        self.n_public = n_public
        self.p = A.p

    @classmethod
    def from_constraint_system(cls, cs: ConstraintSystem) -> R1CS:
        row_length = cs.num_constraints
        col_length = cs.num_witness

        A = SparseArray(row_length, col_length, cs.p)
        B = SparseArray(row_length, col_length, cs.p)
        C = SparseArray(row_length, col_length, cs.p)

        for row, (a, b, c) in enumerate(cs.constraints):
            for matrix, lc in ((A, a), (B, b), (C, c)):
                for col, value in sorted(lc.terms.items()):
                    matrix.append(row, col, value)

        return cls(A, B, C, cs.n_public + 1)

    @property
    def n_constraints(self) -> int:
        return self.A.n_row

    @property
    def n_witness(self) -> int:
        return self.A.n_col

    def is_sat(self, public_witness: list, private_witness: list):
        """
        Check R1CS satisfiability with the given `witness`
        """
        if len(public_witness) != self.n_public:
            raise ValueError(
                f"Public witness must hold {self.n_public} values, got {len(public_witness)}"
            )

        w = list(public_witness) + list(private_witness)
        if len(w) != self.n_witness:
            raise ValueError(f"Witness must hold {self.n_witness} values, got {len(w)}")

        Az = self.A.dot(w)
        Bz = self.B.dot(w)
        Cz = self.C.dot(w)

        AzBz = [x * y % self.p for x, y in zip(Az, Bz)]

        return AzBz == Cz

    def digest(self) -> bytes:
        """SHA-256 over the shape and every non-zero entry"""
        h = hashlib.sha256()
        h.update(
            f"{self.p}:{self.n_constraints}:{self.n_witness}:{self.n_public}".encode()
        )
        for matrix in (self.A, self.B, self.C):
            for row, col, value in matrix.triplets:
                h.update(f"{row},{col},{value};".encode())
        return h.digest()
