from typing import Sequence


class SparseArray:
    """
    Sparse Array object (matrix dominated by zero elements)
    structured by triplets of (row, col, value) of non-zero elements in the matrix
    """

    def __init__(self, n_row: int, n_col: int, p: int):
        self.p = p
        self.n_row = n_row
        self.n_col = n_col
        self.triplets = []

    def append(self, row: int, col: int, value: int):
        value %= self.p
        if value != 0:
            self.triplets.append((row, col, value))

    def to_dense(self):
        matrix = [[0] * self.n_col for _ in range(self.n_row)]
        for row, col, value in self.triplets:
            matrix[row][col] = (matrix[row][col] + value) % self.p
        return matrix

    def dot(self, vector: Sequence[int]):
        """dot product with vector"""
        result = [0] * self.n_row
        for triplet in self.triplets:
            row, col, value = triplet

            result[row] += vector[col] * value

        return [x % self.p for x in result]
