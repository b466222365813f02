"""
Dense matrices over a prime field.
All entries are kept reduced into [0, p-1].
"""

from itertools import combinations

from field import Field


class NotInvertibleError(ValueError):
    """Raised when a matrix has no inverse over the field."""

    def __init__(self):
        super().__init__("matrix is not invertible")


class Matrix:
    """Matrix over F_p built from a list of rows."""

    def __init__(self, field, rows):
        if not isinstance(field, Field):
            field = Field(field)
        if not rows or not rows[0]:
            raise ValueError("Matrix must have at least one row and one column")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All rows must have the same length")

        self.field = field
        self._rows = [[field.embed(v) for v in row] for row in rows]

    @property
    def num_rows(self):
        return len(self._rows)

    @property
    def num_cols(self):
        return len(self._rows[0])

    @property
    def rows(self):
        """Copy of the entries as a list of rows."""
        return [row[:] for row in self._rows]

    def is_square(self):
        return self.num_rows == self.num_cols

    def get_row(self, i):
        return self._rows[i][:]

    def get_column(self, j):
        return [row[j] for row in self._rows]

    def select_rows(self, indices):
        """Sub-matrix made of the given rows, in the given order."""
        return Matrix(self.field, [self._rows[i] for i in indices])

    def transpose(self):
        return Matrix(self.field, [self.get_column(j) for j in range(self.num_cols)])

    def multiply(self, other):
        """Matrix product self * other."""
        if self.field != other.field:
            raise ValueError("Matrices are defined over different fields")
        if self.num_cols != other.num_rows:
            raise ValueError(
                f"Cannot multiply {self.num_rows}x{self.num_cols} "
                f"by {other.num_rows}x{other.num_cols}"
            )
        columns = [other.get_column(j) for j in range(other.num_cols)]
        result = []
        for row in self._rows:
            result.append([
                sum(a * b for a, b in zip(row, column)) % self.field.modulus
                for column in columns
            ])
        return Matrix(self.field, result)

    def _eliminate(self, width):
        """
        Forward elimination on a copy of the rows, pivoting on the first
        `width` columns.
        Returns (rows, pivot_columns, swap_count).
        """
        f = self.field
        rows = self.rows
        pivots = []
        swaps = 0
        r = 0
        for col in range(width):
            pivot = None
            for i in range(r, len(rows)):
                if rows[i][col] != 0:
                    pivot = i
                    break
            if pivot is None:
                continue
            if pivot != r:
                rows[r], rows[pivot] = rows[pivot], rows[r]
                swaps += 1

            inv_diag = f.inv(rows[r][col])
            for i in range(r + 1, len(rows)):
                factor = f.mul(rows[i][col], inv_diag)
                if factor == 0:
                    continue
                rows[i] = [f.sub(a, f.mul(factor, b)) for a, b in zip(rows[i], rows[r])]

            pivots.append(col)
            r += 1
            if r == len(rows):
                break
        return rows, pivots, swaps

    def rank(self):
        _, pivots, _ = self._eliminate(self.num_cols)
        return len(pivots)

    def determinant(self):
        if not self.is_square():
            raise ValueError("Determinant is only defined for square matrices")
        rows, pivots, swaps = self._eliminate(self.num_cols)
        if len(pivots) < self.num_rows:
            return 0
        det = 1 if swaps % 2 == 0 else self.field.modulus - 1
        for i in range(self.num_rows):
            det = self.field.mul(det, rows[i][i])
        return det

    def is_invertible(self):
        return self.is_square() and self.determinant() != 0

    def inverse(self):
        """
        Gauss-Jordan inversion.
        Raises NotInvertibleError for singular matrices.
        """
        if not self.is_square():
            raise ValueError("Only square matrices can be inverted")
        f = self.field
        n = self.num_rows
        identity = [[1 if i == j else 0 for j in range(n)] for i in range(n)]
        augmented = Matrix(f, [row + identity[i] for i, row in enumerate(self._rows)])

        rows, pivots, _ = augmented._eliminate(n)
        if len(pivots) < n:
            raise NotInvertibleError()

        # back-substitution on the upper triangular part
        for col in range(n - 1, -1, -1):
            inv_diag = f.inv(rows[col][col])
            rows[col] = [f.mul(v, inv_diag) for v in rows[col]]
            for i in range(col):
                factor = rows[i][col]
                if factor == 0:
                    continue
                rows[i] = [f.sub(a, f.mul(factor, b)) for a, b in zip(rows[i], rows[col])]

        return Matrix(f, [row[n:] for row in rows])

    def pseudoinverse(self):
        """
        Left inverse (M^T M)^-1 M^T of a matrix with full column rank.
        For a square matrix this is the ordinary inverse.
        """
        transposed = self.transpose()
        return transposed.multiply(self).inverse().multiply(transposed)

    def left_inverse(self):
        """
        A matrix L with L * self equal to the identity.

        Uses the pseudoinverse when M^T M is invertible. Otherwise the
        first square set of rows (in combinations order) that is invertible
        is inverted and the remaining rows get zero columns.
        """
        try:
            return self.pseudoinverse()
        except NotInvertibleError:
            pass

        n, k = self.num_rows, self.num_cols
        if self.rank() < k:
            raise NotInvertibleError()
        for indices in combinations(range(n), k):
            square = self.select_rows(indices)
            if not square.is_invertible():
                continue
            inverse = square.inverse()
            rows = [[0] * n for _ in range(k)]
            for position, i in enumerate(indices):
                for r in range(k):
                    rows[r][i] = inverse._rows[r][position]
            return Matrix(self.field, rows)
        raise NotInvertibleError()

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.field == other.field and self._rows == other._rows

    def __repr__(self):
        return f"Matrix({self.field.modulus}, {self._rows})"
