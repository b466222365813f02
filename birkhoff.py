"""
Birkhoff interpolation for hierarchical threshold secret sharing.

A participant holds f^(rank)(x), the rank-th derivative of the secret
polynomial f evaluated at its position x. Participants with a lower rank
carry more reconstruction power: rank 0 shares are ordinary Shamir shares.
"""

from itertools import combinations

from field import Field
from matrix import Matrix


class BirkhoffError(ValueError):
    """Base class for participant set errors."""

    message = "invalid Birkhoff parameters"

    def __init__(self):
        super().__init__(self.message)


class InvalidBksError(BirkhoffError):
    """Duplicated participants, or a rank tier that cannot be interpolated."""

    message = "invalid bks"


class NoValidBksError(BirkhoffError):
    """No subset of the participants satisfies the rank counting condition."""

    message = "no valid bks"


class ThresholdTooLargeError(BirkhoffError):
    """The threshold is equal to or larger than the number of participants."""

    message = "equal or larger threshold"


class BkParameter:
    """An immutable (x, rank) pair describing one participant's share."""

    __slots__ = ("_x", "_rank")

    def __init__(self, x, rank):
        if isinstance(rank, bool) or not isinstance(rank, int) or rank < 0:
            raise ValueError("rank must be a non-negative integer")
        object.__setattr__(self, "_x", x)
        object.__setattr__(self, "_rank", rank)

    def __setattr__(self, name, value):
        raise AttributeError("BkParameter is immutable")

    @property
    def x(self):
        return self._x

    @property
    def rank(self):
        return self._rank

    def linear_equation_coefficients(self, threshold, field):
        """
        Row of the Birkhoff matrix for this participant: the rank-th
        derivative of x^j evaluated at x, for j in [0, threshold).
        """
        row = []
        for j in range(threshold):
            if j < self._rank:
                row.append(0)
            else:
                row.append(field.mul(field.falling_factorial(j, self._rank),
                                     field.pow(self._x, j - self._rank)))
        return row

    def __eq__(self, other):
        if not isinstance(other, BkParameter):
            return NotImplemented
        return self._x == other._x and self._rank == other._rank

    def __hash__(self):
        return hash((self._x, self._rank))

    def __str__(self):
        return f"(x, rank) = ({self._x}, {self._rank})"

    def __repr__(self):
        return f"BkParameter(x={self._x}, rank={self._rank})"


class BkParameters:
    """
    Ordered set of participants.
    Coefficient i of every result belongs to the i-th participant.
    """

    def __init__(self, bks):
        self._bks = tuple(bks)
        for bk in self._bks:
            if not isinstance(bk, BkParameter):
                raise TypeError(f"Expected BkParameter, got {type(bk).__name__}")

    def __len__(self):
        return len(self._bks)

    def __iter__(self):
        return iter(self._bks)

    def __getitem__(self, i):
        return self._bks[i]

    def __eq__(self, other):
        if not isinstance(other, BkParameters):
            return NotImplemented
        return self._bks == other._bks

    def __hash__(self):
        return hash(self._bks)

    def __repr__(self):
        return f"BkParameters({list(self._bks)})"

    def ranks(self):
        return [bk.rank for bk in self._bks]

    def linear_equation_coefficient_matrix(self, threshold, prime):
        """
        n x threshold matrix whose i-th row is the Birkhoff condition of
        the i-th participant.
        """
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        field = Field(prime)
        rows = [bk.linear_equation_coefficients(threshold, field) for bk in self._bks]
        return Matrix(field, rows)

    def check_valid(self, threshold, prime):
        """
        Check that any admissible choice of threshold participants can
        recover the secret.

        Raises InvalidBksError for duplicates or for a subset that passes
        the rank counting condition but whose matrix is singular at the
        given positions, and NoValidBksError when no subset passes the
        counting condition at all.
        """
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        field = Field(prime)
        if len(set(self._bks)) != len(self._bks):
            raise InvalidBksError()
        if len(self._bks) <= threshold:
            raise NoValidBksError()
        if not _satisfies_polya(self.ranks(), threshold):
            raise NoValidBksError()

        for subset in combinations(self._bks, threshold):
            if not _satisfies_polya([bk.rank for bk in subset], threshold):
                continue
            rows = [bk.linear_equation_coefficients(threshold, field) for bk in subset]
            if not Matrix(field, rows).is_invertible():
                raise InvalidBksError()

    def compute_coefficients_for(self, target, threshold, prime):
        """
        Coefficients c such that sum(c[i] * share[i]) mod p equals
        f^(target.rank)(target.x) for any polynomial f of degree < threshold.
        """
        if len(self._bks) <= threshold:
            raise ThresholdTooLargeError()
        matrix = self.linear_equation_coefficient_matrix(threshold, prime)
        target_row = Matrix(matrix.field,
                            [target.linear_equation_coefficients(threshold, matrix.field)])
        return target_row.multiply(matrix.left_inverse()).get_row(0)

    def compute_bk_coefficient(self, threshold, prime):
        """
        Coefficients c such that sum(c[i] * share[i]) mod p is the secret f(0).

        Raises ThresholdTooLargeError when there are not more participants
        than the threshold, ModulusTooSmallError for prime <= 2 and
        NotInvertibleError when the participants cannot determine f.
        """
        if len(self._bks) <= threshold:
            raise ThresholdTooLargeError()
        matrix = self.linear_equation_coefficient_matrix(threshold, prime)
        # row 0 of a left inverse maps shares to the constant term
        return matrix.left_inverse().get_row(0)


def _satisfies_polya(ranks, threshold):
    """The m-th smallest rank must not exceed m, for m < threshold."""
    ranks = sorted(ranks)
    if len(ranks) < threshold:
        return False
    return all(ranks[m] <= m for m in range(threshold))
