"""
Main entry point: walks through a hierarchical secret recovery.
"""

import random

from birkhoff import BkParameter, BkParameters, BirkhoffError
from field import Field, Polynomial, SECP256K1_ORDER
from matrix import NotInvertibleError


def run_recovery(title, bks, threshold, poly):
    """Validate the participants and try to recover f(0) from their shares."""
    print("\n\n" + "=" * 60)
    print(title)
    print("=" * 60)
    for bk in bks:
        print(f"  {bk}")

    try:
        bks.check_valid(threshold, SECP256K1_ORDER)
        print("Participants are valid")
    except BirkhoffError as e:
        print(f"Validation failed: {e}")

    try:
        coefficients = bks.compute_bk_coefficient(threshold, SECP256K1_ORDER)
    except (BirkhoffError, NotInvertibleError) as e:
        print(f"Recovery failed: {e}")
        return None

    shares = [poly.derivative(bk.rank).eval(bk.x) for bk in bks]
    secret = sum(c * s for c, s in zip(coefficients, shares)) % SECP256K1_ORDER
    print(f"Recovered: {secret}")
    print(f"Expected:  {poly.eval(0)}")
    return secret


def main():
    """Run example recoveries."""
    threshold = 3
    field = Field(SECP256K1_ORDER)
    poly = Polynomial(field, [random.randrange(SECP256K1_ORDER) for _ in range(threshold)])

    print("=" * 60)
    print("BIRKHOFF THRESHOLD RECOVERY")
    print("=" * 60)
    print(f"Threshold: {threshold} (polynomial degree {threshold - 1})")
    print("Rank 0: managers, rank 1: staff, rank 2: interns")
    print("=" * 60)

    # Test 1: Mixed tiers
    run_recovery(
        "TEST 1: Mixed Tiers",
        BkParameters([BkParameter(1, 0), BkParameter(2, 0), BkParameter(3, 1),
                      BkParameter(4, 1), BkParameter(5, 2)]),
        threshold, poly,
    )

    # Test 2: Only interns, nobody can recover
    run_recovery(
        "TEST 2: Interns Only",
        BkParameters([BkParameter(x, 2) for x in range(1, 6)]),
        threshold, poly,
    )

    # Test 3: Same participant twice
    run_recovery(
        "TEST 3: Duplicated Participant",
        BkParameters([BkParameter(1, 1), BkParameter(2, 3), BkParameter(3, 3),
                      BkParameter(1, 1), BkParameter(5, 3)]),
        threshold, poly,
    )

    print("\n\n" + "=" * 60)
    print("ALL TESTS COMPLETED")
    print("=" * 60)


if __name__ == "__main__":
    main()
