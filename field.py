"""
Field arithmetic over a prime field F_p.
The modulus is supplied by the caller; SECP256K1_ORDER is the usual choice
for threshold signatures.
"""

# Order of the secp256k1 group
SECP256K1_ORDER = 115792089237316195423570985008687907852837564279074904382605163141518161494337


class ModulusTooSmallError(ValueError):
    """Raised when the field modulus is not larger than 2."""

    def __init__(self):
        super().__init__("field modulus must be larger than 2")


class Field:
    """Finite field arithmetic modulo a prime."""

    def __init__(self, modulus):
        if modulus <= 2:
            raise ModulusTooSmallError()
        self.modulus = modulus

    def add(self, a, b):
        """Add two field elements."""
        return (a + b) % self.modulus

    def sub(self, a, b):
        """Subtract two field elements."""
        return (a - b) % self.modulus

    def mul(self, a, b):
        """Multiply two field elements."""
        return (a * b) % self.modulus

    def neg(self, a):
        """Negate a field element."""
        return (-a) % self.modulus

    def pow(self, a, e):
        """Raise a field element to a non-negative power."""
        return pow(a, e, self.modulus)

    def inv(self, a):
        """Multiplicative inverse using Fermat's little theorem."""
        a = self.embed(a)
        if a == 0:
            raise ZeroDivisionError("Cannot invert zero")
        # a^(p-1) = 1 (mod p), so a^(-1) = a^(p-2) (mod p)
        return pow(a, self.modulus - 2, self.modulus)

    def div(self, a, b):
        """Divide two field elements."""
        return self.mul(a, self.inv(b))

    def embed(self, x):
        """Embed an integer into the field."""
        return x % self.modulus

    def is_valid(self, x):
        """Check if x is a valid field element."""
        return 0 <= x < self.modulus

    def falling_factorial(self, n, k):
        """
        n * (n-1) * ... * (n-k+1) reduced mod p.
        Equals 1 when k == 0.
        """
        result = 1
        for i in range(k):
            result = self.mul(result, n - i)
        return result

    def __eq__(self, other):
        if not isinstance(other, Field):
            return NotImplemented
        return self.modulus == other.modulus

    def __hash__(self):
        return hash(self.modulus)

    def __repr__(self):
        return f"Field({self.modulus})"


class Polynomial:
    """Polynomial over a finite field."""

    def __init__(self, field, coefficients):
        """
        Create a polynomial from coefficients.
        coefficients[i] is the coefficient of x^i.
        """
        self.field = field
        self.coeffs = [field.embed(c) for c in coefficients] or [0]
        # Remove leading zeros
        while len(self.coeffs) > 1 and self.coeffs[-1] == 0:
            self.coeffs.pop()

    def degree(self):
        """Return the degree of the polynomial."""
        return len(self.coeffs) - 1

    def eval(self, x):
        """Evaluate polynomial at point x using Horner's method."""
        x = self.field.embed(x)
        result = 0
        for coeff in reversed(self.coeffs):
            result = self.field.add(self.field.mul(result, x), coeff)
        return result

    def derivative(self, order=1):
        """
        Return the order-th formal derivative.
        The coefficient of x^(j-order) is j*(j-1)*...*(j-order+1) * a_j.
        """
        if order < 0:
            raise ValueError("Derivative order must be non-negative")
        coeffs = [
            self.field.mul(self.field.falling_factorial(j, order), a)
            for j, a in enumerate(self.coeffs)
            if j >= order
        ]
        return Polynomial(self.field, coeffs)

    def __repr__(self):
        return f"Polynomial({self.coeffs})"
