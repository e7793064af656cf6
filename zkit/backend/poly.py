"""
zkit.backend.poly
=================

Dense univariate polynomials over Fr (coefficient lists, lowest degree first)
and the multiplicative evaluation domain H = {w^0 .. w^(n-1)}, n = 2^k.

Sizes here are tiny (a few dozen rows), so interpolation is the direct
O(n^2) inverse DFT rather than an FFT.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .errors import ConstraintSystemError
from .field import GENERATOR, R, TWO_ADICITY

Poly = List[int]


def trim(p: Sequence[int]) -> Poly:
    out = [int(c) % R for c in p]
    while out and out[-1] == 0:
        out.pop()
    return out


def add(a: Sequence[int], b: Sequence[int]) -> Poly:
    n = max(len(a), len(b))
    return trim([(a[i] if i < len(a) else 0) + (b[i] if i < len(b) else 0) for i in range(n)])


def neg(a: Sequence[int]) -> Poly:
    return trim([-c for c in a])


def sub(a: Sequence[int], b: Sequence[int]) -> Poly:
    return add(a, neg(b))


def scale(a: Sequence[int], k: int) -> Poly:
    return trim([c * k for c in a])


def mul(a: Sequence[int], b: Sequence[int]) -> Poly:
    if not a or not b:
        return []
    out = [0] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x == 0:
            continue
        for j, y in enumerate(b):
            out[i + j] += x * y
    return trim(out)


def evaluate(p: Sequence[int], x: int) -> int:
    acc = 0
    for c in reversed(p):
        acc = (acc * x + c) % R
    return acc


def divide_by_linear(p: Sequence[int], z: int) -> Tuple[Poly, int]:
    """Synthetic division by (X - z); returns (quotient, remainder = p(z))."""
    if not p:
        return [], 0
    q = [0] * (len(p) - 1)
    carry = 0
    for i in range(len(p) - 1, 0, -1):
        carry = (carry * z + p[i]) % R
        q[i - 1] = carry
    rem = (carry * z + p[0]) % R
    return trim(q), rem


@dataclass(frozen=True)
class Domain:
    k: int
    n: int
    omega: int

    @classmethod
    def of_size_log2(cls, k: int) -> "Domain":
        if not 1 <= k <= TWO_ADICITY:
            raise ConstraintSystemError(f"domain exponent k={k} outside [1, {TWO_ADICITY}]")
        n = 1 << k
        omega = pow(GENERATOR, (R - 1) >> k, R)
        # primitive: w^(n/2) == -1
        if pow(omega, n // 2, R) != R - 1:
            raise ConstraintSystemError("no primitive root of unity for domain")
        return cls(k=k, n=n, omega=omega)

    def elements(self) -> List[int]:
        out = [1]
        for _ in range(1, self.n):
            out.append((out[-1] * self.omega) % R)
        return out

    def interpolate(self, values: Sequence[int]) -> Poly:
        """Coefficients of the unique degree < n polynomial through values on H."""
        if len(values) > self.n:
            raise ValueError("more values than domain points")
        vals = [int(v) % R for v in values] + [0] * (self.n - len(values))
        if not any(vals):
            return []
        omega_inv = pow(self.omega, R - 2, R)
        n_inv = pow(self.n, R - 2, R)
        coeffs = [0] * self.n
        for j in range(self.n):
            step = pow(omega_inv, j, R)
            x = 1
            acc = 0
            for v in vals:
                acc += v * x
                x = (x * step) % R
            coeffs[j] = (acc * n_inv) % R
        return trim(coeffs)

    def vanishing(self) -> Poly:
        """Z_H(X) = X^n - 1."""
        return trim([R - 1] + [0] * (self.n - 1) + [1])

    def vanishing_at(self, x: int) -> int:
        return (pow(x, self.n, R) - 1) % R

    def divide_by_vanishing(self, p: Sequence[int]) -> Tuple[Poly, Poly]:
        """Long division by X^n - 1; returns (quotient, remainder)."""
        rem = [int(c) % R for c in p]
        n = self.n
        if len(rem) <= n:
            return [], trim(rem)
        q = [0] * (len(rem) - n)
        for i in range(len(rem) - 1, n - 1, -1):
            c = rem[i]
            if c:
                q[i - n] = (q[i - n] + c) % R
                rem[i - n] = (rem[i - n] + c) % R
                rem[i] = 0
        return trim(q), trim(rem)


__all__ = [
    "Poly",
    "trim",
    "add",
    "neg",
    "sub",
    "scale",
    "mul",
    "evaluate",
    "divide_by_linear",
    "Domain",
]
