"""
zkit.backend.kzg
================

KZG (Kate) polynomial commitments on BN254 and the public parameters they need.

Parameters (structured reference string):

    g1_powers = [tau^i * G1 for i in 0..size-1]
    g2, s_g2  = G2, tau * G2

Commit:            C = sum f_i * g1_powers[i]
Open at z:         pi = commit((f(X) - f(z)) / (X - z))
Batched openings:  for polynomials f_j with commitments C_j and claimed values
                   y_j at the same point z, and a verifier challenge nu,
                       F = sum nu^j C_j - (sum nu^j y_j) G1
                   and the pairing check
                       e(F + z * pi, G2) * e(-pi, tau * G2) == 1

`size` is derived from the domain exponent k (n = 2^k rows) and the maximum
gate degree d the parameters must support: blinded advice polynomials have
degree n+1 and a degree-d quotient has degree at most d(n+1) - n.

The toxic scalar tau is drawn from `secrets` unless a seed is supplied; seeded
parameters are reproducible across processes and are meant for development
and tests only.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from . import curve
from . import poly as P
from .errors import BackendError
from .field import R

log = logging.getLogger(__name__)


def srs_size(k: int, max_degree: int) -> int:
    n = 1 << k
    return max(n + 2, max_degree * (n + 1) - n + 1)


@dataclass(frozen=True)
class Parameters:
    """Public setup shared read-only by key derivation, proving and verifying."""

    k: int
    max_degree: int
    g1_powers: Tuple[curve.G1Point, ...]
    g2: curve.G2Point
    s_g2: curve.G2Point

    @property
    def n(self) -> int:
        return 1 << self.k

    @property
    def capacity(self) -> int:
        """Number of coefficients a committed polynomial may have."""
        return len(self.g1_powers)

    def digest(self) -> bytes:
        h = hashlib.sha3_256()
        h.update(f"zkit.params/k={self.k}/d={self.max_degree}/size={self.capacity}".encode())
        h.update(curve.encode_g1(self.g1_powers[1]))
        h.update(curve.encode_g2(self.s_g2))
        return h.digest()

    @classmethod
    def setup(cls, k: int, *, max_degree: int = 3, seed: Optional[bytes] = None) -> "Parameters":
        if k < 1:
            raise BackendError(f"parameters need k >= 1, got {k}")
        if max_degree < 1:
            raise BackendError(f"parameters need max_degree >= 1, got {max_degree}")
        if seed is None:
            tau = secrets.randbelow(R - 2) + 2
        else:
            tau = int.from_bytes(hashlib.sha3_256(b"zkit.srs/" + bytes(seed)).digest(), "big") % R
            if tau < 2:
                tau += 2
        size = srs_size(k, max_degree)
        g1 = curve.g1_generator()
        powers = []
        t = 1
        for _ in range(size):
            powers.append(curve.g1_mul(g1, t))
            t = (t * tau) % R
        s_g2 = curve.g2_mul(curve.g2_generator(), tau)
        log.debug("generated parameters k=%d max_degree=%d size=%d seeded=%s", k, max_degree, size, seed is not None)
        return cls(k=k, max_degree=max_degree, g1_powers=tuple(powers), g2=curve.g2_generator(), s_g2=s_g2)


def commit(params: Parameters, coeffs: Sequence[int]) -> curve.G1Point:
    if len(coeffs) > params.capacity:
        raise BackendError(
            f"polynomial with {len(coeffs)} coefficients exceeds parameter capacity {params.capacity}"
        )
    return curve.g1_lincomb(params.g1_powers[: len(coeffs)], coeffs)


def open_batch(params: Parameters, polys: Sequence[Sequence[int]], z: int, nu: int) -> curve.G1Point:
    """Single opening proof for all `polys` at `z`, combined with powers of `nu`."""
    combined: P.Poly = []
    coeff = 1
    for f in polys:
        combined = P.add(combined, P.scale(f, coeff))
        coeff = (coeff * nu) % R
    quotient, _ = P.divide_by_linear(combined, z)
    return commit(params, quotient)


def verify_batch(
    params: Parameters,
    commitments: Sequence[curve.G1Point],
    values: Sequence[int],
    z: int,
    nu: int,
    proof: curve.G1Point,
) -> bool:
    if len(commitments) != len(values):
        raise ValueError("verify_batch: commitments/values length mismatch")
    g1 = params.g1_powers[0]
    scalars = []
    coeff = 1
    v_agg = 0
    for y in values:
        scalars.append(coeff)
        v_agg = (v_agg + coeff * y) % R
        coeff = (coeff * nu) % R
    F = curve.g1_lincomb(list(commitments), scalars)
    F = curve.g1_add(F, curve.g1_neg(curve.g1_mul(g1, v_agg)))
    lhs = curve.g1_add(F, curve.g1_mul(proof, z))
    return curve.check_pairing_product([(lhs, params.g2), (curve.g1_neg(proof), params.s_g2)])


__all__ = ["Parameters", "srs_size", "commit", "open_batch", "verify_batch"]
