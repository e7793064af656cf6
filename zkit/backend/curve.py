"""
zkit.backend.curve
==================

BN254 (alt_bn128) group helpers on top of `py_ecc.optimized_bn128`.

Points are the projective triples py_ecc works with; infinity is any triple
with a zero Z coordinate. This module owns the only byte encoding of G1 points
used in proofs:

    finite:   x(32) || y(32)       affine coordinates, big-endian
    infinity: 64 zero bytes

`decode_g1` never raises on bad input: it returns None for coordinates that
are out of range or off the curve, so verifiers can treat a corrupted point as
an ordinary verification failure.

Pairings follow the e(P, Q) convention with P in G1 and Q in G2; py_ecc's
`pairing` takes (Q, P) and this wrapper handles the swap.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from py_ecc.optimized_bn128 import (
    FQ,
    FQ12,
    G1,
    G2,
    add as _add,
    b as _B,
    b2 as _B2,
    curve_order as _Q,
    field_modulus as _P,
    is_on_curve as _is_on_curve,
    multiply as _mul,
    neg as _neg,
    normalize as _normalize,
    pairing as _pairing,
)

G1Point = Any
G2Point = Any

G1_BYTE_LEN = 64
BACKEND_NAME = "py_ecc.optimized_bn128"


def curve_order() -> int:
    return int(_Q)


def field_modulus() -> int:
    return int(_P)


def g1_generator() -> G1Point:
    return G1


def g2_generator() -> G2Point:
    return G2


def g1_infinity() -> G1Point:
    return (FQ(1), FQ(1), FQ(0))


def _coeff(c: Any) -> int:
    # optimized FQP keeps plain ints as coefficients, FQ wraps them
    return int(getattr(c, "n", c))


def is_inf(P: G1Point) -> bool:
    if P is None:
        return True
    z = P[2]
    if hasattr(z, "n"):
        return int(z.n) == 0
    return all(_coeff(c) == 0 for c in z.coeffs)


def is_on_curve_g1(P: G1Point) -> bool:
    return is_inf(P) or bool(_is_on_curve(P, _B))


def is_on_curve_g2(Q: G2Point) -> bool:
    return is_inf(Q) or bool(_is_on_curve(Q, _B2))


# ---------------------------
# Group ops
# ---------------------------

def g1_add(P: G1Point, Q: G1Point) -> G1Point:
    return _add(P, Q)


def g1_neg(P: G1Point) -> G1Point:
    return _neg(P)


def g1_mul(P: G1Point, k: int) -> G1Point:
    k = int(k) % curve_order()
    if k == 0 or is_inf(P):
        return g1_infinity()
    return _mul(P, k)


def g2_mul(Q: G2Point, k: int) -> G2Point:
    return _mul(Q, int(k) % curve_order())


def g1_lincomb(points: Sequence[G1Point], scalars: Sequence[int]) -> G1Point:
    """Naive multi-scalar multiplication; zero scalars are skipped."""
    if len(points) != len(scalars):
        raise ValueError("g1_lincomb: length mismatch")
    acc = g1_infinity()
    for P, s in zip(points, scalars):
        s = int(s) % curve_order()
        if s:
            acc = _add(acc, g1_mul(P, s))
    return acc


# ---------------------------
# Encoding
# ---------------------------

def normalize_g1(P: G1Point) -> Optional[Tuple[int, int]]:
    """Affine integer coordinates, or None for infinity."""
    if is_inf(P):
        return None
    ax, ay = _normalize(P)
    return int(ax.n), int(ay.n)


def normalize_g2(Q: G2Point) -> Optional[Tuple[Tuple[int, int], Tuple[int, int]]]:
    if is_inf(Q):
        return None
    ax, ay = _normalize(Q)
    return (
        (_coeff(ax.coeffs[0]), _coeff(ax.coeffs[1])),
        (_coeff(ay.coeffs[0]), _coeff(ay.coeffs[1])),
    )


def encode_g1(P: G1Point) -> bytes:
    aff = normalize_g1(P)
    if aff is None:
        return b"\x00" * G1_BYTE_LEN
    x, y = aff
    return x.to_bytes(32, "big") + y.to_bytes(32, "big")


def decode_g1(data: bytes) -> Optional[G1Point]:
    """Inverse of `encode_g1`; None if the bytes do not describe a G1 point."""
    if len(data) != G1_BYTE_LEN:
        return None
    x = int.from_bytes(data[:32], "big")
    y = int.from_bytes(data[32:], "big")
    if x == 0 and y == 0:
        return g1_infinity()
    p = field_modulus()
    if x >= p or y >= p:
        return None
    P = (FQ(x), FQ(y), FQ(1))
    if not _is_on_curve(P, _B):
        return None
    # G1 has cofactor 1 on BN254: on-curve implies in the prime-order subgroup.
    return P


def encode_g2(Q: G2Point) -> bytes:
    aff = normalize_g2(Q)
    if aff is None:
        return b"\x00" * 128
    (xc0, xc1), (yc0, yc1) = aff
    return b"".join(v.to_bytes(32, "big") for v in (xc0, xc1, yc0, yc1))


# ---------------------------
# Pairing
# ---------------------------

def pair(P: G1Point, Q: G2Point) -> FQ12:
    if not is_on_curve_g1(P):
        raise ValueError("G1 point is not on curve")
    if not is_on_curve_g2(Q):
        raise ValueError("G2 point is not on curve")
    if is_inf(P) or is_inf(Q):
        return FQ12.one()
    return _pairing(Q, P)


def check_pairing_product(pairs: Iterable[Tuple[G1Point, G2Point]]) -> bool:
    """True iff prod e(P_i, Q_i) == 1 in GT."""
    acc = FQ12.one()
    for P, Q in pairs:
        acc = acc * pair(P, Q)
    return acc == FQ12.one()


__all__: List[str] = [
    "G1Point",
    "G2Point",
    "G1_BYTE_LEN",
    "BACKEND_NAME",
    "curve_order",
    "field_modulus",
    "g1_generator",
    "g2_generator",
    "g1_infinity",
    "is_inf",
    "is_on_curve_g1",
    "is_on_curve_g2",
    "g1_add",
    "g1_neg",
    "g1_mul",
    "g2_mul",
    "g1_lincomb",
    "normalize_g1",
    "normalize_g2",
    "encode_g1",
    "decode_g1",
    "encode_g2",
    "pair",
    "check_pairing_product",
]
