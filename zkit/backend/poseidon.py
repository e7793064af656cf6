"""
zkit.backend.poseidon
=====================

Poseidon permutation over the BN254 scalar field, used as the sponge behind
the Fiat–Shamir transcript.

Parameter sets are registered by name. A development set ("zkit_t3") is
derived at import time: Vandermonde-style MDS over small bases and round
constants from SHA3-256 over a domain-separated seed. Prover and verifier only
need to agree on the set, so the derived constants are sufficient for
transcript use; swap in audited constants with `register_params` if proofs must
interoperate with circuits that hash in-circuit.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .field import R

_MOD = R


def _pow_alpha(x: int, alpha: int) -> int:
    if alpha == 5:
        x2 = (x * x) % _MOD
        return (x * x2 * x2) % _MOD
    return pow(x, alpha, _MOD)


@dataclass(frozen=True)
class PoseidonParams:
    t: int  # state width
    R_F: int  # full rounds
    R_P: int  # partial rounds
    alpha: int  # S-box exponent
    mds: List[List[int]]  # t x t
    rc: List[List[int]]  # (R_F + R_P) x t

    def validate(self) -> None:
        if self.t < 2:
            raise ValueError("t must be >= 2")
        if self.R_F % 2 != 0:
            raise ValueError("R_F must be even")
        if self.alpha < 3 or self.alpha % 2 == 0:
            raise ValueError("alpha must be an odd integer >= 3")
        if len(self.mds) != self.t or any(len(row) != self.t for row in self.mds):
            raise ValueError("mds must be t x t")
        rounds = self.R_F + self.R_P
        if len(self.rc) != rounds or any(len(row) != self.t for row in self.rc):
            raise ValueError(f"rc must be {rounds} x {self.t}")


_REGISTRY: Dict[str, PoseidonParams] = {}


def register_params(name: str, params: PoseidonParams) -> None:
    params.validate()
    _REGISTRY[name] = params


def get_params(name: str = "zkit_t3") -> PoseidonParams:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(f"unknown Poseidon parameter set '{name}'") from None


def poseidon_permute(state: Sequence[int], params: PoseidonParams) -> List[int]:
    t = params.t
    if len(state) != t:
        raise ValueError(f"state width {len(state)} != t={t}")
    s = [int(v) % _MOD for v in state]
    half = params.R_F // 2
    for r, constants in enumerate(params.rc):
        s = [(v + c) % _MOD for v, c in zip(s, constants)]
        if r < half or r >= half + params.R_P:
            s = [_pow_alpha(v, params.alpha) for v in s]
        else:
            s[0] = _pow_alpha(s[0], params.alpha)
        s = [sum(m * v for m, v in zip(row, s)) % _MOD for row in params.mds]
    return s


def _derive_dev_params(name: str, t: int = 3, R_F: int = 8, R_P: int = 57) -> None:
    bases = [2, 3, 5, 7, 11][:t]
    mds = [[pow(bases[j], i + 1, _MOD) for j in range(t)] for i in range(t)]
    rc: List[List[int]] = []
    for r in range(R_F + R_P):
        row = []
        for i in range(t):
            h = hashlib.sha3_256(f"zkit/poseidon/{name}/r={r}/i={i}".encode()).digest()
            row.append(int.from_bytes(h, "big") % _MOD)
        rc.append(row)
    register_params(name, PoseidonParams(t=t, R_F=R_F, R_P=R_P, alpha=5, mds=mds, rc=rc))


_derive_dev_params("zkit_t3")


__all__ = [
    "PoseidonParams",
    "register_params",
    "get_params",
    "poseidon_permute",
]
