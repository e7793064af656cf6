"""
zkit.backend.plonk
==================

Key generation, proving and verification for circuits described with
`zkit.backend.constraints`, using KZG commitments and a Poseidon Fiat–Shamir
transcript.

Protocol
--------
Fixed data: selector columns s_j interpolated over H (|H| = n = 2^k).

Prover
  1. synthesize the witness; every gate must vanish on every row
  2. a_i(X) = interp(advice_i) + (b0 + b1 X) Z_H(X)   (fresh b0, b1 per column)
     commit [a_i], absorb
  3. alpha <- transcript
  4. t(X) = (sum_m alpha^m g_m(X)) / Z_H(X); commit [t], absorb
  5. zeta <- transcript; absorb a_i(zeta), t(zeta)
  6. nu <- transcript; batched KZG opening W of (a_0 .. a_{m-1}, t) at zeta

Verifier
  recompute alpha, zeta, nu; evaluate selectors at zeta from the verifying key;
  check sum_m alpha^m g_m(evals) == t(zeta) * Z_H(zeta); check the batched
  opening with one pairing product.

Proof layout (big-endian, fixed length for a given verifying key)
  [a_i] x num_advice | [t] | [W]    64 bytes each (see curve.encode_g1)
  a_i(zeta) x num_advice | t(zeta)  32 bytes each

The transcript starts from the verifying key digest, which covers the
parameters, the domain, the constraint system and the selector columns.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from . import curve
from . import kzg
from . import poly as P
from .constraints import Circuit, ConstraintSystem, Gate, first_unsatisfied, synthesize
from .errors import (
    BackendError,
    ConstraintSystemError,
    MalformedProof,
    ShapeMismatch,
    SynthesisError,
    UnsatisfiedConstraint,
)
from .field import FR_BYTE_LEN, R
from .transcript import Transcript

log = logging.getLogger(__name__)

PROTOCOL_LABEL = "zkit:plonk-kzg:v1"


@dataclass(frozen=True)
class VerifyingKey:
    k: int
    n: int
    omega: int
    num_advice: int
    gates: Tuple[Gate, ...]
    selector_polys: Tuple[Tuple[int, ...], ...]
    digest: bytes

    @property
    def proof_length(self) -> int:
        return curve.G1_BYTE_LEN * (self.num_advice + 2) + FR_BYTE_LEN * (self.num_advice + 1)

    def hex_digest(self) -> str:
        return "sha3-256:" + self.digest.hex()


@dataclass(frozen=True)
class ProvingKey:
    vk: VerifyingKey
    domain: P.Domain
    selector_columns: Tuple[Tuple[bool, ...], ...]


@dataclass(frozen=True)
class _ParsedProof:
    advice_commitments: Tuple[Optional[curve.G1Point], ...]
    quotient_commitment: Optional[curve.G1Point]
    opening: Optional[curve.G1Point]
    advice_evals: Tuple[int, ...]
    quotient_eval: int


# ---------------------------
# Keygen
# ---------------------------

def _vk_digest(params: kzg.Parameters, meta: ConstraintSystem, selector_columns: Sequence[Sequence[bool]]) -> bytes:
    body = {
        "protocol": PROTOCOL_LABEL,
        "params": params.digest().hex(),
        "k": params.k,
        "cs": meta.describe(),
        "selectors": ["".join("1" if b else "0" for b in col) for col in selector_columns],
    }
    return hashlib.sha3_256(json.dumps(body, sort_keys=True, separators=(",", ":")).encode("utf-8")).digest()


def _fixed_layout(params: kzg.Parameters, circuit: Circuit) -> Tuple[ConstraintSystem, Tuple[Tuple[bool, ...], ...]]:
    meta, assignment = synthesize(circuit.without_witnesses(), params.n, witness=False)
    degree = meta.degree()
    if degree > params.max_degree:
        raise ConstraintSystemError(
            f"gate degree {degree} exceeds parameter maximum {params.max_degree}"
        )
    return meta, tuple(tuple(col) for col in assignment.selectors)


def keygen_vk(params: kzg.Parameters, circuit: Circuit) -> VerifyingKey:
    domain = P.Domain.of_size_log2(params.k)
    meta, selector_columns = _fixed_layout(params, circuit)
    selector_polys = tuple(
        tuple(domain.interpolate([1 if b else 0 for b in col])) for col in selector_columns
    )
    vk = VerifyingKey(
        k=params.k,
        n=domain.n,
        omega=domain.omega,
        num_advice=meta.num_advice,
        gates=tuple(meta.gates),
        selector_polys=selector_polys,
        digest=_vk_digest(params, meta, selector_columns),
    )
    log.debug("keygen_vk advice=%d selectors=%d gates=%d degree=%d",
              meta.num_advice, meta.num_selectors, len(meta.gates), meta.degree())
    return vk


def keygen_pk(params: kzg.Parameters, vk: VerifyingKey, circuit: Circuit) -> ProvingKey:
    meta, selector_columns = _fixed_layout(params, circuit)
    if _vk_digest(params, meta, selector_columns) != vk.digest:
        raise ConstraintSystemError("circuit does not match verifying key")
    return ProvingKey(vk=vk, domain=P.Domain.of_size_log2(params.k), selector_columns=selector_columns)


# ---------------------------
# Prover
# ---------------------------

def _gate_polys(gates: Sequence[Gate], alpha: int) -> List[Tuple[int, Any]]:
    out = []
    coeff = 1
    for gate in gates:
        for expr in gate.polys:
            out.append((coeff, expr))
            coeff = (coeff * alpha) % R
    return out


def create_proof(params: kzg.Parameters, pk: ProvingKey, circuit: Circuit, rng: Any) -> bytes:
    """
    `rng` needs `randrange(a, b)` (random.Random / secrets.SystemRandom) and must
    be fresh cryptographically secure randomness for every call: reusing
    blinding factors across two witnesses under one key leaks the witnesses.
    """
    vk = pk.vk
    domain = pk.domain
    meta, assignment = synthesize(circuit, domain.n, witness=True)
    if tuple(tuple(col) for col in assignment.selectors) != pk.selector_columns:
        raise ShapeMismatch("selector layout differs from the proving key")
    if _vk_digest(params, meta, pk.selector_columns) != vk.digest:
        raise ShapeMismatch("constraint system differs from the proving key")

    bad = first_unsatisfied(meta, assignment)
    if bad is not None:
        gate, idx, row = bad
        raise UnsatisfiedConstraint(gate, row, idx)

    zh = domain.vanishing()
    advice_polys: List[P.Poly] = []
    for col in assignment.advice:
        b0 = rng.randrange(1, R)
        b1 = rng.randrange(1, R)
        advice_polys.append(P.add(domain.interpolate(col), P.mul([b0, b1], zh)))
    selector_polys = [list(p) for p in vk.selector_polys]

    tr = Transcript(PROTOCOL_LABEL)
    tr.append_message("vk", vk.digest)
    tr.append_u64("n", vk.n)
    advice_comms = [kzg.commit(params, a) for a in advice_polys]
    for i, c in enumerate(advice_comms):
        tr.append_g1(f"advice[{i}]", c)
    alpha = tr.challenge_scalar("alpha")

    numerator: P.Poly = []
    for coeff, expr in _gate_polys(vk.gates, alpha):
        term = expr.evaluate(
            lambda c: advice_polys[c.index],
            lambda s: selector_polys[s.index],
            lambda k: P.trim([k]),
            P.add,
            P.mul,
            P.neg,
        )
        numerator = P.add(numerator, P.scale(term, coeff))
    quotient, remainder = domain.divide_by_vanishing(numerator)
    if remainder:
        raise UnsatisfiedConstraint("combined", -1)
    t_comm = kzg.commit(params, quotient)
    tr.append_g1("quotient", t_comm)

    zeta = tr.challenge_scalar("zeta")
    if domain.vanishing_at(zeta) == 0:
        raise BackendError("challenge landed inside the evaluation domain")
    advice_evals = [P.evaluate(a, zeta) for a in advice_polys]
    t_eval = P.evaluate(quotient, zeta)
    for i, e in enumerate(advice_evals):
        tr.append_scalar(f"advice_eval[{i}]", e)
    tr.append_scalar("quotient_eval", t_eval)
    nu = tr.challenge_scalar("nu")

    opening = kzg.open_batch(params, advice_polys + [quotient], zeta, nu)

    out = b"".join(curve.encode_g1(c) for c in advice_comms)
    out += curve.encode_g1(t_comm) + curve.encode_g1(opening)
    out += b"".join(e.to_bytes(FR_BYTE_LEN, "big") for e in advice_evals)
    out += t_eval.to_bytes(FR_BYTE_LEN, "big")
    return out


# ---------------------------
# Verifier
# ---------------------------

def parse_proof(vk: VerifyingKey, proof: bytes) -> _ParsedProof:
    """Frame proof bytes; raises MalformedProof only for framing errors."""
    if not isinstance(proof, (bytes, bytearray, memoryview)):
        raise MalformedProof(f"proof must be bytes-like, got {type(proof).__name__}")
    data = bytes(proof)
    if len(data) != vk.proof_length:
        raise MalformedProof(f"proof length {len(data)} != expected {vk.proof_length}")
    g = curve.G1_BYTE_LEN
    points = [curve.decode_g1(data[i * g : (i + 1) * g]) for i in range(vk.num_advice + 2)]
    off = g * (vk.num_advice + 2)
    scalars = [
        int.from_bytes(data[off + i * FR_BYTE_LEN : off + (i + 1) * FR_BYTE_LEN], "big")
        for i in range(vk.num_advice + 1)
    ]
    return _ParsedProof(
        advice_commitments=tuple(points[: vk.num_advice]),
        quotient_commitment=points[vk.num_advice],
        opening=points[vk.num_advice + 1],
        advice_evals=tuple(scalars[:-1]),
        quotient_eval=scalars[-1],
    )


def verify_proof(params: kzg.Parameters, vk: VerifyingKey, proof: bytes) -> bool:
    if vk.k != params.k:
        raise BackendError(f"verifying key for k={vk.k} used with parameters k={params.k}")
    pf = parse_proof(vk, proof)

    points = list(pf.advice_commitments) + [pf.quotient_commitment, pf.opening]
    if any(p is None for p in points):
        log.debug("verify: commitment is not a valid G1 point")
        return False
    if any(s >= R for s in pf.advice_evals) or pf.quotient_eval >= R:
        log.debug("verify: non-canonical evaluation")
        return False

    tr = Transcript(PROTOCOL_LABEL)
    tr.append_message("vk", vk.digest)
    tr.append_u64("n", vk.n)
    for i, c in enumerate(pf.advice_commitments):
        tr.append_g1(f"advice[{i}]", c)
    alpha = tr.challenge_scalar("alpha")
    tr.append_g1("quotient", pf.quotient_commitment)
    zeta = tr.challenge_scalar("zeta")
    for i, e in enumerate(pf.advice_evals):
        tr.append_scalar(f"advice_eval[{i}]", e)
    tr.append_scalar("quotient_eval", pf.quotient_eval)
    nu = tr.challenge_scalar("nu")

    zh = (pow(zeta, vk.n, R) - 1) % R
    if zh == 0:
        return False
    selector_evals = [P.evaluate(p, zeta) for p in vk.selector_polys]
    lhs = 0
    for coeff, expr in _gate_polys(vk.gates, alpha):
        v = expr.evaluate(
            lambda c: pf.advice_evals[c.index],
            lambda s: selector_evals[s.index],
            lambda k: k % R,
            lambda a, b: (a + b) % R,
            lambda a, b: (a * b) % R,
            lambda a: (-a) % R,
        )
        lhs = (lhs + coeff * v) % R
    if lhs != (pf.quotient_eval * zh) % R:
        log.debug("verify: gate identity does not hold at zeta")
        return False

    ok = kzg.verify_batch(
        params,
        list(pf.advice_commitments) + [pf.quotient_commitment],
        list(pf.advice_evals) + [pf.quotient_eval],
        zeta,
        nu,
        pf.opening,
    )
    if not ok:
        log.debug("verify: opening check failed")
    return ok


__all__ = [
    "PROTOCOL_LABEL",
    "VerifyingKey",
    "ProvingKey",
    "keygen_vk",
    "keygen_pk",
    "create_proof",
    "parse_proof",
    "verify_proof",
]
