"""
zkit.envelope
=============

Transport container for proofs leaving the process (CLI files, stdout), using
**msgspec** JSON.

    {
      "kind": "plonk-kzg-bn254",
      "proof": "0x...",                       # proof bytes, hex
      "vk_hash": "sha3-256:<hex>",             # verifying key digest it was made for
      "meta": {"k": 4, "enabled_rows": 1, "witness_len": 3}
    }

`vk_hash` lets a verifier notice up front that it derived different keys
(other parameters or shape) instead of just getting False.
"""

from __future__ import annotations

from typing import Any, Dict

import msgspec

from .errors import EncodingError, ProofFormatError
from .hexio import parse_hex, to_hex


class ProofEnvelope(msgspec.Struct, frozen=True):
    kind: str
    proof: str
    vk_hash: str
    meta: Dict[str, Any] = msgspec.field(default_factory=dict)

    def proof_bytes(self) -> bytes:
        try:
            return parse_hex(self.proof)
        except EncodingError as e:
            raise ProofFormatError("envelope proof is not valid hex", cause=e) from e


def make_envelope(kind: str, proof: bytes, vk_hash: str, **meta: Any) -> ProofEnvelope:
    return ProofEnvelope(kind=kind, proof=to_hex(proof), vk_hash=vk_hash, meta=meta)


def encode_envelope(env: ProofEnvelope) -> bytes:
    return msgspec.json.encode(env)


def decode_envelope(data: bytes | str) -> ProofEnvelope:
    try:
        return msgspec.json.decode(data, type=ProofEnvelope)
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise ProofFormatError(f"malformed proof envelope: {e}", cause=e) from e


__all__ = ["ProofEnvelope", "make_envelope", "encode_envelope", "decode_envelope"]
