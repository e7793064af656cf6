"""
zkit.backend.transcript
=======================

Fiat–Shamir transcript over Fr backed by a Poseidon sponge (rate t-1,
capacity 1).

Every append absorbs a (tag, length) header before its payload, where
tag = sha3_256("zkit.fs/{kind}/{label}") mod r, so values of different kinds
or labels can never collide. Bytes are split into 31-byte big-endian limbs
(each < r, no reduction ambiguity); G1 points are absorbed through their
canonical 64-byte proof encoding.

Prover and verifier must perform the identical sequence of appends and
challenges; any divergence yields different challenges and a failed proof.

    t = Transcript("zkit:plonk-kzg:v1")
    t.append_message("vk", vk_digest)
    t.append_g1("advice[0]", commitment)
    alpha = t.challenge_scalar("alpha")
"""

from __future__ import annotations

import hashlib
from typing import Iterable, List, Sequence, Union

from .curve import encode_g1
from .field import R
from .poseidon import PoseidonParams, get_params, poseidon_permute

_CHUNK_BYTES = 31


def _tag(kind: str, label: str) -> int:
    h = hashlib.sha3_256(f"zkit.fs/{kind}/{label}".encode("utf-8")).digest()
    return int.from_bytes(h, "big") % R


def _limbs(data: bytes) -> List[int]:
    out = [int.from_bytes(data[off : off + _CHUNK_BYTES], "big") for off in range(0, len(data), _CHUNK_BYTES)]
    return out or [0]


class _Sponge:
    def __init__(self, params: PoseidonParams) -> None:
        self.params = params
        self.rate = params.t - 1
        self.state: List[int] = [0] * params.t
        self._pos = 0

    def absorb(self, elems: Iterable[int]) -> None:
        for v in elems:
            self.state[self._pos] = (self.state[self._pos] + int(v)) % R
            self._pos += 1
            if self._pos == self.rate:
                self._permute()

    def squeeze(self) -> int:
        self._permute()
        return self.state[0]

    def _permute(self) -> None:
        self.state = poseidon_permute(self.state, self.params)
        self._pos = 0


class Transcript:
    """Deterministic challenge derivation from everything absorbed so far."""

    def __init__(self, protocol_label: str, *, params_name: str = "zkit_t3") -> None:
        self._sponge = _Sponge(get_params(params_name))
        proto = _tag("init", protocol_label)
        self._sponge.absorb((proto, 1, proto))

    def append_message(self, label: str, data: Union[bytes, bytearray, memoryview]) -> None:
        b = bytes(data)
        # byte length first so b"" and b"\x00" differ
        self._absorb_typed("msg", label, [len(b)] + _limbs(b))

    def append_scalar(self, label: str, x: int) -> None:
        self._absorb_typed("scalar", label, [int(x) % R])

    def append_u64(self, label: str, x: int) -> None:
        if not 0 <= int(x) < (1 << 64):
            raise ValueError("u64 out of range")
        self._absorb_typed("u64", label, [int(x)])

    def append_g1(self, label: str, P) -> None:
        self._absorb_typed("g1", label, _limbs(encode_g1(P)))

    def challenge_scalar(self, label: str) -> int:
        self._sponge.absorb((_tag("challenge", label), 0))
        return self._sponge.squeeze()

    def _absorb_typed(self, kind: str, label: str, limbs: Sequence[int]) -> None:
        self._sponge.absorb((_tag(kind, label), len(limbs)))
        self._sponge.absorb(limbs)


__all__ = ["Transcript"]
