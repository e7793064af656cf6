"""
zkit.codec
==========

Bytes <-> field elements.

`encode` embeds each byte as the small integer it is; `decode` takes each
element's canonical integer and keeps its low 8 bits. The pair round-trips
exactly for records produced by `encode`. For any other element (values >= 256,
challenges, arithmetic results) `decode` is lossy: it narrows silently rather
than rejecting, so callers must not feed it foreign elements and expect a
faithful result.
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, Tuple, TypeVar, Union

from .backend.field import BN254_FR, Fr, PrimeField

E = TypeVar("E")

RawRecord = bytes
EncodedRecord = Tuple[Any, ...]


class FieldCodec(Generic[E]):
    def __init__(self, field: PrimeField = BN254_FR) -> None:
        self.field = field

    def encode(self, data: Union[bytes, bytearray, memoryview]) -> Tuple[E, ...]:
        from_int = self.field.from_int
        return tuple(from_int(b) for b in bytes(data))

    def decode(self, record: Sequence[E]) -> bytes:
        to_int = self.field.to_int
        return bytes(to_int(e) & 0xFF for e in record)


DEFAULT_CODEC: FieldCodec[Fr] = FieldCodec(BN254_FR)


def encode(data: Union[bytes, bytearray, memoryview]) -> Tuple[Fr, ...]:
    return DEFAULT_CODEC.encode(data)


def decode(record: Sequence[Fr]) -> bytes:
    return DEFAULT_CODEC.decode(record)


__all__ = ["RawRecord", "EncodedRecord", "FieldCodec", "DEFAULT_CODEC", "encode", "decode"]
