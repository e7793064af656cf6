"""
zkit.hexio
----------

Parsing of user-typed input for the boundary layer. Everything here raises
`EncodingError`; nothing malformed reaches the core.

    parse_byte_list("65, 66, 67")   -> b"ABC"
    parse_byte_list("")             -> b""
    parse_hex("0xdeadbeef")         -> b"\\xde\\xad\\xbe\\xef"
    parse_id("7")                   -> 7
    parse_witness("0, 5, 7")        -> [0, 5, 7]
"""

from __future__ import annotations

import re
from typing import List

from .errors import EncodingError

_HEX_RE = re.compile(r"^(0x|0X)?[0-9a-fA-F]*$")
_U64_MAX = (1 << 64) - 1


def _split(text: str) -> List[str]:
    text = text.strip()
    if not text:
        return []
    return [part.strip() for part in text.split(",")]


def parse_byte_list(text: str) -> bytes:
    out = bytearray()
    for part in _split(text):
        try:
            value = int(part, 10)
        except ValueError as e:
            raise EncodingError(f"not a decimal byte: {part!r}", value=part, cause=e) from e
        if not 0 <= value <= 255:
            raise EncodingError(f"byte out of range [0, 255]: {value}", value=part)
        out.append(value)
    return bytes(out)


def parse_witness(text: str) -> List[int]:
    """Comma separated non-negative integers (field elements, not limited to bytes)."""
    values = []
    for part in _split(text):
        try:
            value = int(part, 0)
        except ValueError as e:
            raise EncodingError(f"not an integer: {part!r}", value=part, cause=e) from e
        if value < 0:
            raise EncodingError(f"witness values must be non-negative: {value}", value=part)
        values.append(value)
    return values


def parse_hex(text: str) -> bytes:
    s = text.strip()
    if not _HEX_RE.match(s):
        raise EncodingError("non-hex characters present", value=s[:32])
    body = s[2:] if s[:2] in ("0x", "0X") else s
    if len(body) % 2:
        raise EncodingError("odd number of hex nibbles", value=s[:32])
    return bytes.fromhex(body)


def to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def parse_id(text: str) -> int:
    s = text.strip()
    if not s.isdigit():
        raise EncodingError(f"not a ledger id: {s!r}", value=s[:32])
    value = int(s, 10)
    if value > _U64_MAX:
        raise EncodingError("ledger id exceeds u64", value=s[:32])
    return value


__all__ = ["parse_byte_list", "parse_witness", "parse_hex", "to_hex", "parse_id"]
