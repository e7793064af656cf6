"""
Typed exceptions for ZKIT.

Every failure the core reports is a `ZkitError` carrying a stable machine
code, a human message, a small context dict and an optional cause. Callers
can branch on the subclass or on `code`; `to_dict()` gives a JSON-friendly view
for the CLI.

Not every negative outcome is an error: a proof that verifies to False is a
plain `False`, and an unknown ledger id is `None`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    CONFIGURATION = "CONFIGURATION"  # circuit/parameter mismatch, bad config
    KEY_NOT_INITIALIZED = "KEY_NOT_INITIALIZED"  # prove/verify before keygen
    PROOF_GENERATION = "PROOF_GENERATION"  # unsatisfied gate, rng or commitment failure
    PROOF_FORMAT = "PROOF_FORMAT"  # bytes cannot be framed into a proof
    SHAPE_MISMATCH = "SHAPE_MISMATCH"  # instance shape differs from the key's shape
    ENCODING = "ENCODING"  # boundary input not parseable
    LEDGER_FULL = "LEDGER_FULL"  # id space exhausted


@dataclass(eq=False)
class ZkitError(Exception):
    code: ErrorCode | str = ErrorCode.UNKNOWN
    msg: str = "zkit error"
    ctx: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None

    def __str__(self) -> str:
        parts = [f"[{self.code.value if isinstance(self.code, ErrorCode) else self.code}] {self.msg}"]
        if self.ctx:
            parts.append(f"ctx={self.ctx}")
        if self.cause:
            parts.append(f"cause={self.cause!r}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        code = self.code.value if isinstance(self.code, ErrorCode) else str(self.code)
        return {"code": code, "msg": self.msg, "ctx": self.ctx}


def _ctx(ctx: Optional[Mapping[str, Any]], **extra: Any) -> Dict[str, Any]:
    out = {k: v for k, v in extra.items() if v is not None}
    if ctx:
        out.update(ctx)
    return out


class ConfigurationError(ZkitError):
    """Key derivation or configuration failed; fatal to that call only."""

    def __init__(
        self,
        msg: str = "invalid configuration",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.CONFIGURATION, msg=msg, ctx=_ctx(ctx), cause=cause)


class KeyNotInitialized(ZkitError):
    """prove/verify called before a successful keygen."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            code=ErrorCode.KEY_NOT_INITIALIZED,
            msg=f"{operation} requires keys; call keygen first",
            ctx={"operation": operation},
        )


class ProofGenerationFailure(ZkitError):
    def __init__(
        self,
        msg: str = "proof generation failed",
        *,
        gate: Optional[str] = None,
        row: Optional[int] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PROOF_GENERATION, msg=msg, ctx=_ctx(ctx, gate=gate, row=row), cause=cause
        )


class ProofFormatError(ZkitError):
    """Proof bytes are structurally malformed (distinct from verifying to False)."""

    def __init__(
        self,
        msg: str = "malformed proof",
        *,
        length: Optional[int] = None,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.PROOF_FORMAT, msg=msg, ctx=_ctx(ctx, length=length), cause=cause)


class ShapeMismatchError(ZkitError):
    def __init__(
        self,
        msg: str = "circuit shape does not match the derived keys",
        *,
        ctx: Optional[Mapping[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.SHAPE_MISMATCH, msg=msg, ctx=_ctx(ctx), cause=cause)


class EncodingError(ZkitError):
    """Boundary input (byte lists, hex, ids) could not be parsed."""

    def __init__(
        self,
        msg: str = "cannot decode input",
        *,
        value: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.ENCODING, msg=msg, ctx=_ctx(None, value=value), cause=cause)


__all__ = [
    "ErrorCode",
    "ZkitError",
    "ConfigurationError",
    "KeyNotInitialized",
    "ProofGenerationFailure",
    "ProofFormatError",
    "ShapeMismatchError",
    "EncodingError",
]
