"""
zkit.backend.errors
===================

Exceptions raised by the proving backend. The orchestration layer maps these
onto its own taxonomy (see `zkit.errors`); nothing outside `zkit.backend`
should need to raise them.
"""

from __future__ import annotations


class BackendError(RuntimeError):
    """Base class for backend failures (parameters, commitments, keys)."""


class ConstraintSystemError(BackendError):
    """The declared constraint system is malformed or exceeds the parameters."""


class SynthesisError(BackendError):
    """Witness/selector assignment failed (e.g. not enough rows available)."""


class UnsatisfiedConstraint(SynthesisError):
    """A gate does not vanish on some row of the assignment."""

    def __init__(self, gate: str, row: int, index: int = 0) -> None:
        super().__init__(f"gate '{gate}' (poly {index}) not satisfied at row {row}")
        self.gate = gate
        self.row = row
        self.index = index


class ShapeMismatch(SynthesisError):
    """The synthesized circuit does not match the one the key was derived for."""


class MalformedProof(BackendError):
    """Proof bytes cannot be framed into commitments and evaluations."""


__all__ = [
    "BackendError",
    "ConstraintSystemError",
    "SynthesisError",
    "UnsatisfiedConstraint",
    "ShapeMismatch",
    "MalformedProof",
]
