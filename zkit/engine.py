"""
zkit.engine
-----------

Proof creation and verification on top of a derived KeyPair.

Policy for witnesses that break the gate: proving refuses with
`ProofGenerationFailure` (gate name and row in the context) instead of emitting
a proof that would later verify to False.

`prove` expects fresh, cryptographically secure randomness on every call. The
default creates a new `secrets.SystemRandom()` per call. Passing a seeded
`random.Random` is for reproducible tests only; reusing one rng state for two
different witnesses under the same key leaks them.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any, Optional

from .backend import (
    DEFAULT_BACKEND,
    BackendError,
    MalformedProof,
    ProofBackend,
    ShapeMismatch,
    UnsatisfiedConstraint,
)
from .circuit import CircuitInstance
from .errors import ConfigurationError, ProofFormatError, ProofGenerationFailure, ShapeMismatchError

log = logging.getLogger(__name__)


class ProofEngine:
    def __init__(self, backend: ProofBackend = DEFAULT_BACKEND) -> None:
        self.backend = backend

    def prove(self, parameters: Any, proving_key: Any, instance: CircuitInstance, rng: Optional[Any] = None) -> bytes:
        if rng is None:
            rng = secrets.SystemRandom()
        try:
            proof = self.backend.create_proof(parameters, proving_key, instance, rng)
        except ShapeMismatch as e:
            raise ShapeMismatchError(str(e), cause=e) from e
        except UnsatisfiedConstraint as e:
            raise ProofGenerationFailure(
                "witness does not satisfy the circuit", gate=e.gate, row=e.row if e.row >= 0 else None, cause=e
            ) from e
        except BackendError as e:
            raise ProofGenerationFailure(f"backend failure: {e}", cause=e) from e
        except (OSError, NotImplementedError) as e:
            # randomness source unavailable
            raise ProofGenerationFailure("randomness source failed", cause=e) from e
        log.debug("created proof of %d bytes for %d witness values", len(proof), len(instance.witness))
        return proof

    def verify(self, parameters: Any, verifying_key: Any, proof: bytes) -> bool:
        try:
            ok = self.backend.verify_proof(parameters, verifying_key, proof)
        except MalformedProof as e:
            length = len(proof) if isinstance(proof, (bytes, bytearray, memoryview)) else None
            raise ProofFormatError(str(e), length=length, cause=e) from e
        except BackendError as e:
            raise ConfigurationError(f"verifier misconfigured: {e}", cause=e) from e
        log.debug("verified proof: %s", ok)
        return bool(ok)


__all__ = ["ProofEngine"]
