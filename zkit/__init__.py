"""
zkit: a small orchestration layer around a zero-knowledge proof backend.

    from zkit import SessionCoordinator, CircuitShape, load_config

    session = SessionCoordinator.from_config(load_config())
    entry_id = session.ingest(b"ABC")            # -> 1
    session.keygen(CircuitShape())
    proof = session.prove(CircuitShape().instantiate([0, 1, 2]))
    assert session.verify(proof)

Layout:
    zkit.codec     bytes <-> field elements
    zkit.ledger    thread-safe id -> encoded record store
    zkit.circuit   the data-processing circuit (shape + instance)
    zkit.keys      key derivation
    zkit.engine    proof creation / verification
    zkit.session   SessionCoordinator facade
    zkit.backend   PLONK/KZG proving system on BN254 (py_ecc)
    zkit.cli       typer command line (menu / prove / verify / info)
"""

from .circuit import CircuitInstance, CircuitShape
from .codec import DEFAULT_CODEC, FieldCodec
from .config import ZkitConfig, load_config
from .engine import ProofEngine
from .errors import (
    ConfigurationError,
    EncodingError,
    ErrorCode,
    KeyNotInitialized,
    ProofFormatError,
    ProofGenerationFailure,
    ShapeMismatchError,
    ZkitError,
)
from .keys import KeyManager, KeyPair
from .ledger import LedgerEntry, LedgerStore
from .session import KeyState, SessionCoordinator
from .version import __version__

__all__ = [
    "__version__",
    "CircuitShape",
    "CircuitInstance",
    "FieldCodec",
    "DEFAULT_CODEC",
    "ZkitConfig",
    "load_config",
    "ProofEngine",
    "KeyManager",
    "KeyPair",
    "LedgerEntry",
    "LedgerStore",
    "KeyState",
    "SessionCoordinator",
    "ErrorCode",
    "ZkitError",
    "ConfigurationError",
    "KeyNotInitialized",
    "ProofGenerationFailure",
    "ProofFormatError",
    "ShapeMismatchError",
    "EncodingError",
]
