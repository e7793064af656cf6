"""
zkit.session
============

`SessionCoordinator`, the one object the boundary layer talks to.

    ingest(raw)        -> id            ledger write
    retrieve(id)       -> bytes | None  ledger read
    keygen(shape)      -> KeyPair       UNINITIALIZED -> READY
    prove(instance)    -> bytes         READY only
    verify(proof)      -> bool          READY only

Key readiness is an explicit state machine. There is no way back to
UNINITIALIZED: keys live as long as the coordinator. Calling `keygen` again
with the same shape returns the existing KeyPair; a different shape is a
`ConfigurationError`.

The coordinator owns the ledger and the parameters; it holds no cryptographic
logic of its own. A single instance is safe to share between threads: ledger
writes serialize on the ledger's lock, the KeyPair is published once and is
immutable afterwards, and every `prove` gets its own randomness.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Iterable, Optional, Union

from .backend import DEFAULT_BACKEND, BackendError, ProofBackend
from .circuit import CircuitInstance, CircuitShape
from .codec import FieldCodec
from .config import ZkitConfig
from .engine import ProofEngine
from .errors import ConfigurationError, EncodingError, KeyNotInitialized, ShapeMismatchError
from .keys import KeyManager, KeyPair
from .ledger import LedgerStore

log = logging.getLogger(__name__)

RawInput = Union[bytes, bytearray, memoryview, Iterable[int]]


class KeyState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


def _as_bytes(raw: RawInput) -> bytes:
    if isinstance(raw, (bytes, bytearray, memoryview)):
        return bytes(raw)
    if isinstance(raw, (str, int)):
        raise EncodingError("input must be parsed into a byte sequence at the boundary", value=str(raw)[:32])
    try:
        return bytes(raw)
    except (TypeError, ValueError) as e:
        raise EncodingError(f"cannot interpret input as bytes: {e}", cause=e) from e


class SessionCoordinator:
    def __init__(
        self,
        parameters: Any,
        *,
        backend: ProofBackend = DEFAULT_BACKEND,
        ledger: Optional[LedgerStore] = None,
    ) -> None:
        self.backend = backend
        self._parameters = parameters
        self._ledger = ledger if ledger is not None else LedgerStore(FieldCodec(backend.field))
        self._codec = FieldCodec(backend.field)
        self._keys = KeyManager(backend)
        self._engine = ProofEngine(backend)
        self._keygen_lock = threading.Lock()
        self._key_pair: Optional[KeyPair] = None

    @classmethod
    def from_config(cls, config: ZkitConfig, *, backend: ProofBackend = DEFAULT_BACKEND) -> "SessionCoordinator":
        config.validate()
        try:
            params = backend.setup(config.k, max_degree=config.max_degree, seed=config.seed_bytes)
        except BackendError as e:
            raise ConfigurationError(f"parameter setup failed: {e}", ctx={"k": config.k}, cause=e) from e
        return cls(params, backend=backend)

    # --- state ---

    @property
    def state(self) -> KeyState:
        return KeyState.READY if self._key_pair is not None else KeyState.UNINITIALIZED

    @property
    def key_pair(self) -> Optional[KeyPair]:
        return self._key_pair

    @property
    def parameters(self) -> Any:
        return self._parameters

    @property
    def ledger(self) -> LedgerStore:
        return self._ledger

    def _ready(self, operation: str) -> KeyPair:
        kp = self._key_pair
        if kp is None:
            raise KeyNotInitialized(operation)
        return kp

    # --- ledger ---

    def ingest(self, raw: RawInput) -> int:
        data = _as_bytes(raw)
        entry_id = self._ledger.insert(self._codec.encode(data))
        log.info("ingested %d bytes as id %d", len(data), entry_id)
        return entry_id

    def retrieve(self, entry_id: int) -> Optional[bytes]:
        return self._ledger.get(entry_id)

    # --- keys & proofs ---

    def keygen(self, shape: CircuitShape) -> KeyPair:
        with self._keygen_lock:
            current = self._key_pair
            if current is not None:
                if current.shape == shape:
                    return current
                raise ConfigurationError(
                    "keys already derived for a different circuit shape",
                    ctx={"current": current.shape.enabled_rows, "requested": getattr(shape, "enabled_rows", None)},
                )
            kp = self._keys.derive(self._parameters, shape)
            self._key_pair = kp
            return kp

    def prove(self, instance: CircuitInstance, *, rng: Optional[Any] = None) -> bytes:
        kp = self._ready("prove")
        if not isinstance(instance, CircuitInstance) or instance.shape != kp.shape:
            raise ShapeMismatchError(ctx={"expected": repr(kp.shape), "got": repr(getattr(instance, "shape", instance))})
        return self._engine.prove(self._parameters, kp.proving_key, instance, rng)

    def verify(self, proof: bytes) -> bool:
        kp = self._ready("verify")
        return self._engine.verify(self._parameters, kp.verifying_key, proof)


__all__ = ["KeyState", "SessionCoordinator"]
