"""
zkit.keys
---------

Key derivation: parameters + circuit shape -> frozen KeyPair.

Derivation synthesizes the shape without witnesses, so only the layout
(columns, selectors, gates, enabled rows) feeds the keys. The KeyPair records
the shape it was derived for; proving against any other shape is refused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .backend import DEFAULT_BACKEND, BackendError, ProofBackend
from .circuit import CircuitShape
from .errors import ConfigurationError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    proving_key: Any
    verifying_key: Any
    shape: CircuitShape

    @property
    def digest(self) -> str:
        return self.verifying_key.hex_digest()


class KeyManager:
    def __init__(self, backend: ProofBackend = DEFAULT_BACKEND) -> None:
        self.backend = backend

    def derive(self, parameters: Any, shape: CircuitShape) -> KeyPair:
        if not isinstance(shape, CircuitShape):
            raise ConfigurationError(f"expected a CircuitShape, got {type(shape).__name__}")
        circuit = shape.without_witnesses()
        try:
            vk = self.backend.keygen_vk(parameters, circuit)
            pk = self.backend.keygen_pk(parameters, vk, circuit)
        except BackendError as e:
            raise ConfigurationError(
                f"cannot derive keys: {e}",
                ctx={"enabled_rows": shape.enabled_rows, "backend": self.backend.name},
                cause=e,
            ) from e
        pair = KeyPair(proving_key=pk, verifying_key=vk, shape=shape)
        log.info("derived keys for shape %r (%s)", shape.name, pair.digest)
        return pair


__all__ = ["KeyPair", "KeyManager"]
