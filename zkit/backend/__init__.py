"""
zkit.backend: proving-system capability set

The orchestration layer (`zkit.keys`, `zkit.engine`, `zkit.session`) talks to
a proof system only through the `ProofBackend` Protocol below:

    field                                   PrimeField capability
    setup(k, max_degree=, seed=)            -> Parameters
    keygen_vk(params, circuit)              -> VerifyingKey
    keygen_pk(params, vk, circuit)          -> ProvingKey
    create_proof(params, pk, circuit, rng)  -> bytes
    verify_proof(params, vk, proof)         -> bool

`Bn254KzgBackend` is the default implementation: a PLONK-style argument with
KZG commitments over BN254 (py_ecc), Poseidon Fiat–Shamir transcript.

Circuits are described with `zkit.backend.constraints` (ConstraintSystem,
Layouter/Region assignment), see `zkit.circuit` for the circuit this project
ships.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

from . import plonk
from .constraints import Circuit, Column, ConstraintSystem, Expression, Layouter, Region, Selector, VirtualCells
from .errors import (
    BackendError,
    ConstraintSystemError,
    MalformedProof,
    ShapeMismatch,
    SynthesisError,
    UnsatisfiedConstraint,
)
from .field import BN254_FR, Fr, PrimeField
from .kzg import Parameters
from .plonk import ProvingKey, VerifyingKey


@runtime_checkable
class ProofBackend(Protocol):
    name: str
    field: PrimeField

    def setup(self, k: int, *, max_degree: int = 3, seed: Optional[bytes] = None) -> Any: ...
    def keygen_vk(self, params: Any, circuit: Circuit) -> Any: ...
    def keygen_pk(self, params: Any, vk: Any, circuit: Circuit) -> Any: ...
    def create_proof(self, params: Any, pk: Any, circuit: Circuit, rng: Any) -> bytes: ...
    def verify_proof(self, params: Any, vk: Any, proof: bytes) -> bool: ...


@dataclass(frozen=True)
class Bn254KzgBackend:
    name: str = "plonk-kzg-bn254"
    field: PrimeField = BN254_FR

    def setup(self, k: int, *, max_degree: int = 3, seed: Optional[bytes] = None) -> Parameters:
        return Parameters.setup(k, max_degree=max_degree, seed=seed)

    def keygen_vk(self, params: Parameters, circuit: Circuit) -> VerifyingKey:
        return plonk.keygen_vk(params, circuit)

    def keygen_pk(self, params: Parameters, vk: VerifyingKey, circuit: Circuit) -> ProvingKey:
        return plonk.keygen_pk(params, vk, circuit)

    def create_proof(self, params: Parameters, pk: ProvingKey, circuit: Circuit, rng: Any) -> bytes:
        return plonk.create_proof(params, pk, circuit, rng)

    def verify_proof(self, params: Parameters, vk: VerifyingKey, proof: bytes) -> bool:
        return plonk.verify_proof(params, vk, proof)


DEFAULT_BACKEND = Bn254KzgBackend()


__all__ = [
    "ProofBackend",
    "Bn254KzgBackend",
    "DEFAULT_BACKEND",
    "Parameters",
    "ProvingKey",
    "VerifyingKey",
    "Circuit",
    "Column",
    "Selector",
    "ConstraintSystem",
    "Expression",
    "VirtualCells",
    "Layouter",
    "Region",
    "Fr",
    "PrimeField",
    "BN254_FR",
    "BackendError",
    "ConstraintSystemError",
    "SynthesisError",
    "UnsatisfiedConstraint",
    "ShapeMismatch",
    "MalformedProof",
]
