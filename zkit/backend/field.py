"""
zkit.backend.field
==================

BN254 scalar field Fr: the field every circuit value, witness and challenge
lives in.

Two layers are exposed:

- `Fr`: a tiny immutable element wrapper usable like an integer
  (`Fr(5) * 7 + 1`). Not constant-time; the backend's heavy loops work on
  plain ints reduced modulo `R` and only wrap at the API boundary.
- `PrimeField`: the capability interface the orchestration layer is written
  against (identities, add/mul, canonical integer and byte encodings).
  `BN254_FR` is the default implementation; any other field that satisfies the
  Protocol can be plugged into `zkit.codec.FieldCodec`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, TypeVar, Union, runtime_checkable

from .errors import BackendError

# BN254 / alt_bn128 subgroup order r (scalar field modulus).
R: int = 21888242871839275222246405745257275088548364400416034343698204186575808495617
FR_BYTE_LEN = 32

# Multiplicative generator of Fr^*; R - 1 = 2^28 * odd.
GENERATOR: int = 5
TWO_ADICITY: int = 28


def _to_int(x: Union[int, "Fr"]) -> int:
    return x.n if isinstance(x, Fr) else int(x)


@dataclass(frozen=True)
class Fr:
    """
    Immutable element of Fr.

        a = Fr.from_int(5)
        b = a * 7 + 1
    """

    n: int  # canonical representative in [0, R)

    @staticmethod
    def from_int(x: int) -> "Fr":
        return Fr(int(x) % R)

    @staticmethod
    def from_bytes(b: bytes, *, strict: bool = False) -> "Fr":
        """
        Parse big-endian bytes. With `strict`, require exactly 32 bytes holding a
        canonical value (< R) instead of reducing.
        """
        if len(b) > FR_BYTE_LEN:
            raise BackendError("Fr.from_bytes: too many bytes for field element")
        v = int.from_bytes(b, "big")
        if strict:
            if len(b) != FR_BYTE_LEN:
                raise BackendError(f"Fr.from_bytes: expected {FR_BYTE_LEN} bytes, got {len(b)}")
            if v >= R:
                raise BackendError("Fr.from_bytes: non-canonical encoding")
        return Fr(v % R)

    def to_bytes(self) -> bytes:
        return self.n.to_bytes(FR_BYTE_LEN, "big")

    def __int__(self) -> int:
        return self.n

    def __index__(self) -> int:
        return self.n

    def __bool__(self) -> bool:
        return self.n != 0

    def __repr__(self) -> str:
        return f"Fr({self.n})"

    def __hash__(self) -> int:
        return hash(self.n)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (int, Fr)):
            return False
        return self.n == _to_int(other) % R

    def __neg__(self) -> "Fr":
        return Fr((-self.n) % R)

    def __add__(self, other: Union[int, "Fr"]) -> "Fr":
        return Fr((self.n + _to_int(other)) % R)

    __radd__ = __add__

    def __sub__(self, other: Union[int, "Fr"]) -> "Fr":
        return Fr((self.n - _to_int(other)) % R)

    def __rsub__(self, other: Union[int, "Fr"]) -> "Fr":
        return Fr((_to_int(other) - self.n) % R)

    def __mul__(self, other: Union[int, "Fr"]) -> "Fr":
        return Fr((self.n * _to_int(other)) % R)

    __rmul__ = __mul__

    def __truediv__(self, other: Union[int, "Fr"]) -> "Fr":
        return self * Fr.from_int(_to_int(other)).inv()

    def __pow__(self, exponent: int) -> "Fr":
        return Fr(pow(self.n, exponent, R))

    def inv(self) -> "Fr":
        """Multiplicative inverse via Fermat's little theorem."""
        if self.n == 0:
            raise BackendError("Fr inverse of zero")
        return Fr(pow(self.n, R - 2, R))


E = TypeVar("E")


@runtime_checkable
class PrimeField(Protocol[E]):
    """Field capability consumed by the codec and the circuit layer."""

    name: str
    modulus: int

    def zero(self) -> E: ...
    def one(self) -> E: ...
    def add(self, a: E, b: E) -> E: ...
    def mul(self, a: E, b: E) -> E: ...
    def from_int(self, x: int) -> E: ...
    def to_int(self, a: E) -> int: ...
    def to_bytes(self, a: E) -> bytes: ...
    def from_bytes(self, b: bytes) -> E: ...


@dataclass(frozen=True)
class Bn254ScalarField:
    name: str = "bn254:fr"
    modulus: int = R

    def zero(self) -> Fr:
        return Fr(0)

    def one(self) -> Fr:
        return Fr(1)

    def add(self, a: Fr, b: Fr) -> Fr:
        return a + b

    def mul(self, a: Fr, b: Fr) -> Fr:
        return a * b

    def from_int(self, x: int) -> Fr:
        return Fr.from_int(x)

    def to_int(self, a: Union[int, Fr]) -> int:
        return _to_int(a) % R

    def to_bytes(self, a: Fr) -> bytes:
        return a.to_bytes()

    def from_bytes(self, b: bytes) -> Fr:
        return Fr.from_bytes(b, strict=True)


BN254_FR = Bn254ScalarField()


__all__ = [
    "R",
    "FR_BYTE_LEN",
    "GENERATOR",
    "TWO_ADICITY",
    "Fr",
    "PrimeField",
    "Bn254ScalarField",
    "BN254_FR",
]
