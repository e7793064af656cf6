from dataclasses import dataclass

from hypothesis import given, strategies as st

from zkit.backend.field import BN254_FR, Fr, PrimeField, R
from zkit.codec import DEFAULT_CODEC, FieldCodec, decode, encode
from zkit.tests import configure_test_logging

configure_test_logging()


@dataclass(frozen=True)
class _Gf65537:
    """Tiny prime field over plain ints; enough to exercise FieldCodec genericity."""

    name: str = "gf65537"
    modulus: int = 65537

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def add(self, a: int, b: int) -> int:
        return (a + b) % self.modulus

    def mul(self, a: int, b: int) -> int:
        return (a * b) % self.modulus

    def from_int(self, x: int) -> int:
        return x % self.modulus

    def to_int(self, a: int) -> int:
        return a

    def to_bytes(self, a: int) -> bytes:
        return a.to_bytes(3, "big")

    def from_bytes(self, b: bytes) -> int:
        return int.from_bytes(b, "big") % self.modulus


@given(st.binary(max_size=256))
def test_encode_decode_roundtrip(data):
    record = encode(data)
    assert len(record) == len(data)
    assert decode(record) == data


def test_encode_embeds_each_byte_as_small_integer():
    record = DEFAULT_CODEC.encode(b"\x00\x01\xff")
    assert record == (Fr(0), Fr(1), Fr(255))
    assert all(isinstance(e, Fr) for e in record)


def test_empty_record():
    assert encode(b"") == ()
    assert decode(()) == b""


def test_decode_is_lossy_for_large_elements():
    # only the low 8 bits survive
    assert decode([Fr(256), Fr(0x1FF), Fr(R - 1)]) == bytes([0, 0xFF, (R - 1) & 0xFF])


def test_codec_over_another_field():
    field = _Gf65537()
    assert isinstance(field, PrimeField)
    codec = FieldCodec(field)
    record = codec.encode(b"ABC")
    assert record == (65, 66, 67)
    assert codec.decode(record) == b"ABC"


def test_bn254_field_capabilities():
    f = BN254_FR
    a, b = f.from_int(7), f.from_int(R - 2)
    assert f.to_int(f.add(a, b)) == 5
    assert f.mul(a, f.one()) == a
    assert f.add(a, f.zero()) == a
    assert f.from_bytes(f.to_bytes(a)) == a
