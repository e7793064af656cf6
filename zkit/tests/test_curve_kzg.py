import pytest

from zkit.backend import curve, kzg
from zkit.backend import poly as P
from zkit.backend.errors import BackendError
from zkit.backend.field import R


def test_g1_encoding_roundtrip():
    g = curve.g1_generator()
    for k in (1, 2, 12345, R - 1):
        point = curve.g1_mul(g, k)
        enc = curve.encode_g1(point)
        assert len(enc) == curve.G1_BYTE_LEN
        assert curve.encode_g1(curve.decode_g1(enc)) == curve.encode_g1(point)


def test_infinity_encoding():
    inf = curve.g1_mul(curve.g1_generator(), 0)
    assert curve.is_inf(inf)
    assert curve.encode_g1(inf) == b"\x00" * 64
    assert curve.is_inf(curve.decode_g1(b"\x00" * 64))
    assert curve.encode_g1(curve.g1_mul(curve.g1_generator(), R)) == curve.encode_g1(inf)


def test_decode_rejects_off_curve_and_out_of_range():
    enc = bytearray(curve.encode_g1(curve.g1_generator()))
    enc[63] ^= 1
    assert curve.decode_g1(bytes(enc)) is None
    assert curve.decode_g1(b"\xff" * 64) is None
    assert curve.decode_g1(b"\x01" * 63) is None


def test_lincomb_matches_scalar_arithmetic():
    g = curve.g1_generator()
    points = [curve.g1_mul(g, 3), curve.g1_mul(g, 5)]
    assert curve.encode_g1(curve.g1_lincomb(points, [2, 7])) == curve.encode_g1(curve.g1_mul(g, 41))
    assert curve.is_inf(curve.g1_add(g, curve.g1_neg(g)))


def test_commit_is_linear(params):
    a, b = [1, 2, 3], [4, 0, 6]
    lhs = kzg.commit(params, P.add(a, b))
    rhs = curve.g1_add(kzg.commit(params, a), kzg.commit(params, b))
    assert curve.encode_g1(lhs) == curve.encode_g1(rhs)


def test_commit_over_capacity(params):
    with pytest.raises(BackendError):
        kzg.commit(params, [1] * (params.capacity + 1))


def test_srs_size_covers_quotient():
    # blinded columns have n+2 coefficients, degree-d quotients d(n+1) - n + 1
    assert kzg.srs_size(3, 2) == 11
    assert kzg.srs_size(1, 1) == 4
    assert kzg.srs_size(3, 3) == 20
    assert kzg.srs_size(4, 3) == 36


def test_seeded_setup_is_reproducible(params):
    again = kzg.Parameters.setup(params.k, max_degree=params.max_degree, seed=b"zkit-tests")
    assert again.digest() == params.digest()
    assert kzg.Parameters.setup(params.k, seed=b"other").digest() != params.digest()


@pytest.mark.parametrize("k,degree", [(0, 3), (3, 0)])
def test_setup_rejects_bad_sizes(k, degree):
    with pytest.raises(BackendError):
        kzg.Parameters.setup(k, max_degree=degree, seed=b"x")


@pytest.mark.slow
def test_batch_opening_verifies_and_rejects_wrong_value(params):
    polys = [[5, 1, 2], [0, 0, 9, 1]]
    z, nu = 77, 1234
    comms = [kzg.commit(params, f) for f in polys]
    values = [P.evaluate(f, z) for f in polys]
    proof = kzg.open_batch(params, polys, z, nu)
    assert kzg.verify_batch(params, comms, values, z, nu, proof)
    assert not kzg.verify_batch(params, comms, [values[0], (values[1] + 1) % R], z, nu, proof)


@pytest.mark.slow
def test_pairing_bilinearity():
    g1, g2 = curve.g1_generator(), curve.g2_generator()
    assert curve.check_pairing_product([(curve.g1_mul(g1, 6), g2), (curve.g1_neg(g1), curve.g2_mul(g2, 6))])
