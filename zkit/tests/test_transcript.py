import pytest

from zkit.backend import curve
from zkit.backend.field import R
from zkit.backend.poseidon import PoseidonParams, get_params, poseidon_permute, register_params
from zkit.backend.transcript import Transcript


def _fresh() -> Transcript:
    t = Transcript("zkit:test")
    t.append_message("vk", b"\x01" * 32)
    return t


def test_same_appends_give_same_challenges():
    a, b = _fresh(), _fresh()
    for t in (a, b):
        t.append_scalar("x", 42)
        t.append_g1("P", curve.g1_generator())
    assert a.challenge_scalar("alpha") == b.challenge_scalar("alpha")
    assert a.challenge_scalar("zeta") == b.challenge_scalar("zeta")


def test_challenges_are_field_elements_and_distinct():
    t = _fresh()
    xs = [t.challenge_scalar(f"batch[{i}]") for i in range(4)]
    assert all(0 <= x < R for x in xs)
    assert len(set(xs)) == 4
    assert t.challenge_scalar("next") not in xs


@pytest.mark.parametrize(
    "tweak",
    [
        lambda t: t.append_scalar("x", 43),
        lambda t: t.append_scalar("y", 42),
        lambda t: t.append_u64("x", 42),
        lambda t: t.append_message("x", b"\x2a"),
    ],
)
def test_any_difference_changes_the_challenge(tweak):
    base = _fresh()
    base.append_scalar("x", 42)
    other = _fresh()
    tweak(other)
    assert base.challenge_scalar("c") != other.challenge_scalar("c")


def test_message_length_is_bound():
    a, b = _fresh(), _fresh()
    a.append_message("m", b"")
    b.append_message("m", b"\x00")
    assert a.challenge_scalar("c") != b.challenge_scalar("c")


def test_domain_size_is_bound():
    a, b = _fresh(), _fresh()
    a.append_u64("n", 8)
    b.append_u64("n", 16)
    assert a.challenge_scalar("alpha") != b.challenge_scalar("alpha")


def test_protocol_label_separates_transcripts():
    assert Transcript("a").challenge_scalar("c") != Transcript("b").challenge_scalar("c")


def test_bad_arguments():
    t = _fresh()
    with pytest.raises(ValueError):
        t.append_u64("n", 1 << 64)


def test_poseidon_permutation_is_deterministic():
    params = get_params()
    state = [1, 2, 3]
    out = poseidon_permute(state, params)
    assert out == poseidon_permute(state, params)
    assert out != state and len(out) == params.t
    assert poseidon_permute([2, 1, 3], params) != out
    with pytest.raises(ValueError):
        poseidon_permute([1, 2], params)


def test_poseidon_registry():
    with pytest.raises(KeyError):
        get_params("missing")
    base = get_params()
    with pytest.raises(ValueError):
        register_params("broken", PoseidonParams(t=3, R_F=7, R_P=1, alpha=5, mds=base.mds, rc=base.rc))
