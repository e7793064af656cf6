import random

import pytest

from zkit.backend import poly as P
from zkit.backend.errors import ConstraintSystemError
from zkit.backend.field import R, TWO_ADICITY


@pytest.mark.parametrize("k", [1, 3, 5])
def test_domain_root_is_primitive(k):
    d = P.Domain.of_size_log2(k)
    assert d.n == 1 << k
    assert pow(d.omega, d.n, R) == 1
    assert pow(d.omega, d.n // 2, R) == R - 1
    elems = d.elements()
    assert len(set(elems)) == d.n
    assert all(d.vanishing_at(x) == 0 for x in elems)


@pytest.mark.parametrize("k", [0, TWO_ADICITY + 1])
def test_domain_rejects_unsupported_sizes(k):
    with pytest.raises(ConstraintSystemError):
        P.Domain.of_size_log2(k)


def test_interpolate_hits_every_point():
    rnd = random.Random(7)
    d = P.Domain.of_size_log2(3)
    values = [rnd.randrange(R) for _ in range(d.n)]
    coeffs = d.interpolate(values)
    assert len(coeffs) <= d.n
    for x, v in zip(d.elements(), values):
        assert P.evaluate(coeffs, x) == v


def test_interpolate_pads_short_columns_with_zero():
    d = P.Domain.of_size_log2(2)
    coeffs = d.interpolate([5])
    xs = d.elements()
    assert P.evaluate(coeffs, xs[0]) == 5
    assert [P.evaluate(coeffs, x) for x in xs[1:]] == [0, 0, 0]
    assert d.interpolate([0, 0]) == []


def test_divide_by_vanishing_exact_and_with_remainder():
    d = P.Domain.of_size_log2(2)
    q = [3, 0, 7]
    q2, rem = d.divide_by_vanishing(P.mul(q, d.vanishing()))
    assert q2 == q and rem == []

    q3, rem3 = d.divide_by_vanishing(P.add(P.mul(q, d.vanishing()), [1, 2]))
    assert q3 == q and rem3 == [1, 2]


def test_divide_by_linear_matches_evaluation():
    p = [5, 0, 3, 1]  # X^3 + 3X^2 + 5
    z = 11
    quotient, rem = P.divide_by_linear(p, z)
    assert rem == P.evaluate(p, z)
    assert P.add(P.mul(quotient, [R - z, 1]), [rem]) == P.trim(p)


def test_arithmetic_helpers():
    assert P.trim([1, 0, 0]) == [1]
    assert P.sub([1, 2], [1, 2]) == []
    assert P.neg([1]) == [R - 1]
    assert P.scale([1, 2], 3) == [3, 6]
    assert P.mul([1, 1], [R - 1, 1]) == [R - 1, 0, 1]  # (X+1)(X-1)
