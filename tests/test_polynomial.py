import pytest

from qr_encoder import GFDomainError, Polynomial, gexp, glog, rs_encoder


def test_leading_zeros_stripped():
    poly = Polynomial([0, 0, 5, 0, 3])
    assert poly.coeffs == (5, 0, 3)
    assert poly.degree == 2


def test_shift_appends_zeros():
    poly = Polynomial([0, 7, 1], shift=3)
    assert poly.coeffs == (7, 1, 0, 0, 0)
    assert len(poly) == 5


def test_zero_polynomial():
    assert Polynomial([0, 0]).coeffs == ()
    assert Polynomial([0, 0]).degree == -1
    assert repr(Polynomial([])) == "0"


def test_repr():
    assert repr(Polynomial([1, 0, 3, 4])) == "1x^3 + 3x + 4"


def test_multiply_degree():
    a = Polynomial([1, gexp(0)])
    b = Polynomial([1, gexp(1)])
    product = a.multiply(b)
    assert product.degree == a.degree + b.degree
    # (x + 1)(x + 2) = x^2 + 3x + 2
    assert product.coeffs == (1, 3, 2)


def test_generator_polynomial_for_seven_codewords():
    generator = rs_encoder.build_generator(7)
    assert generator.degree == 7
    assert [glog(c) for c in generator.coeffs] == [0, 87, 229, 146, 149, 238, 102, 21]


def test_generator_is_cached():
    assert rs_encoder.build_generator(10) is rs_encoder.build_generator(10)


def test_generator_cache_is_stable_across_encodes():
    first = rs_encoder.build_generator(13)
    rs_encoder.encode([1, 2, 3], 13)
    rs_encoder.encode([4, 5, 6, 7], 10)
    assert rs_encoder.build_generator(13) is first
    assert first.degree == 13


def test_polynomials_are_hashable():
    a = Polynomial([0, 1, 2, 3])
    b = Polynomial([1, 2])
    assert hash(Polynomial([1, 2, 3])) == hash(a)
    assert len({a, Polynomial([1, 2, 3]), b}) == 2


def test_mod_by_itself_is_zero():
    generator = rs_encoder.build_generator(5)
    assert generator.mod(generator).coeffs == ()


def test_mod_of_shorter_polynomial_is_unchanged():
    generator = rs_encoder.build_generator(5)
    short = Polynomial([9, 8, 7])
    assert short.mod(generator) == short


def test_mod_does_not_change_dividend():
    generator = rs_encoder.build_generator(4)
    message = Polynomial([32, 91, 11, 120], shift=4)
    before = message.coeffs
    remainder = message.mod(generator)
    assert message.coeffs == before
    assert remainder.degree < generator.degree


def test_remainder_is_root_free_codeword():
    # data * x^n + remainder is divisible by the generator
    generator = rs_encoder.build_generator(6)
    message = Polynomial([12, 34, 56, 78, 90], shift=6)
    remainder = message.mod(generator)
    padded = (0,) * (len(message) - len(remainder)) + remainder.coeffs
    codeword = Polynomial([m ^ r for m, r in zip(message.coeffs, padded)])
    assert codeword.mod(generator).coeffs == ()


def test_mod_by_zero_polynomial():
    with pytest.raises(ZeroDivisionError):
        Polynomial([1, 2]).mod(Polynomial([0]))


def test_glog_of_zero_surfaces_as_domain_error():
    with pytest.raises(GFDomainError):
        glog(0)
