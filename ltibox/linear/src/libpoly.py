"""
Scalar rational functions

Library of single-input single-output transfer functions. Two interchangeable forms are provided:

- SisoRational: numerator and denominator coefficients, highest degree first.
- SisoZpk: zeros, poles and gain.

Both are immutable and support ``+``, ``-``, ``*``, ``/`` between themselves and with numbers. Common factors are
never cancelled: the degree of the result is the one given by the polynomial products.

Methods for polynomial manipulation:
- to_zpk: roots of numerator and denominator
- to_rational: expansion of zeros and poles into coefficients
- poly_to_string: textual rendering of a polynomial
"""

from abc import ABCMeta, abstractmethod

import numpy as np

from ltibox.utils.exceptions import DegenerateSystem


# ------------------------------------------------------------------- Polynomials

def as_coefficients(coefs):
    """
    Returns a read-only 1D array of polynomial coefficients without leading zeros. The zero polynomial is ``[0.]``.
    """
    coefs = np.atleast_1d(np.array(coefs))
    if coefs.ndim != 1:
        raise DegenerateSystem('Polynomial coefficients must be given as a 1D sequence, '
                               'got an array of shape {}'.format(coefs.shape))
    if coefs.size == 0:
        coefs = np.zeros(1)
    if np.iscomplexobj(coefs):
        if not np.any(coefs.imag):
            coefs = coefs.real
    if not np.iscomplexobj(coefs):
        coefs = coefs.astype(float)

    nonzero = np.flatnonzero(coefs)
    if nonzero.size == 0:
        coefs = np.zeros(1, dtype=coefs.dtype)
    else:
        coefs = coefs[nonzero[0]:].copy()
    coefs.flags.writeable = False
    return coefs


def is_zero_poly(coefs):
    return not np.any(coefs)


def evaluate_poly_ratio(num, den, s):
    """
    Evaluates ``num(s)/den(s)``. At roots of the denominator ``inf`` is returned (``nan`` if the numerator vanishes
    too), following floating point division.
    """
    scalar = np.ndim(s) == 0
    s = np.atleast_1d(np.asarray(s, dtype=complex))
    n = np.polyval(num, s)
    d = np.polyval(den, s)

    out = np.empty(s.shape, dtype=complex)
    pole = d == 0
    out[~pole] = n[~pole] / d[~pole]
    out[pole] = np.where(n[pole] == 0, complex(np.nan, np.nan), complex(np.inf, 0.))

    if scalar:
        return complex(out[0])
    return out


def to_zpk(num, den):
    """
    Zeros, poles and gain of ``num/den``.

    Args:
        num (np.ndarray): numerator coefficients
        den (np.ndarray): denominator coefficients

    Returns:
        tuple: ``(z, p, k)``

    Raises:
        DegenerateSystem: if the denominator is the zero polynomial.
    """
    num = as_coefficients(num)
    den = as_coefficients(den)
    if is_zero_poly(den):
        raise DegenerateSystem('Denominator is the zero polynomial')

    if is_zero_poly(num):
        return np.zeros(0), np.roots(den), 0.

    k = num[0] / den[0]
    if np.iscomplexobj(k) and k.imag == 0:
        k = k.real
    return np.roots(num), np.roots(den), k


def to_rational(z, p, k):
    """
    Numerator and denominator coefficients of ``k prod(s - z) / prod(s - p)``.

    Returns:
        tuple: ``(num, den)``
    """
    num = k * np.atleast_1d(np.poly(np.asarray(z)))
    den = np.atleast_1d(np.poly(np.asarray(p)))
    return as_coefficients(num), as_coefficients(den)


def _format_number(value, precision):
    if np.iscomplexobj(value) and np.imag(value) != 0:
        return '({:.{prec}g}{:+.{prec}g}j)'.format(np.real(value), np.imag(value), prec=precision)
    return '{:.{prec}g}'.format(np.real(value), prec=precision)


def poly_to_string(coefs, var='s', precision=4):
    """
    Renders a polynomial such as ``[1, 2, 1]`` as ``s^2 + 2s + 1``.
    """
    coefs = as_coefficients(coefs)
    order = len(coefs) - 1
    if is_zero_poly(coefs):
        return '0'

    terms = []
    for ith, coef in enumerate(coefs):
        if coef == 0:
            continue
        power = order - ith

        negative = not np.iscomplexobj(coef) and coef < 0
        magnitude = -coef if negative else coef

        if power == 0:
            body = _format_number(magnitude, precision)
        else:
            body = '' if magnitude == 1 else _format_number(magnitude, precision)
            body += var if power == 1 else '{:s}^{:g}'.format(var, power)

        if not terms:
            terms.append('-' + body if negative else body)
        else:
            terms.append(('- ' if negative else '+ ') + body)

    return ' '.join(terms)


def roots_to_string(roots, var='s', precision=4):
    factors = ''
    for root in roots:
        if root == 0:
            factors += '({:s})'.format(var)
        elif np.imag(root) == 0 and np.real(root) < 0:
            factors += '({:s} + {:s})'.format(var, _format_number(-np.real(root), precision))
        else:
            factors += '({:s} - {:s})'.format(var, _format_number(root, precision))
    return factors


# ----------------------------------------------------------- Rational functions

class SisoTf(metaclass=ABCMeta):
    """
    Common interface of scalar rational functions.
    """

    @property
    @abstractmethod
    def num(self):
        """Numerator coefficients, highest degree first."""
        pass

    @property
    @abstractmethod
    def den(self):
        """Denominator coefficients, highest degree first."""
        pass

    @abstractmethod
    def evaluate(self, s):
        pass

    def __call__(self, s):
        return self.evaluate(s)

    @abstractmethod
    def zeros(self):
        pass

    @abstractmethod
    def poles(self):
        pass

    def degree(self):
        """Order of the denominator."""
        return len(self.den) - 1

    def is_proper(self):
        return len(self.num) <= len(self.den)

    def is_zero(self):
        return is_zero_poly(self.num)

    def to_rational(self):
        return SisoRational(self.num, self.den)

    def normalised(self):
        """Numerator and denominator scaled such that the denominator is monic."""
        lead = self.den[0]
        return self.num / lead, self.den / lead

    def isapprox(self, other, rtol=1e-8, atol=1e-12):
        other = as_siso(other)
        n1, d1 = self.normalised()
        n2, d2 = other.normalised()
        if len(d1) != len(d2):
            return False
        size = max(len(n1), len(n2))
        n1 = np.concatenate((np.zeros(size - len(n1)), n1))
        n2 = np.concatenate((np.zeros(size - len(n2)), n2))
        return np.allclose(n1, n2, rtol=rtol, atol=atol) and np.allclose(d1, d2, rtol=rtol, atol=atol)

    def __eq__(self, other):
        if np.isscalar(other):
            other = SisoRational(other)
        if not isinstance(other, SisoTf):
            return NotImplemented
        n1, d1 = self.normalised()
        n2, d2 = other.normalised()
        return np.array_equal(n1, n2) and np.array_equal(d1, d2)

    __hash__ = None

    @abstractmethod
    def __neg__(self):
        pass

    def __sub__(self, other):
        return self + (-as_siso(other))

    def __rsub__(self, other):
        return as_siso(other) + (-self)

    def __radd__(self, other):
        return as_siso(other) + self

    def __rmul__(self, other):
        return as_siso(other) * self

    def __truediv__(self, other):
        return self * as_siso(other).inverse()

    def __rtruediv__(self, other):
        return as_siso(other) * self.inverse()

    @abstractmethod
    def inverse(self):
        """Reciprocal ``1/self``, raises ``DegenerateSystem`` for the zero function."""
        pass

    @abstractmethod
    def __add__(self, other):
        pass

    @abstractmethod
    def __mul__(self, other):
        pass

    @abstractmethod
    def to_string(self, var='s', precision=4):
        """Numerator and denominator lines of the textual rendering."""
        pass


class SisoRational(SisoTf):
    """
    Rational function ``num(s)/den(s)``.

    Args:
        num (array_like): numerator coefficients, highest degree first
        den (array_like): denominator coefficients, highest degree first

    Raises:
        DegenerateSystem: if the denominator is the zero polynomial
    """

    def __init__(self, num, den=1.):
        self._num = as_coefficients(num)
        self._den = as_coefficients(den)
        if is_zero_poly(self._den):
            raise DegenerateSystem('Denominator of a transfer function cannot be zero')

    @property
    def num(self):
        return self._num

    @property
    def den(self):
        return self._den

    def evaluate(self, s):
        return evaluate_poly_ratio(self._num, self._den, s)

    def zeros(self):
        return to_zpk(self._num, self._den)[0]

    def poles(self):
        return np.roots(self._den)

    @property
    def gain(self):
        return to_zpk(self._num, self._den)[2]

    def to_zpk(self):
        return SisoZpk(*to_zpk(self._num, self._den))

    def inverse(self):
        if self.is_zero():
            raise DegenerateSystem('Cannot invert the zero transfer function')
        return SisoRational(self._den, self._num)

    def __neg__(self):
        return SisoRational(-self._num, self._den)

    def __add__(self, other):
        if np.isscalar(other):
            return SisoRational(np.polyadd(self._num, other * self._den), self._den)
        if not isinstance(other, SisoTf):
            return NotImplemented
        num = np.polyadd(np.polymul(self._num, other.den), np.polymul(other.num, self._den))
        return SisoRational(num, np.polymul(self._den, other.den))

    def __mul__(self, other):
        if np.isscalar(other):
            return SisoRational(other * self._num, self._den)
        if not isinstance(other, SisoTf):
            return NotImplemented
        return SisoRational(np.polymul(self._num, other.num), np.polymul(self._den, other.den))

    def to_string(self, var='s', precision=4):
        return poly_to_string(self._num, var, precision), poly_to_string(self._den, var, precision)

    def __repr__(self):
        return 'SisoRational({}, {})'.format(self._num.tolist(), self._den.tolist())


class SisoZpk(SisoTf):
    """
    Rational function ``k prod(s - z)/prod(s - p)``.

    Args:
        z (array_like): zeros
        p (array_like): poles
        k (float): gain
    """

    def __init__(self, z, p, k):
        z = np.atleast_1d(np.array(z, dtype=complex))
        p = np.atleast_1d(np.array(p, dtype=complex))
        if np.ndim(k) != 0:
            raise DegenerateSystem('The gain of a zero-pole-gain function must be a scalar')
        if k == 0:
            z = np.zeros(0, dtype=complex)
        if np.iscomplexobj(k) and np.imag(k) == 0:
            k = np.real(k)
        z.flags.writeable = False
        p.flags.writeable = False
        self._z = z
        self._p = p
        self._k = k
        self._num, self._den = to_rational(z, p, k)

    @property
    def z(self):
        return self._z

    @property
    def p(self):
        return self._p

    @property
    def k(self):
        return self._k

    @property
    def gain(self):
        return self._k

    @property
    def num(self):
        return self._num

    @property
    def den(self):
        return self._den

    def zeros(self):
        return self._z

    def poles(self):
        return self._p

    def evaluate(self, s):
        scalar = np.ndim(s) == 0
        s = np.atleast_1d(np.asarray(s, dtype=complex))
        n = self._k * np.prod(s[:, None] - self._z[None, :], axis=1)
        d = np.prod(s[:, None] - self._p[None, :], axis=1)

        out = np.empty(s.shape, dtype=complex)
        pole = d == 0
        out[~pole] = n[~pole] / d[~pole]
        out[pole] = np.where(n[pole] == 0, complex(np.nan, np.nan), complex(np.inf, 0.))
        if scalar:
            return complex(out[0])
        return out

    def to_zpk(self):
        return self

    def inverse(self):
        if self._k == 0:
            raise DegenerateSystem('Cannot invert the zero transfer function')
        return SisoZpk(self._p, self._z, 1. / self._k)

    def __neg__(self):
        return SisoZpk(self._z, self._p, -self._k)

    def __add__(self, other):
        if np.isscalar(other):
            other = SisoZpk([], [], other)
        if isinstance(other, SisoZpk):
            # the sum numerator has new zeros, the poles are kept
            num = np.polyadd(np.polymul(self._num, other.den), np.polymul(other.num, self._den))
            num = as_coefficients(num)
            if is_zero_poly(num):
                return SisoZpk([], np.concatenate((self._p, other.p)), 0.)
            return SisoZpk(np.roots(num), np.concatenate((self._p, other.p)), num[0])
        if isinstance(other, SisoTf):
            return self.to_rational() + other
        return NotImplemented

    def __mul__(self, other):
        if np.isscalar(other):
            return SisoZpk(self._z, self._p, self._k * other)
        if isinstance(other, SisoZpk):
            return SisoZpk(np.concatenate((self._z, other.z)), np.concatenate((self._p, other.p)),
                           self._k * other.k)
        if isinstance(other, SisoTf):
            return self.to_rational() * other
        return NotImplemented

    def to_string(self, var='s', precision=4):
        if self._k == 0:
            return '0', roots_to_string(self._p, var, precision) or '1'
        numerator = roots_to_string(self._z, var, precision)
        if self._k != 1 or not numerator:
            numerator = _format_number(self._k, precision) + numerator
        denominator = roots_to_string(self._p, var, precision) or '1'
        return numerator, denominator

    def __repr__(self):
        return 'SisoZpk({}, {}, {})'.format(self._z.tolist(), self._p.tolist(), self._k)


def as_siso(value):
    """Lifts numbers to a constant :class:`SisoRational`."""
    if isinstance(value, SisoTf):
        return value
    if isinstance(value, (int, float, complex, np.number)):
        return SisoRational([value])
    if isinstance(value, np.ndarray) and value.size == 1 and np.issubdtype(value.dtype, np.number):
        return SisoRational([value.item()])
    raise TypeError('Cannot interpret {} as a scalar transfer function'.format(type(value).__name__))


def common_kind(entries):
    """
    ``SisoZpk`` if all entries are in zero-pole-gain form, else ``SisoRational``.
    """
    if entries and all(isinstance(entry, SisoZpk) for entry in entries):
        return SisoZpk
    return SisoRational


def convert_kind(entry, kind):
    if kind is SisoZpk:
        return as_siso(entry).to_zpk()
    return as_siso(entry).to_rational() if isinstance(entry, SisoZpk) else as_siso(entry)
