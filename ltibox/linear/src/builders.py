"""
Construction of linear systems

- tf: transfer function with rational entries
- zpk: transfer function with zero-pole-gain entries
- ss: state-space model

All take the sample period ``Ts`` last (``None`` or ``0`` for continuous-time systems, ``-1`` for a discrete-time
system whose period is inherited from the systems it is combined with).
"""
import numpy as np

import ltibox.linear.src.libpoly as libpoly
import ltibox.linear.src.libss as libss
from ltibox.linear.src.conversion import to_tf, to_ss, static_gain
from ltibox.linear.src.libtf import TransferFunction
from ltibox.linear.src.lti import LTISystem
from ltibox.linear.src.timedomain import UNDEFINED_DT
from ltibox.utils.exceptions import DegenerateSystem, DimensionMismatch


def _is_nested(value, depth):
    """``True`` if ``value`` is a sequence of sequences, ``depth`` levels deep."""
    for _ in range(depth):
        if not isinstance(value, (list, tuple, np.ndarray)) or len(value) == 0:
            return False
        value = value[0]
    return True


def _variable(name, Ts):
    if name == 's':
        if Ts not in (None, 0):
            raise DegenerateSystem('The Laplace variable s is only defined for continuous-time systems')
        return TransferFunction([[libpoly.SisoRational([1., 0.])]])
    if name == 'z':
        if Ts in (None, 0):
            Ts = UNDEFINED_DT
        return TransferFunction([[libpoly.SisoRational([1., 0.])]], dt=Ts)
    raise DegenerateSystem("Unknown variable '{}', use 's' or 'z'".format(name))


def tf(*args, Ts=None):
    """
    Transfer function with rational entries.

    Usage:

        * ``tf(num, den, Ts=None)``: single input single output system with numerator and denominator coefficients,
          highest degree first. For multiple input multiple output systems ``num`` is a nested list of coefficient
          lists ``num[i][j]`` and ``den`` either a nested list or a single denominator shared by every entry.
        * ``tf(sys)``: conversion of a system.
        * ``tf(value)``: static gain, ``value`` being a number or a matrix.
        * ``tf('s')``, ``tf('z', Ts)``: Laplace and shift variables, to write expressions such as
          ``1 / (s**2 + 2 * s + 1)``.

    Examples:

        >>> G = tf([1.], [1., 2., 1.])
        >>> G.evaluate(0.)
        array([[1.+0.j]])

    Returns:
        libtf.TransferFunction
    """
    if len(args) == 3:
        if Ts is not None:
            raise TypeError('tf() got the sample period both as positional and keyword argument')
        args, Ts = args[:2], args[2]

    if len(args) == 1:
        arg = args[0]
        if isinstance(arg, LTISystem):
            return to_tf(arg, kind=libpoly.SisoRational)
        if isinstance(arg, str):
            return _variable(arg, Ts)
        return static_gain(arg, TransferFunction, Ts)

    if len(args) == 2 and isinstance(args[0], str):
        return _variable(args[0], args[1])

    if len(args) != 2:
        raise TypeError('tf() takes 1 to 3 positional arguments but {:g} were given'.format(len(args)))

    num, den = args
    if not _is_nested(num, 2):
        return TransferFunction([[libpoly.SisoRational(num, den)]], dt=Ts)

    ny, nu = len(num), len(num[0])
    shared = not _is_nested(den, 2)
    matrix = []
    for i in range(ny):
        if len(num[i]) != nu:
            raise DimensionMismatch('Row {:g} of the numerator has {:g} entries, expected {:g}'.format(
                i, len(num[i]), nu))
        matrix.append([libpoly.SisoRational(num[i][j], den if shared else den[i][j]) for j in range(nu)])
    return TransferFunction(matrix, dt=Ts)


def zpk(*args, Ts=None):
    """
    Transfer function with zero-pole-gain entries.

    Usage:

        * ``zpk(z, p, k, Ts=None)``: single input single output system with zeros ``z``, poles ``p`` and gain ``k``.
          For multiple input multiple output systems ``z`` and ``p`` are nested lists ``z[i][j]`` and ``k`` a
          ``(ny, nu)`` array.
        * ``zpk(sys)``: conversion of a system.

    Returns:
        libtf.TransferFunction
    """
    if len(args) == 4:
        if Ts is not None:
            raise TypeError('zpk() got the sample period both as positional and keyword argument')
        args, Ts = args[:3], args[3]

    if len(args) == 1:
        arg = args[0]
        if isinstance(arg, LTISystem):
            return to_tf(arg, kind=libpoly.SisoZpk)
        return to_tf(static_gain(arg, TransferFunction, Ts), kind=libpoly.SisoZpk)

    if len(args) != 3:
        raise TypeError('zpk() takes 1, 3 or 4 positional arguments but {:g} were given'.format(len(args)))

    z, p, k = args
    if np.ndim(k) == 0:
        return TransferFunction([[libpoly.SisoZpk(z, p, k)]], dt=Ts)

    k = np.atleast_2d(k)
    ny, nu = k.shape
    if not (_is_nested(z, 1) and len(z) == ny and _is_nested(p, 1) and len(p) == ny):
        raise DimensionMismatch('Zeros and poles must be nested lists with {:g} rows, as the gain'.format(ny))
    matrix = [[libpoly.SisoZpk(z[i][j], p[i][j], k[i, j]) for j in range(nu)] for i in range(ny)]
    return TransferFunction(matrix, dt=Ts)


def ss(*args, Ts=None):
    """
    State-space model.

    Usage:

        * ``ss(A, B, C, D, Ts=None)``: state-space realisation
        * ``ss(D, Ts=None)``: static gain
        * ``ss(sys)``: realisation of a system

    Returns:
        libss.StateSpace
    """
    if len(args) == 5 or len(args) == 2:
        if Ts is not None:
            raise TypeError('ss() got the sample period both as positional and keyword argument')
        args, Ts = args[:-1], args[-1]

    if len(args) == 4:
        return libss.StateSpace(*args, dt=Ts)

    if len(args) == 1:
        arg = args[0]
        if isinstance(arg, LTISystem):
            return to_ss(arg)
        return static_gain(arg, libss.StateSpace, Ts)

    raise TypeError('ss() takes 1, 2, 4 or 5 positional arguments but {:g} were given'.format(len(args)))
