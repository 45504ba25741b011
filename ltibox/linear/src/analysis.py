"""
Data extraction from linear systems

Functions producing arrays out of a system, whatever its representation. These are the quantities consumed by
simulation and plotting tools.
"""
import numpy as np

import ltibox.linear.src.libpoly as libpoly
import ltibox.linear.src.libss as libss
import ltibox.linear.src.libsparse as libsp
from ltibox.linear.src.conversion import to_ss, to_tf


def evalfr(sys, s):
    """
    Transfer function matrix of ``sys`` at the complex frequency ``s``. Entries with a pole at ``s`` are ``inf``.

    Returns:
        np.ndarray: ``(ny, nu)`` complex array
    """
    return sys.evaluate(s)


def freqresp(sys, w):
    r"""
    Frequency response over the angular frequencies ``w``, evaluated at :math:`s = j\omega` for continuous-time
    systems and at :math:`z = e^{j\omega\Delta t}` for discrete-time systems.

    Returns:
        np.ndarray: ``(ny, nu, len(w))`` complex array
    """
    if isinstance(sys, libss.StateSpace):
        return libss.freqresp(sys, w)

    w = np.atleast_1d(w)
    if sys.is_discrete:
        points = np.exp(1j * w * sys.dt)
    else:
        points = 1j * w
    out = np.empty((sys.ny, sys.nu, len(w)), dtype=complex)
    for i, j, entry in sys.entries():
        out[i, j, :] = entry.evaluate(points)
    return out


def dcgain(sys):
    """
    Steady state gain, i.e. the transfer function at ``s = 0`` or ``z = 1``.
    """
    gain = sys.evaluate(1. if sys.is_discrete else 0.)
    if not np.any(np.imag(gain)):
        gain = np.real(gain)
    return gain


def poles(sys):
    """
    Poles of the system: eigenvalues of ``A`` for a state-space model, roots of the entry denominators for a
    transfer function. Common factors are not cancelled.
    """
    if isinstance(sys, libss.StateSpace):
        return np.linalg.eigvals(libsp.dense(sys.A))
    roots = [entry.poles() for _, _, entry in sys.entries() if not entry.is_zero()]
    if not roots:
        return np.zeros(0, dtype=complex)
    return np.concatenate(roots)


def isstable(sys):
    p = poles(sys)
    if sys.is_discrete:
        return bool(np.all(np.abs(p) < 1.))
    return bool(np.all(np.real(p) < 0.))


def zpkdata(sys):
    """
    Zeros, poles and gains of every entry of the transfer function of ``sys``.

    Returns:
        tuple: ``(z, p, k)`` with ``z[i][j]`` and ``p[i][j]`` the zeros and poles of entry ``(i, j)`` and ``k`` a
        ``(ny, nu)`` array of gains.
    """
    tf = to_tf(sys, kind=libpoly.SisoZpk)
    z = [[tf.matrix[i, j].z for j in range(tf.nu)] for i in range(tf.ny)]
    p = [[tf.matrix[i, j].p for j in range(tf.nu)] for i in range(tf.ny)]
    k = np.array([[tf.matrix[i, j].k for j in range(tf.nu)] for i in range(tf.ny)])
    return z, p, k


def ssdata(sys):
    """
    Dense ``(A, B, C, D)`` of a state-space realisation of ``sys``.
    """
    return tuple(libsp.dense(mat) for mat in to_ss(sys).get_mats())


def numvec(sys):
    return to_tf(sys).numvec()


def denvec(sys):
    return to_tf(sys).denvec()


def isproper(sys):
    if isinstance(sys, libss.StateSpace):
        return True
    return sys.is_proper()


def iscontinuous(sys):
    return sys.is_continuous


def isdiscrete(sys):
    return sys.is_discrete
