"""
Conversion between state-space and transfer function models, and promotion of mixed operands

Methods:
- ss2tf: transfer function matrix of a state-space model (determinant formula)
- tf2ss: controllable canonical realisation of a transfer function matrix
- promote: common representation and time domain of a group of operands
- static_gain: number or matrix lifted to a system without states
- to_ss, to_tf: conversion to a given representation, no-op if already there

Neither conversion cancels common factors, nor does tf2ss look for a minimal realisation.
"""
import logging
import numpy as np

import ltibox.linear.src.libpoly as libpoly
import ltibox.linear.src.libsparse as libsp
import ltibox.linear.src.libss as libss
import ltibox.utils.cout_utils as cout
from ltibox.linear.src.libtf import TransferFunction
from ltibox.linear.src.lti import LTISystem
from ltibox.linear.src.timedomain import common_timedomain, TimeDomain
from ltibox.linear.utils.options import get_option
from ltibox.utils.exceptions import DegenerateSystem, SamplingTimeMismatch, IncompatibleTimeDomain, \
    UnsupportedBroadcast

logger = logging.getLogger(__name__)


def _trim_leading(num, scale, rtol):
    nonzero = np.flatnonzero(np.abs(num) > rtol * scale)
    if nonzero.size == 0:
        return np.zeros(1)
    return num[nonzero[0]:]


def ss2tf(sys):
    r"""
    Transfer function matrix of a state-space model.

    Each entry is obtained from the determinant identity

    .. math::
        c_i (sI - A)^{-1} b_j + d_{ij} = \frac{\det(sI - A + b_j c_i) + (d_{ij} - 1)\det(sI - A)}{\det(sI - A)}

    so that all entries share the denominator :math:`\det(sI - A)`. Numerator leading coefficients below
    ``coefficient_rtol``, relative to the largest coefficient of the entry, are rounding residuals and are dropped.

    Args:
        sys (libss.StateSpace): state-space model

    Returns:
        libtf.TransferFunction: transfer function with the same inputs, outputs and time domain
    """
    A, B, C, D = [libsp.dense(mat) for mat in sys.get_mats()]
    rtol = get_option('coefficient_rtol')

    den = np.atleast_1d(np.poly(A)) if sys.states > 0 else np.ones(1)
    out = np.empty(sys.shape, dtype=object)
    for i in range(sys.outputs):
        for j in range(sys.inputs):
            if sys.states == 0:
                num = np.array([D[i, j]])
            else:
                num = np.poly(A - np.outer(B[:, j], C[i, :])) + (D[i, j] - 1.) * den
                scale = max(np.max(np.abs(num)), np.max(np.abs(den)))
                num = _trim_leading(num, scale, rtol)
            out[i, j] = libpoly.SisoRational(num, den)

    tf = TransferFunction(out, dt=sys.timedomain)
    if get_option('rational_form') == 'zpk':
        tf = tf.to_kind(libpoly.SisoZpk)

    logger.debug('State-space to transfer function: {:g} states, shape {}'.format(sys.states, sys.shape))
    if get_option('print_info'):
        cout.cout_wrap('Converted {:g} state system to a {:g}x{:g} transfer function'.format(
            sys.states, sys.outputs, sys.inputs), 1)
    return tf


def siso_realisation(entry):
    r"""
    Controllable canonical form of a proper scalar rational function :math:`b(s)/a(s)`, with :math:`a` monic of
    degree :math:`n`:

    .. math::
        A = \begin{bmatrix} -a_1 & \cdots & -a_{n-1} & -a_n \\ 1 & & & 0 \\ & \ddots & & \vdots \\ & & 1 & 0
        \end{bmatrix}, \quad B = e_1, \quad C = b_{1:n} - b_0 a_{1:n}, \quad D = b_0

    Zero entries are realised without states.

    Returns:
        tuple: ``(A, B, C, D)``

    Raises:
        DegenerateSystem: if the entry is improper.
    """
    if not entry.is_proper():
        raise DegenerateSystem('Improper transfer function (numerator degree {:g} > denominator degree {:g}) '
                               'has no state-space realisation'.format(len(entry.num) - 1, len(entry.den) - 1))
    if entry.is_zero():
        return np.zeros((0, 0)), np.zeros((0, 1)), np.zeros((1, 0)), np.zeros((1, 1))

    num, den = entry.normalised()
    n = len(den) - 1
    num = np.concatenate((np.zeros(n + 1 - len(num), dtype=num.dtype), num))

    A = np.zeros((n, n), dtype=den.dtype)
    if n > 0:
        A[0, :] = -den[1:]
        A[1:, :-1] = np.eye(n - 1)
    B = np.zeros((n, 1))
    if n > 0:
        B[0, 0] = 1.
    C = (num[1:] - num[0] * den[1:]).reshape((1, n))
    D = np.array([[num[0]]])

    return A, B, C, D


def tf2ss(sys):
    """
    State-space realisation of a transfer function matrix.

    Every entry is realised in controllable canonical form. The entries of an input column share that input and
    are stacked with :func:`libss.vcat`, then the columns are joined with :func:`libss.hcat`. The number of states
    is the sum of the entry degrees, the realisation is not minimal in general.

    Args:
        sys (libtf.TransferFunction): transfer function

    Returns:
        libss.StateSpace: state-space model with the same inputs, outputs and time domain

    Raises:
        DegenerateSystem: if any entry is improper.
    """
    columns = []
    for j in range(sys.inputs):
        column = [libss.StateSpace(*siso_realisation(sys.matrix[i, j]), dt=sys.timedomain)
                  for i in range(sys.outputs)]
        columns.append(libss.vcat(column))
    ss = libss.hcat(columns)

    logger.debug('Transfer function to state-space: shape {}, {:g} states'.format(sys.shape, ss.states))
    if get_option('print_info'):
        cout.cout_wrap('Realised {:g}x{:g} transfer function with {:g} states'.format(
            sys.outputs, sys.inputs, ss.states), 1)
    return ss


def to_ss(sys):
    if isinstance(sys, libss.StateSpace):
        return sys
    return tf2ss(sys)


def to_tf(sys, kind=None):
    """
    Transfer function of ``sys``. If ``kind`` is given, the entries are converted to that scalar form.
    """
    if not isinstance(sys, TransferFunction):
        sys = ss2tf(sys)
    if kind is not None and sys.kind is not kind:
        sys = sys.to_kind(kind)
    return sys


def retag(sys, timedomain):
    """System with the time domain replaced, used to finalise the undefined sample period."""
    if sys.timedomain == timedomain:
        return sys
    if isinstance(sys, libss.StateSpace):
        return libss.StateSpace(*sys.get_mats(), dt=timedomain)
    return TransferFunction(sys.matrix, dt=timedomain)


def as_gain_matrix(value):
    """
    2D array of a number or a matrix.

    Raises:
        UnsupportedBroadcast: if ``value`` is not numeric.
    """
    if libsp.is_sparse(value):
        return libsp.dense(value)
    try:
        gain = np.array(value)
    except (TypeError, ValueError) as err:
        raise UnsupportedBroadcast('Cannot use {} as a gain: {}'.format(type(value).__name__, err))
    if gain.dtype == object or not np.issubdtype(gain.dtype, np.number):
        raise UnsupportedBroadcast('Cannot combine a system with an operand of type {}'.format(
            type(value).__name__))
    if gain.ndim > 2:
        raise UnsupportedBroadcast('Gains must have at most 2 dimensions, got shape {}'.format(gain.shape))
    return np.atleast_2d(gain) if gain.ndim < 2 else gain


def static_gain(value, target, timedomain=None):
    """
    Number or matrix as a system without states.

    Args:
        value (float or np.ndarray): gain. A 1D array is taken as a column.
        target (type): ``libss.StateSpace`` or ``libtf.TransferFunction``
        timedomain (TimeDomain (optional)): time domain of the gain, continuous if not given

    Returns:
        LTISystem: static gain of the ``target`` type
    """
    gain = as_gain_matrix(value)
    if np.ndim(value) == 1:
        gain = gain.T
    if target is TransferFunction:
        return TransferFunction(gain.tolist(), dt=timedomain)
    return libss.static_ss(gain, dt=timedomain)


def common_representation(operands):
    """
    Representation and finalised time domain shared by the systems among ``operands``.

    Returns:
        tuple: ``(target, timedomain)``, ``target`` being :class:`libtf.TransferFunction` if any system is one and
        :class:`libss.StateSpace` otherwise.

    Raises:
        IncompatibleTimeDomain: if the time domains of the systems differ.
        UnsupportedBroadcast: if no operand is a system.
    """
    systems = [op for op in operands if isinstance(op, LTISystem)]
    if not systems:
        raise UnsupportedBroadcast('At least one operand must be a linear system')

    target = TransferFunction if any(isinstance(sys, TransferFunction) for sys in systems) else libss.StateSpace
    try:
        timedomain = common_timedomain(*[sys.timedomain for sys in systems])
    except SamplingTimeMismatch as err:
        raise IncompatibleTimeDomain(str(err))
    return target, timedomain


def promote(*operands):
    """
    Converts a group of operands to a common representation and time domain.

    The representation is :class:`libtf.TransferFunction` if any operand is one, :class:`libss.StateSpace`
    otherwise. Numbers and matrices become static gains of that representation. The undefined sample period is
    resolved to the period of the other operands.

    Returns:
        list: promoted operands, in order

    Raises:
        IncompatibleTimeDomain: if the time domains of the systems differ.
        UnsupportedBroadcast: if no operand is a system or an operand is not numeric.
    """
    target, timedomain = common_representation(operands)

    promoted = []
    for op in operands:
        if isinstance(op, LTISystem):
            sys = to_tf(op) if target is TransferFunction else op
            promoted.append(retag(sys, timedomain))
        elif isinstance(op, TimeDomain):
            raise UnsupportedBroadcast('Time domains are not operands, pass them as dt')
        else:
            promoted.append(static_gain(op, target, timedomain))
    return promoted
