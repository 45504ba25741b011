"""
Interconnection of linear systems

Methods:
- series: ``sys2 * sys1``, the outputs of ``sys1`` feed the inputs of ``sys2``
- parallel: ``sys1 + sys2``
- feedback: closed loop of a forward and a return path
- append: block diagonal system with disjoint inputs and outputs
- hcat, vcat: horizontal (shared outputs) and vertical (shared inputs) concatenation
- sysblock: block matrix of systems, numbers and matrices
- diagonal_expand, array2mimo: multiple input multiple output systems from single input single output ones
- sensitivity, comp_sensitivity, gangoffour and the input and output variants: loop transfer functions of a plant
  and a controller
- feedback2dof: closed loop of a plant with a two degrees of freedom polynomial controller
- starprod, lft: Redheffer star product and linear fractional transformations
- add, negate, multiply, divide: arithmetic behind the operators of the system classes

Operands are promoted to a common representation (see :func:`conversion.promote`). A single input single output
system combined with a multiple input multiple output operand is first expanded to a diagonal system. Numbers
broadcast over every entry of a system; arrays combined with a single input single output system must be diagonal.
"""
import logging
import numpy as np

import ltibox.linear.src.libpoly as libpoly
import ltibox.linear.src.libss as libss
import ltibox.linear.src.libsparse as libsp
from ltibox.linear.src.conversion import promote, common_representation, as_gain_matrix, static_gain, tf2ss, ss2tf, \
    to_tf
from ltibox.linear.src.libtf import TransferFunction
from ltibox.linear.src.lti import LTISystem
from ltibox.linear.utils import compatibility
from ltibox.utils.exceptions import DimensionMismatch, UnsupportedBroadcast

logger = logging.getLogger(__name__)


# --------------------------------------------------------------- Broadcasting

def _scalar_value(value):
    """The number held by ``value`` if it is a number or a single element array, else ``None``."""
    if isinstance(value, LTISystem) or libsp.is_sparse(value):
        return None
    if np.isscalar(value):
        if not isinstance(value, (int, float, complex, np.number)):
            raise UnsupportedBroadcast('Cannot combine a system with an operand of type {}'.format(
                type(value).__name__))
        return value
    gain = as_gain_matrix(value)
    if gain.size == 1:
        return gain.item()
    return None


def _diagonal_gain(value):
    gain = as_gain_matrix(value)
    off_diagonal = gain[~np.eye(*gain.shape, dtype=bool)]
    if np.any(off_diagonal):
        raise UnsupportedBroadcast('Only diagonal arrays can be broadcast against a single input single output '
                                   'system, got\n{}'.format(gain))
    return gain


def _split_operands(left, right):
    if isinstance(left, LTISystem):
        return left, right, True
    if isinstance(right, LTISystem):
        return right, left, False
    raise UnsupportedBroadcast('At least one operand must be a linear system, got {} and {}'.format(
        type(left).__name__, type(right).__name__))


def _zero_entry(kind):
    if kind is libpoly.SisoZpk:
        return libpoly.SisoZpk([], [], 0.)
    return libpoly.SisoRational(0.)


def diagonal_expand(sys, ny, nu):
    """
    Expands a single input single output system to a ``(ny, nu)`` system with ``sys`` on the diagonal and the zero
    system elsewhere.

    Args:
        sys (LTISystem): single input single output system
        ny (int): number of outputs of the expanded system
        nu (int): number of inputs of the expanded system

    Returns:
        LTISystem: expanded system, of the same representation as ``sys``
    """
    if not sys.is_siso:
        raise DimensionMismatch('Only single input single output systems can be expanded, '
                                'got shape {}'.format(sys.shape))
    if ny < 1 or nu < 1:
        raise DimensionMismatch('Expanded system needs at least one input and one output, '
                                'got shape {}'.format((ny, nu)))
    ndiag = min(ny, nu)

    if isinstance(sys, TransferFunction):
        entry = sys.matrix[0, 0]
        zero = _zero_entry(sys.kind)
        out = np.empty((ny, nu), dtype=object)
        for i in range(ny):
            for j in range(nu):
                out[i, j] = entry if i == j else zero
        return TransferFunction(out, dt=sys.timedomain)

    diag = libss.join([sys] * ndiag)
    A, B, C, D = [libsp.dense(mat) for mat in diag.get_mats()]
    Bexp = np.zeros((diag.states, nu), dtype=B.dtype)
    Bexp[:, :ndiag] = B
    Cexp = np.zeros((ny, diag.states), dtype=C.dtype)
    Cexp[:ndiag, :] = C
    Dexp = np.zeros((ny, nu), dtype=D.dtype)
    Dexp[:ndiag, :ndiag] = D
    return libss.StateSpace(A, Bexp, Cexp, Dexp, dt=sys.timedomain)


# ------------------------------------------------------------------ Arithmetic

def negate(value):
    if isinstance(value, LTISystem):
        return -value
    if np.isscalar(value):
        return -value
    return -as_gain_matrix(value)


def add(left, right):
    """
    Sum of two operands, at least one of which is a system.

    Numbers are added to every entry of the system. A single input single output system is expanded diagonally to
    the shape of the other operand, which must be diagonal if it is an array.
    """
    if isinstance(left, LTISystem) and isinstance(right, LTISystem):
        if left.is_siso and not right.is_siso:
            left = diagonal_expand(left, *right.shape)
        elif right.is_siso and not left.is_siso:
            right = diagonal_expand(right, *left.shape)
    else:
        sys, other, sys_first = _split_operands(left, right)
        value = _scalar_value(other)
        if value is not None:
            other = np.full(sys.shape, value)
        elif sys.is_siso:
            other = _diagonal_gain(other)
            sys = diagonal_expand(sys, *other.shape)
        else:
            other = as_gain_matrix(other)
        left, right = (sys, other) if sys_first else (other, sys)

    left, right = promote(left, right)
    return left._add_same(right)


def multiply(left, right):
    """
    Product of two operands, at least one of which is a system. For systems, ``left * right`` is the series
    connection of ``right`` followed by ``left``.

    Numbers scale every entry of the system. A single input single output system is expanded diagonally to the size
    that makes the product defined, so that ``G * M`` equals ``append(G, ..., G) * M``.
    """
    if isinstance(left, LTISystem) and isinstance(right, LTISystem):
        if left.is_siso and not right.is_siso:
            left = diagonal_expand(left, right.ny, right.ny)
        elif right.is_siso and not left.is_siso:
            right = diagonal_expand(right, left.nu, left.nu)
        left, right = promote(left, right)
        return left._mul_same(right)

    sys, other, sys_first = _split_operands(left, right)
    value = _scalar_value(other)
    if value is not None:
        return sys.scale(value)

    if sys.is_siso:
        gain = _diagonal_gain(other)
        size = gain.shape[0] if sys_first else gain.shape[1]
        sys = diagonal_expand(sys, size, size)
    else:
        gain = as_gain_matrix(other)

    if isinstance(sys, libss.StateSpace):
        return libss.addGain(sys, gain, 'in' if sys_first else 'out')
    left, right = promote(sys, gain) if sys_first else promote(gain, sys)
    return left._mul_same(right)


def divide(left, right):
    """
    ``left / right``. A system can be divided by a number, or by a system that can be inverted.
    """
    if isinstance(right, LTISystem):
        return multiply(left, right.inverse())

    value = _scalar_value(right)
    if value is None:
        raise UnsupportedBroadcast('Division of a system by a matrix is not supported, '
                                   'multiply by its inverse instead')
    return left.scale(1. / value)


# -------------------------------------------------------------- Interconnection

def series(sys1, sys2):
    """
    Series connection ``u -> sys1 -> sys2 -> y``, i.e. ``sys2 * sys1``.
    """
    return sys2 * sys1


def parallel(sys1, sys2):
    """
    Parallel connection ``y = sys1 u + sys2 u``, i.e. ``sys1 + sys2``.
    """
    return sys1 + sys2


def _block_diag_tf(systems, timedomain):
    kind = libpoly.common_kind([entry for sys in systems for entry in sys.matrix.flat])
    out = np.empty((sum(sys.ny for sys in systems), sum(sys.nu for sys in systems)), dtype=object)
    out.fill(_zero_entry(kind))
    row, col = 0, 0
    for sys in systems:
        out[row:row + sys.ny, col:col + sys.nu] = sys.matrix
        row += sys.ny
        col += sys.nu
    return TransferFunction(out, dt=timedomain)


def _prepare(operands, operation):
    if len(operands) == 0:
        raise DimensionMismatch('{:s} requires at least one system'.format(operation))
    return promote(*operands)


def append(*systems):
    """
    Block diagonal system: the inputs and outputs of the systems are disjoint and concatenated in order.

    .. math::
        \\mathsf{append}(G_1, \\ldots, G_k) = \\mathrm{diag}(G_1, \\ldots, G_k)
    """
    systems = _prepare(systems, 'append')
    timedomain = compatibility.check_systems(systems, operation='append')
    logger.debug('Appending {:g} systems'.format(len(systems)))
    if isinstance(systems[0], TransferFunction):
        return _block_diag_tf(systems, timedomain)
    return libss.join(systems)


def hcat(*systems):
    """
    Horizontal concatenation ``[G_1, ..., G_k]`` of systems with the same number of outputs.
    """
    systems = _prepare(systems, 'horizontal concatenation')
    timedomain = compatibility.check_systems(systems, compatibility.same_outputs,
                                             operation='horizontal concatenation')
    if isinstance(systems[0], TransferFunction):
        return TransferFunction(np.hstack([sys.matrix for sys in systems]), dt=timedomain)
    return libss.hcat(systems)


def vcat(*systems):
    """
    Vertical concatenation ``[G_1; ...; G_k]`` of systems with the same number of inputs.
    """
    systems = _prepare(systems, 'vertical concatenation')
    timedomain = compatibility.check_systems(systems, compatibility.same_inputs,
                                             operation='vertical concatenation')
    if isinstance(systems[0], TransferFunction):
        return TransferFunction(np.vstack([sys.matrix for sys in systems]), dt=timedomain)
    return libss.vcat(systems)


def _block_shape(item):
    if isinstance(item, LTISystem):
        return item.shape
    if np.isscalar(item):
        return None
    gain = as_gain_matrix(item)
    return gain.shape if np.ndim(item) != 1 else gain.T.shape


def sysblock(rows):
    """
    Block matrix of systems, numbers and matrices.

    Each row is concatenated with :func:`hcat` and the rows are then stacked with :func:`vcat`. Numbers and matrices
    become static gains of the representation and time domain of the systems. A number fills a block as large as
    the other blocks of its row (outputs) and column (inputs) require, or a single entry if these are not defined.

    Examples:

        >>> G = tf([1.], [1., 1.])
        >>> sysblock([[G, 0], [0, G]]) == append(G, G)
        True

    Args:
        rows (list): list of rows, each being a list of blocks. A block not enclosed in a list is a single row.

    Returns:
        LTISystem or np.ndarray: the block system, or the block matrix if no block is a system.
    """
    rows = [list(row) if isinstance(row, (list, tuple)) else [row] for row in rows]
    if not any(isinstance(item, LTISystem) for row in rows for item in row):
        return np.block(rows)

    target, timedomain = common_representation([item for row in rows for item in row])
    shapes = [[_block_shape(item) for item in row] for row in rows]
    aligned = len(set(len(row) for row in rows)) == 1

    lowered = []
    for irow, row in enumerate(rows):
        row_ny = [shape[0] for shape in shapes[irow] if shape is not None]
        blocks = []
        for icol, item in enumerate(row):
            if shapes[irow][icol] is None:
                col_nu = [shapes[jrow][icol][1] for jrow in range(len(rows))
                          if aligned and shapes[jrow][icol] is not None]
                ny = row_ny[0] if row_ny else 1
                nu = col_nu[0] if col_nu else 1
                item = np.full((ny, nu), item)
            if not isinstance(item, LTISystem):
                # rows without systems still need the representation and time domain of the block
                item = static_gain(item, target, timedomain)
            blocks.append(item)
        lowered.append(hcat(*blocks))

    return vcat(*lowered)


def array2mimo(array):
    """
    Multiple input multiple output system from a 2D array of single input single output systems (or numbers).
    Entry ``[i][j]`` maps input ``j`` to output ``i``.
    """
    rows = [list(row) for row in array]
    for row in rows:
        for item in row:
            if isinstance(item, LTISystem) and not item.is_siso:
                raise DimensionMismatch('Only single input single output systems can be assembled, '
                                        'got shape {}'.format(item.shape))
            if not isinstance(item, LTISystem) and not np.isscalar(item):
                raise UnsupportedBroadcast('Entries must be systems or numbers, got {}'.format(type(item).__name__))
    return sysblock(rows)


# ---------------------------------------------------------------------- Loops

def feedback(P, K=None, sign=-1):
    """
    Closed loop of the forward path ``P`` and the return path ``K``, unity feedback if ``K`` is not given.

    .. math::
        y = P u, \\quad u = r + \\mathrm{sign}\\, K y \\quad \\Longrightarrow \\quad y = (I - \\mathrm{sign}\\,
        P K)^{-1} P r

    The loop is closed on the state-space matrices; transfer functions are realised, closed and converted back.

    Args:
        P (LTISystem): forward path
        K (LTISystem or np.ndarray (optional)): return path, defaults to the identity
        sign (int): ``-1`` for negative feedback, ``+1`` for positive feedback

    Raises:
        SingularClosedLoop: if the feedthrough term of the loop cannot be inverted.
    """
    if K is None:
        if not isinstance(P, LTISystem):
            raise UnsupportedBroadcast('The forward path of a unity feedback loop must be a system')
        K = np.eye(P.nu, P.ny)
    P, K = promote(P, K)

    if isinstance(P, TransferFunction):
        closed = libss.feedback(tf2ss(P), tf2ss(K), sign=sign)
        return to_tf(ss2tf(closed), kind=P.kind)
    return libss.feedback(P, K, sign=sign)


def sensitivity(P, C):
    """
    Sensitivity function :math:`S = (I + PC)^{-1}` of the loop of plant ``P`` and controller ``C``.
    """
    loop = P * C
    return feedback(np.eye(loop.ny), loop)


def comp_sensitivity(P, C):
    """
    Complementary sensitivity function :math:`T = PC(I + PC)^{-1}` of the loop of plant ``P`` and controller ``C``.
    """
    return feedback(P * C)


def input_sensitivity(P, C):
    """
    Sensitivity function at the plant input, :math:`S_i = (I + CP)^{-1}`.
    """
    loop = C * P
    return feedback(np.eye(loop.ny), loop)


def input_comp_sensitivity(P, C):
    """
    Complementary sensitivity function at the plant input, :math:`T_i = CP(I + CP)^{-1}`.
    """
    return feedback(C * P)


output_sensitivity = sensitivity
output_comp_sensitivity = comp_sensitivity


def G_PS(P, C):
    """
    Load disturbance to output, :math:`P(I + CP)^{-1}`.
    """
    return feedback(P, C)


def G_CS(P, C):
    """
    Measurement noise to control signal, :math:`C(I + PC)^{-1}`.
    """
    return feedback(C, P)


def gangoffour(P, C):
    """
    The four transfer functions of a single input single output loop.

    Returns:
        tuple: ``(S, PS, CS, T)``, sensitivity, load disturbance to output, noise to control signal and complementary
        sensitivity.
    """
    if not (P.is_siso and C.is_siso):
        raise DimensionMismatch('gangoffour is defined for single input single output systems, '
                                'got shapes {} and {}'.format(P.shape, C.shape))
    return sensitivity(P, C), G_PS(P, C), G_CS(P, C), comp_sensitivity(P, C)


def feedback2dof(P, R, S, T):
    r"""
    Closed loop of a single input single output plant :math:`P = B/A` with the two degrees of freedom controller
    :math:`R u = T r - S y`:

    .. math::
        \frac{y}{r} = \frac{BT}{AR + BS}

    Args:
        P (LTISystem): plant
        R (array_like): controller polynomial acting on ``u``, highest degree first
        S (array_like): controller polynomial acting on ``y``
        T (array_like): controller polynomial acting on ``r``

    Returns:
        TransferFunction: closed loop, in the time domain of ``P``
    """
    if not isinstance(P, LTISystem):
        raise UnsupportedBroadcast('The plant of a two degrees of freedom loop must be a system')
    if not P.is_siso:
        raise DimensionMismatch('feedback2dof is defined for single input single output plants, '
                                'got shape {}'.format(P.shape))
    entry = to_tf(P, kind=libpoly.SisoRational).matrix[0, 0]
    B, A = entry.num, entry.den
    R, S, T = [libpoly.as_coefficients(poly) for poly in (R, S, T)]

    num = np.polymul(B, T)
    den = np.polyadd(np.polymul(A, R), np.polymul(B, S))
    return TransferFunction(libpoly.SisoRational(num, den), dt=P.timedomain)


def starprod(sys1, sys2, dimu, dimy):
    """
    Redheffer star product.

    ``sys1`` has inputs ``(u1, U1)`` and outputs ``(y1, Y1)``, ``sys2`` has inputs ``(U2, u2)`` and outputs
    ``(Y2, y2)``, with ``len(U1) = len(Y2) = dimu`` and ``len(Y1) = len(U2) = dimy``. The loops ``U1 = Y2`` and
    ``U2 = Y1`` are closed with :func:`libss.couple` and the result maps ``(u1, u2)`` to ``(y1, y2)``.

    Raises:
        DimensionMismatch: if the connected channels do not fit in the systems.
        SingularClosedLoop: if the algebraic loop cannot be solved.
    """
    sys1, sys2 = promote(sys1, sys2)
    if not (0 <= dimu <= min(sys1.nu, sys2.ny) and 0 <= dimy <= min(sys1.ny, sys2.nu)):
        raise DimensionMismatch('Cannot connect {:g} inputs and {:g} outputs between systems of shapes {} and '
                                '{}'.format(dimu, dimy, sys1.shape, sys2.shape))

    if isinstance(sys1, TransferFunction):
        ss1, ss2 = tf2ss(sys1), tf2ss(sys2)
    else:
        ss1, ss2 = sys1, sys2

    K12 = np.zeros((ss1.nu, ss2.ny))
    K12[ss1.nu - dimu:, :dimu] = np.eye(dimu)
    K21 = np.zeros((ss2.nu, ss1.ny))
    K21[:dimy, ss1.ny - dimy:] = np.eye(dimy)
    coupled = libss.couple(ss1, ss2, K12, K21)

    inputs = np.concatenate((np.arange(ss1.nu - dimu), ss1.nu + np.arange(dimy, ss2.nu)))
    outputs = np.concatenate((np.arange(ss1.ny - dimy), ss1.ny + np.arange(dimu, ss2.ny)))
    if inputs.size == 0 or outputs.size == 0:
        raise DimensionMismatch('The star product leaves no external inputs or outputs')
    closed = coupled[outputs, inputs]
    logger.debug('Star product: {:g} states, shape {}'.format(closed.states, closed.shape))

    if isinstance(sys1, TransferFunction):
        return to_tf(ss2tf(closed), kind=sys1.kind)
    return closed


def lft(G, Delta, type='l'):
    r"""
    Linear fractional transformation of ``G`` by ``Delta``, with ``G`` partitioned as
    :math:`\begin{bmatrix} G_{11} & G_{12} \\ G_{21} & G_{22} \end{bmatrix}` conformably with ``Delta``.

    .. math::
        F_l = G_{11} + G_{12} \Delta (I - G_{22} \Delta)^{-1} G_{21} \\
        F_u = G_{22} + G_{21} \Delta (I - G_{11} \Delta)^{-1} G_{12}

    Args:
        G (LTISystem): partitioned system
        Delta (LTISystem or np.ndarray): system closing the lower (``type='l'``) or upper (``type='u'``) channels
        type (str): ``'l'`` or ``'u'``
    """
    if type not in ['l', 'u']:
        raise NameError('Linear fractional transformation type must be l (lower) or u (upper), got {}'.format(type))
    G, Delta = promote(G, Delta)
    if not (G.ny > Delta.nu and G.nu > Delta.ny):
        raise DimensionMismatch('Delta of shape {} does not leave any external channel of G of shape {}'.format(
            Delta.shape, G.shape))

    if type == 'l':
        return starprod(G, Delta, Delta.ny, Delta.nu)
    return starprod(Delta, G, Delta.nu, Delta.ny)
