"""
Linear Time Invariant systems in state-space form

Library of methods to build/manipulate state-space models. The module supports
the sparse arrays types defined in libsparse.

The module includes:

Classes:
- StateSpace: immutable continuous or discrete-time state-space model with full
	and/or sparse matrices. Operators (+, -, *, /) are resolved by the
	connections module.

Methods for state-space manipulation:
- couple: feedback coupling of two systems through gains.
- feedback: closed loop of a forward and a return path.
- freqresp: calculate frequency response.
- series: series connection between systems
- sum_ss: sum (parallel connection) of systems with the same inputs and outputs
- join2: merge two state-space models into one (block diagonal).
- join: merge a list of state-space models into one (block diagonal).
- hcat: horizontal concatenation (shared outputs).
- vcat: vertical concatenation (shared inputs).
- addGain: add gains to state-space model.
- static_ss: state-space model of a static gain

Utilities:
- eigvals: ordered eigenvalues
- random_ss: random system
- compare_ss: assert matrices of two state-space models are identical

Comments:
- every method returns a new model, models are never modified in place.
"""

import logging
import numpy as np
import scipy.signal as scsig

import ltibox.linear.src.libsparse as libsp
import ltibox.utils.cout_utils as cout
from ltibox.linear.src.lti import LTISystem
from ltibox.linear.src.timedomain import timedomain_from_dt
from ltibox.linear.utils import compatibility
from ltibox.linear.utils.options import get_option
from ltibox.utils.exceptions import DimensionMismatch, DegenerateSystem, SingularClosedLoop

logger = logging.getLogger(__name__)


# ------------------------------------------------------------- Dedicated class

class StateSpace(LTISystem):
    """
    State-space model (A,B,C,D)

    .. math::
        \\dot{x} = A x + B u \\\\
        y = C x + D u

    or, for discrete-time systems, :math:`x_{k+1} = A x_k + B u_k`.

    Matrices can be ``np.ndarray`` or ``libsparse.csc_matrix``. ``B`` and ``C`` given as 1D arrays are taken as a
    single input column and a single output row, respectively. ``D`` can be given as a scalar for single input single
    output systems, or as ``0`` for any system.

    Args:
        A (np.ndarray): State matrix ``(n, n)``.
        B (np.ndarray): Input matrix ``(n, m)``.
        C (np.ndarray): Output matrix ``(p, n)``.
        D (np.ndarray): Feedthrough matrix ``(p, m)``.
        dt (float or TimeDomain (optional)): Sample period. If not passed, a continuous-time system is assumed.

    Raises:
        DimensionMismatch: if the matrices do not describe a valid realisation.
    """

    def __init__(self, A, B, C, D, dt=None):
        self._A, self._B, self._C, self._D = check_matrices(A, B, C, D)
        self._timedomain = timedomain_from_dt(dt)

    @property
    def A(self):
        return self._A

    @property
    def B(self):
        return self._B

    @property
    def C(self):
        return self._C

    @property
    def D(self):
        return self._D

    @property
    def nx(self):
        """Number of states :math:`n` of the system."""
        return self._A.shape[0]

    @property
    def states(self):
        return self.nx

    @property
    def nu(self):
        return self._B.shape[1]

    @property
    def ny(self):
        return self._C.shape[0]

    @property
    def timedomain(self):
        return self._timedomain

    @property
    def is_static(self):
        """``True`` if the system has no states."""
        return self.nx == 0

    def get_mats(self):
        return self._A, self._B, self._C, self._D

    def evaluate(self, s):
        r"""
        Returns the transfer function of the system evaluated at :math:`s\in\mathbb{C}`.

        At a pole of the system the entries evaluate to ``inf``, or ``nan`` where the numerator vanishes as well.
        Entries that are identically zero evaluate to ``0`` everywhere.

        Args:
            s (complex): Point in the complex plane at which to evaluate the transfer function.

        Returns:
            np.ndarray: Transfer function evaluated at :math:`s`.
        """
        a, b, c, d = self.get_mats()
        if self.nx == 0:
            return libsp.dense(d).astype(complex)

        try:
            sol = libsp.solve(libsp.as_supported(s * libsp.eye_as(a) - a), b)
        except np.linalg.LinAlgError:
            sol = None
        if sol is None or not np.all(np.isfinite(sol)):
            # s is a pole, evaluate each entry as a ratio of polynomials
            from ltibox.linear.src.conversion import ss2tf
            tf = ss2tf(self)
            value = tf.evaluate(s)
            for i, j, entry in tf.entries():
                if entry.is_zero():
                    value[i, j] = 0.
            return value

        return libsp.dot(c, sol.astype(complex), type_out=np.ndarray) + libsp.dense(d)

    transfer_function_evaluation = evaluate

    def freqresp(self, wv):
        """
        Calculate frequency response over frequencies wv

        Note: this wraps frequency response function.
        """
        return freqresp(self, wv)

    def eigvals(self):
        """
        Returns:
            np.ndarray: Eigenvalues of the system

        """
        return eigvals(libsp.dense(self._A), dlti=self.is_discrete)

    def max_eig(self):
        """
        Returns most unstable eigenvalue
        """
        ev = np.linalg.eigvals(libsp.dense(self._A))

        if self.is_continuous:
            return np.max(ev.real)
        else:
            return np.max(np.abs(ev))

    def summary(self):
        msg = 'State-space system\nStates: %g\nInputs: %g\nOutputs: %g\n' % (self.states, self.inputs, self.outputs)
        return msg

    def __repr__(self):
        str_out = ''
        str_out += 'State-space object\n'
        str_out += 'States: {:g}\n'.format(self.states)
        str_out += 'Inputs: {:g}\n'.format(self.inputs)
        str_out += 'Outputs: {:g}\n'.format(self.outputs)
        if self.is_discrete:
            if self.timedomain.is_undefined:
                str_out += 'Sample Time: unspecified\n'
            else:
                str_out += 'Sample Time: {:g} (seconds)\n'.format(self.dt)
            str_out += 'Discrete-time state-space model'
        else:
            str_out += 'Continuous-time state-space model'
        return str_out

    def __str__(self):
        mats = ''
        for name, mat in zip('ABCD', self.get_mats()):
            mats += '{:s} = \n{}\n'.format(name, np.array2string(libsp.dense(mat), prefix='    '))
        return mats + '\n' + self.__repr__()

    def __eq__(self, other):
        if not isinstance(other, StateSpace):
            return NotImplemented
        if self.timedomain != other.timedomain:
            return False
        for mat1, mat2 in zip(self.get_mats(), other.get_mats()):
            if mat1.shape != mat2.shape or not np.array_equal(libsp.dense(mat1), libsp.dense(mat2)):
                return False
        return True

    __hash__ = None

    def isapprox(self, other, rtol=1e-8, atol=1e-12):
        """Matrices of both systems are equal within tolerance."""
        if not isinstance(other, StateSpace) or self.timedomain != other.timedomain:
            return False
        for mat1, mat2 in zip(self.get_mats(), other.get_mats()):
            if mat1.shape != mat2.shape:
                return False
            if not np.allclose(libsp.dense(mat1), libsp.dense(mat2), rtol=rtol, atol=atol):
                return False
        return True

    def __getitem__(self, item):
        """
        Subsystem from a selection of outputs (rows) and inputs (columns), ``sys[i, j]``.
        """
        rows, cols = item if isinstance(item, tuple) else (item, slice(None))
        rows = np.atleast_1d(np.arange(self.ny)[rows])
        cols = np.atleast_1d(np.arange(self.nu)[cols])

        return StateSpace(self._A,
                          self._B[:, cols],
                          self._C[rows, :],
                          self._D[rows, :][:, cols],
                          dt=self.timedomain)

    def _negate(self):
        return StateSpace(self._A, self._B, -self._C, -self._D, dt=self.timedomain)

    def scale(self, value):
        """System with its outputs multiplied by the number ``value``."""
        return StateSpace(self._A, self._B, value * self._C, value * self._D, dt=self.timedomain)

    def _add_same(self, other):
        return sum_ss(self, other)

    def _mul_same(self, other):
        # self * other: other's outputs feed self's inputs
        return series(other, self)

    def inverse(self):
        r"""
        Inverse system, defined if the feedthrough term is square and invertible

        .. math::
            A_i = A - B D^{-1} C, \quad B_i = B D^{-1}, \quad C_i = -D^{-1} C, \quad D_i = D^{-1}

        Raises:
            DegenerateSystem: if ``D`` is not invertible.
        """
        if self.ny != self.nu:
            raise DimensionMismatch('Non-square systems cannot be inverted, shape {}'.format(self.shape))
        a, b, c, d = [libsp.dense(mat) for mat in self.get_mats()]
        if not _is_invertible(d):
            raise DegenerateSystem('The feedthrough term of the system is not invertible')

        d_inv_c = np.linalg.solve(d, c)
        ai = a - b.dot(d_inv_c)
        bi = np.linalg.solve(d.T, b.T).T
        ci = -d_inv_c
        di = np.linalg.inv(d)

        return StateSpace(ai, bi, ci, di, dt=self.timedomain)

    @classmethod
    def from_scipy(cls, scipy_ss):
        """
        Transforms a ``scipy.signal.lti`` or dlti into a StateSpace class

        Args:
            scipy_ss (scipy.signal.StateSpace): Scipy State Space object.

        Returns:
            StateSpace: state space object
        """
        return cls(scipy_ss.A, scipy_ss.B, scipy_ss.C, scipy_ss.D, dt=scipy_ss.dt)


def check_matrices(A, B, C, D):
    """
    Regularises the state-space matrices to 2D arrays and verifies their dimensions.

    Returns:
        tuple: ``(A, B, C, D)`` as read-only arrays (or sparse matrices).

    Raises:
        DimensionMismatch: reporting every inconsistent dimension.
    """
    A = libsp.as_supported(A)
    B = libsp.as_supported(B)
    C = libsp.as_supported(C)
    D = libsp.as_supported(D)

    if A.ndim != 2:
        if A.size == 0:
            A = np.zeros((0, 0))
        elif A.size == 1:
            A = A.reshape((1, 1))
        else:
            raise DimensionMismatch('A must be a 2D square matrix, got shape {}'.format(A.shape))
    n = A.shape[0]

    if B.ndim < 2:
        B = _reshape_vector(B, (n, -1), 'B')
    if C.ndim < 2:
        C = _reshape_vector(C, (-1, n), 'C')

    m = B.shape[1]
    p = C.shape[0]

    if D.ndim == 0:
        if m == 1 and p == 1:
            D = D.reshape((1, 1))
        elif D == 0:
            D = np.zeros((p, m))
        else:
            raise DimensionMismatch('A non-zero scalar D is only valid for single input single output systems, '
                                    'the system has {:g} inputs and {:g} outputs'.format(m, p))
    elif D.ndim == 1:
        D = _reshape_vector(D, (p, m), 'D')

    errors = []
    if A.shape != (n, n):
        errors.append('A is not square, shape {}'.format(A.shape))
    if B.shape[0] != n:
        errors.append('A and B rows not matching ({:g} and {:g})'.format(n, B.shape[0]))
    if C.shape[1] != n:
        errors.append('A and C columns not matching ({:g} and {:g})'.format(n, C.shape[1]))
    if D.shape[0] != p:
        errors.append('C and D rows not matching ({:g} and {:g})'.format(p, D.shape[0]))
    if D.ndim < 2 or D.shape[1] != m:
        errors.append('B and D columns not matching ({:g} and {})'.format(m, D.shape[1:]))
    if errors:
        raise DimensionMismatch('Invalid state-space matrices: ' + '; '.join(errors))

    mats = []
    for mat in (A, B, C, D):
        if not libsp.is_sparse(mat):
            mat = mat.copy()
            mat.flags.writeable = False
        mats.append(mat)
    return tuple(mats)


def _reshape_vector(M, shape, name):
    if M.size == 0:
        return np.zeros(tuple(0 if dim == -1 else dim for dim in shape))
    try:
        return M.reshape(shape)
    except ValueError:
        raise DimensionMismatch('{:s} with {:g} elements cannot be reshaped to {}'.format(name, M.size, shape))


def _is_invertible(M):
    if M.shape[0] == 0:
        return True
    with np.errstate(divide='ignore'):
        rcond = 1. / np.linalg.cond(M)
    return np.isfinite(rcond) and rcond > get_option('singular_tolerance')


# ---------------------------------------- Methods for state-space manipulation

def static_ss(D, dt=None):
    """
    State-space model of the static gain ``D`` (no states).
    """
    D = np.atleast_2d(libsp.dense(libsp.as_supported(D)))
    p, m = D.shape
    return StateSpace(np.zeros((0, 0)), np.zeros((0, m)), np.zeros((p, 0)), D, dt=dt)


def couple(ss01, ss02, K12, K21):
    """
    Couples 2 systems ss01 and ss02 through the gains K12 and K21, where
    K12 transforms the output of ss02 into an input of ss01 and K21 the output of
    ss01 into an input of ss02:

        u1 + K12 y2 -> ss01 -> y1
        u2 + K21 y1 -> ss02 -> y2

    The coupled system has inputs (u1, u2), outputs (y1, y2) and state vector (x1, x2).

    Raises:
        SingularClosedLoop: if the algebraic loop through the feedthrough terms cannot be solved.
    """
    timedomain = compatibility.check_systems([ss01, ss02], operation='couple')

    K12 = libsp.dense(libsp.as_supported(K12))
    K21 = libsp.dense(libsp.as_supported(K21))
    if K12.shape != (ss01.inputs, ss02.outputs) or K21.shape != (ss02.inputs, ss01.outputs):
        raise DimensionMismatch('Gains K12 {} and K21 {} not matching with systems number of inputs/outputs, '
                                'expected {} and {}'.format(K12.shape, K21.shape,
                                                            (ss01.inputs, ss02.outputs),
                                                            (ss02.inputs, ss01.outputs)))

    A1, B1, C1, D1 = [libsp.dense(mat) for mat in ss01.get_mats()]
    A2, B2, C2, D2 = [libsp.dense(mat) for mat in ss02.get_mats()]

    # compute self-influence gains
    K11 = K12.dot(D2.dot(K21))
    K22 = K21.dot(D1.dot(K12))

    # left hand side terms
    L1 = np.eye(K11.shape[0]) - K11.dot(D1)
    L2 = np.eye(K22.shape[0]) - K22.dot(D2)
    if not (_is_invertible(L1) and _is_invertible(L2)):
        raise SingularClosedLoop('The algebraic loop of the coupled systems is singular: I - K12 D2 K21 D1 has '
                                 'condition number {:.3e}'.format(np.linalg.cond(L1)))

    # coupling terms
    cpl_12 = np.linalg.solve(L1, K12)
    cpl_21 = np.linalg.solve(L2, K21)

    cpl_11 = cpl_12.dot(D2.dot(K21))
    cpl_22 = cpl_21.dot(D1.dot(K12))

    A = np.block([
        [A1 + B1.dot(cpl_11).dot(C1), B1.dot(cpl_12).dot(C2)],
        [B2.dot(cpl_21).dot(C1), A2 + B2.dot(cpl_22).dot(C2)]])

    C = np.block([
        [C1 + D1.dot(cpl_11).dot(C1), D1.dot(cpl_12).dot(C2)],
        [D2.dot(cpl_21).dot(C1), C2 + D2.dot(cpl_22).dot(C2)]])

    B = np.block([
        [B1 + B1.dot(cpl_11).dot(D1), B1.dot(cpl_12).dot(D2)],
        [B2.dot(cpl_21).dot(D1), B2 + B2.dot(cpl_22).dot(D2)]])

    D = np.block([
        [D1 + D1.dot(cpl_11).dot(D1), D1.dot(cpl_12).dot(D2)],
        [D2.dot(cpl_21).dot(D1), D2 + D2.dot(cpl_22).dot(D2)]])

    return StateSpace(A, B, C, D, dt=timedomain)


def feedback(SS01, SS02, sign=-1):
    r"""
    Closes the loop of the forward path SS01 with the return path SS02:

    .. math::
        u = r + \mathrm{sign}\, \mathsf{SS02}(y), \quad y = \mathsf{SS01}(u)

    The closed loop is obtained with :func:`couple` and retains the reference :math:`r` as input and the output of
    SS01 as output. The state vector is :math:`[x_1, x_2]`.

    Raises:
        SingularClosedLoop: if :math:`I - \mathrm{sign}\, D_2 D_1` is singular.
    """
    compatibility.check_systems([SS01, SS02], compatibility.loop, operation='feedback')
    K12 = sign * np.eye(SS01.inputs)
    K21 = np.eye(SS02.inputs)
    coupled = couple(SS01, SS02, K12, K21)

    A, B, C, D = coupled.get_mats()
    closed_loop = StateSpace(A, B[:, :SS01.inputs], C[:SS01.outputs, :], D[:SS01.outputs, :SS01.inputs],
                             dt=coupled.timedomain)

    if get_option('print_info'):
        cout.cout_wrap('Closed loop with {:g} states, {:g} inputs and {:g} outputs'.format(
            closed_loop.states, closed_loop.inputs, closed_loop.outputs), 1)
    return closed_loop


def freqresp(SS, wv):
    """
    In-house frequency response function supporting dense/sparse types

    Inputs:
    - SS: instance of StateSpace class
    - wv: frequency range

    Outputs:
    - Yfreq[outputs,inputs,len(wv)]: frequency response over wv

    For discrete-time systems the response is evaluated at :math:`z = e^{j \\omega \\Delta t}`, else at
    :math:`s = j \\omega`.
    """
    assert isinstance(SS, StateSpace), \
        'Type %s of state-space model not supported. Use libss.StateSpace instead!' % type(SS)

    wv = np.atleast_1d(wv)
    if SS.is_discrete:
        wTs = SS.dt * wv
        zv = np.cos(wTs) + 1.j * np.sin(wTs)
    else:
        zv = 1.j * wv

    Yfreq = np.empty((SS.outputs, SS.inputs, len(wv)), dtype=complex)
    for ii in range(len(wv)):
        Yfreq[:, :, ii] = SS.evaluate(zv[ii])

    return Yfreq


def series(SS01, SS02):
    r"""
    Connects two state-space blocks in series. If these are instances of DLTI
    state-space systems, they need to have the same type and time-step. If the input systems are sparse, they are
    converted to dense.

    The connection is such that:

    .. math::
        u \rightarrow \mathsf{SS01} \rightarrow \mathsf{SS02} \rightarrow y \Longrightarrow
        u \rightarrow \mathsf{SStot} \rightarrow y

    where the state vector :math:`x` is :math:`[x_1, x_2]`.

    Args:
        SS01 (libss.StateSpace): State Space 1 instance. Can be DLTI/CLTI, dense or sparse.
        SS02 (libss.StateSpace): State Space 2 instance. Can be DLTI/CLTI, dense or sparse.

    Returns
        libss.StateSpace: Combined state space system in series in dense format.
    """
    timedomain = compatibility.check_systems([SS01, SS02], compatibility.chained, operation='series')

    # determine size of total system
    Nst01, Nst02 = SS01.states, SS02.states
    Nst = Nst01 + Nst02

    # Build A matrix
    A = np.zeros((Nst, Nst), dtype=np.result_type(*[libsp.dense(mat) for mat in SS01.get_mats() + SS02.get_mats()]))

    A[:Nst01, :Nst01] = libsp.dense(SS01.A)
    A[Nst01:, Nst01:] = libsp.dense(SS02.A)
    A[Nst01:, :Nst01] = libsp.dense(libsp.dot(SS02.B, SS01.C))

    # Build the rest
    B = np.concatenate((libsp.dense(SS01.B), libsp.dense(libsp.dot(SS02.B, SS01.D))), axis=0)
    C = np.concatenate((libsp.dense(libsp.dot(SS02.D, SS01.C)), libsp.dense(SS02.C)), axis=1)
    D = libsp.dense(libsp.dot(SS02.D, SS01.D))

    logger.debug('Series connection: {:g} + {:g} states, {:g} inputs, {:g} outputs'.format(
        Nst01, Nst02, SS01.inputs, SS02.outputs))
    return StateSpace(A, B, C, D, dt=timedomain)


def sum_ss(SS1, SS2, negative=False):
    """
    Given 2 systems having the same amount of input/output, the function returns a state space model summing the
    two. Namely, given:
        u -> SS1 -> y1
        u -> SS2 -> y2
    we obtain:
        u -> SStot -> y1+y2 	if negative=False
        u -> SStot -> y1-y2 	if negative=True
    """
    timedomain = compatibility.check_systems([SS1, SS2], compatibility.same_shape, operation='sum')

    factor = -1. if negative else 1.
    A = libsp.block_diag(SS1.A, SS2.A)
    B = libsp.vstack([SS1.B, SS2.B])
    C = libsp.hstack([SS1.C, factor * SS2.C])
    D = libsp.dense(SS1.D) + factor * libsp.dense(SS2.D)

    return StateSpace(A, B, C, D, dt=timedomain)


def join2(SS1, SS2):
    r"""
    Join two state-spaces such that, given:

        .. math::
            \mathbf{u}_1 \longrightarrow &\mathbf{SS}_1 \longrightarrow \mathbf{y}_1 \\
            \mathbf{u}_2 \longrightarrow &\mathbf{SS}_2 \longrightarrow \mathbf{y}_2

    we obtain:

        .. math::
            \mathbf{u} \longrightarrow \mathbf{SS}_{TOT} \longrightarrow \mathbf{y}

    with :math:`\mathbf{u}=(\mathbf{u}_1,\mathbf{u}_2)^T` and :math:`\mathbf{y}=(\mathbf{y}_1,\mathbf{y}_2)^T`.

    Args:
        SS1 (libss.StateSpace): State space 1
        SS2 (libss.StateSpace): State space 2

    Returns:
        libss.StateSpace: combined state space

    """
    return join([SS1, SS2])


def join(SS_list):
    """
    Block diagonal state-space model of a list of systems: the inputs and outputs of the systems are kept disjoint
    and concatenated in the order of the list.
    """
    timedomain = compatibility.check_systems(SS_list, operation='append')

    A = libsp.block_diag(*[ss.A for ss in SS_list])
    B = libsp.block_diag(*[ss.B for ss in SS_list])
    C = libsp.block_diag(*[ss.C for ss in SS_list])
    D = libsp.block_diag(*[ss.D for ss in SS_list])

    return StateSpace(A, B, C, D, dt=timedomain)


def hcat(SS_list):
    """
    Horizontal concatenation of systems with the same outputs, ``y = SS_1 u_1 + ... + SS_k u_k``.
    """
    timedomain = compatibility.check_systems(SS_list, compatibility.same_outputs, operation='horizontal '
                                                                                            'concatenation')

    A = libsp.block_diag(*[ss.A for ss in SS_list])
    B = libsp.block_diag(*[ss.B for ss in SS_list])
    C = libsp.hstack([ss.C for ss in SS_list])
    D = libsp.hstack([ss.D for ss in SS_list])

    return StateSpace(A, B, C, D, dt=timedomain)


def vcat(SS_list):
    """
    Vertical concatenation of systems with the same inputs, ``y = (SS_1 u, ..., SS_k u)``.
    """
    timedomain = compatibility.check_systems(SS_list, compatibility.same_inputs, operation='vertical '
                                                                                           'concatenation')

    A = libsp.block_diag(*[ss.A for ss in SS_list])
    B = libsp.vstack([ss.B for ss in SS_list])
    C = libsp.block_diag(*[ss.C for ss in SS_list])
    D = libsp.vstack([ss.D for ss in SS_list])

    return StateSpace(A, B, C, D, dt=timedomain)


def addGain(SShere, Kmat, where):
    """
    Convert input u or output y of a SS system through gain matrix K. We
    have the following transformations:
    - where='in': the input dof of the state-space are changed
        u_new -> Kmat*u -> SS -> y  => u_new -> SSnew -> y
    - where='out': the output dof of the state-space are changed
         u -> SS -> y -> Kmat*u -> ynew => u -> SSnew -> ynew
    - where='parallel-down': the input dofs are extended, the output is not
        u_new=(u_1,u_2) -> SSnew -> y=SS u_1 + Kmat u_2
    - where='parallel-up': as 'parallel-down' with the gain inputs first
        u_new=(u_2,u_1) -> SSnew -> y=Kmat u_2 + SS u_1
    """
    if where not in ['in', 'out', 'parallel-down', 'parallel-up']:
        raise NameError('Specify whether gains are added to input or output')

    Kmat = libsp.dense(libsp.as_supported(Kmat))
    if Kmat.ndim != 2:
        raise DimensionMismatch('Gain must be a 2D matrix, got shape {}'.format(Kmat.shape))
    A, B, C, D = SShere.get_mats()

    if where == 'in':
        if Kmat.shape[0] != SShere.inputs:
            raise DimensionMismatch('Gain with {:g} outputs cannot feed a system with {:g} inputs'.format(
                Kmat.shape[0], SShere.inputs))
        B = libsp.dot(B, Kmat)
        D = libsp.dot(D, Kmat)

    elif where == 'out':
        if Kmat.shape[1] != SShere.outputs:
            raise DimensionMismatch('Gain with {:g} inputs cannot be fed by a system with {:g} outputs'.format(
                Kmat.shape[1], SShere.outputs))
        C = libsp.dot(Kmat, C)
        D = libsp.dot(Kmat, D)

    else:
        if Kmat.shape[0] != SShere.outputs:
            raise DimensionMismatch('Gain with {:g} outputs cannot be summed to a system with {:g} outputs'.format(
                Kmat.shape[0], SShere.outputs))
        zeros_b = np.zeros((SShere.states, Kmat.shape[1]))
        if where == 'parallel-down':
            B = np.block([libsp.dense(B), zeros_b])
            D = np.block([libsp.dense(D), Kmat])
        else:
            B = np.block([zeros_b, libsp.dense(B)])
            D = np.block([Kmat, libsp.dense(D)])

    return StateSpace(A, B, C, D, dt=SShere.timedomain)


# ----------------------------------------------------------------------- Utils

def eigvals(a, dlti=False):
    """
    Ordered eigenvalaues of a matrix.

    Args:
        a (np.ndarray): Matrix.
        dlti (bool): If true, the eigenvalues are ordered by modulus, else by real part.

    Returns:
        np.ndarray: ordered set of eigenvalues.
    """
    eigs = np.linalg.eigvals(a)

    if dlti:
        order = np.argsort(np.abs(eigs))
    else:
        order = np.argsort(eigs.real)

    return eigs[order]


def random_ss(Nx, Nu, Ny, dt=None, use_sparse=False, stable=True):
    """
    Define random system from number of states (Nx), inputs (Nu) and output (Ny).

    Args:
        Nx (int): Number of states
        Nu (int): Number of inputs
        Ny (int): Number of outputs
        dt (float (optional)): Time step for discrete systems
        use_sparse (bool): Use sparse matrices
        stable (bool): Ensure the system is stable

    Returns:
        StateSpace: State space object
    """

    A = np.random.rand(Nx, Nx)
    if stable and Nx > 0:
        ev, U = np.linalg.eig(A)
        if dt is None:
            # shift the spectrum to the left half plane
            ev = ev - (np.max(ev.real) + 1.)
        else:
            evabs = np.abs(ev)
            for ee in range(len(ev)):
                if evabs[ee] > 0.99:
                    ev[ee] /= 1.1 * evabs[ee]
        A = np.dot(U * ev, np.linalg.inv(U)).real
    B = np.random.rand(Nx, Nu)
    C = np.random.rand(Ny, Nx)
    D = np.random.rand(Ny, Nu)

    if use_sparse:
        return StateSpace(libsp.csc_matrix(A),
                          libsp.csc_matrix(B),
                          libsp.csc_matrix(C),
                          libsp.csc_matrix(D),
                          dt=dt)
    return StateSpace(A, B, C, D, dt=dt)


def compare_ss(SS1, SS2, tol=1e-10, Print=False):
    """
    Assert matrices of state-space models are identical
    """

    era = np.max(np.abs(libsp.dense(SS1.A) - libsp.dense(SS2.A)), initial=0.)
    if Print: print('Max. error A: %.3e' % era)

    erb = np.max(np.abs(libsp.dense(SS1.B) - libsp.dense(SS2.B)), initial=0.)
    if Print: print('Max. error B: %.3e' % erb)

    erc = np.max(np.abs(libsp.dense(SS1.C) - libsp.dense(SS2.C)), initial=0.)
    if Print: print('Max. error C: %.3e' % erc)

    erd = np.max(np.abs(libsp.dense(SS1.D) - libsp.dense(SS2.D)), initial=0.)
    if Print: print('Max. error D: %.3e' % erd)

    assert era < tol, 'Error A matrix %.2e>%.2e' % (era, tol)
    assert erb < tol, 'Error B matrix %.2e>%.2e' % (erb, tol)
    assert erc < tol, 'Error C matrix %.2e>%.2e' % (erc, tol)
    assert erd < tol, 'Error D matrix %.2e>%.2e' % (erd, tol)

    return (era, erb, erc, erd)


# -----------------------------------------------------------------------------


def ss_to_scipy(ss):
    """
    Converts to a scipy.signal linear time invariant system

    Args:
        ss (libss.StateSpace): state space object

    Returns:
        scipy.signal.lti or scipy.signal.dlti
    """
    A, B, C, D = [libsp.dense(mat) for mat in ss.get_mats()]
    if ss.is_continuous:
        sys = scsig.lti(A, B, C, D)
    else:
        sys = scsig.dlti(A, B, C, D, dt=ss.dt)

    return sys
