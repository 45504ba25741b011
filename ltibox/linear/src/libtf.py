"""
Linear Time Invariant systems as transfer function matrices

Classes:
- TransferFunction: immutable matrix of scalar rational functions
	(libpoly.SisoRational or libpoly.SisoZpk), one per input/output pair, with a time domain.

The operators (+, -, *, /) are resolved by the connections module. Sums are taken entry by entry, products are
matrix products of the entry matrices. Common factors are never cancelled.
"""
import logging
import numpy as np

import ltibox.linear.src.libpoly as libpoly
from ltibox.linear.src.lti import LTISystem
from ltibox.linear.src.timedomain import timedomain_from_dt
from ltibox.linear.utils import compatibility
from ltibox.linear.utils.options import get_option
from ltibox.utils.exceptions import DimensionMismatch, DegenerateSystem

logger = logging.getLogger(__name__)


class TransferFunction(LTISystem):
    """
    Transfer function matrix

    Args:
        matrix (list or np.ndarray): ``(p, m)`` nested list or object array of scalar rational functions. Numbers are
          lifted to constant functions and a single scalar function gives a single input single output system.
        dt (float or TimeDomain (optional)): Sample period. If not passed, a continuous-time system is assumed.

    Entries must all be of the same scalar form. If zero-pole-gain and rational entries are mixed, they are all
    converted to rational form.
    """

    def __init__(self, matrix, dt=None):
        self._matrix = build_matrix(matrix)
        self._timedomain = timedomain_from_dt(dt)

    @property
    def matrix(self):
        """Read-only ``(p, m)`` object array of scalar rational functions."""
        return self._matrix

    @property
    def nu(self):
        return self._matrix.shape[1]

    @property
    def ny(self):
        return self._matrix.shape[0]

    @property
    def timedomain(self):
        return self._timedomain

    @property
    def kind(self):
        """Scalar form of the entries, ``libpoly.SisoRational`` or ``libpoly.SisoZpk``."""
        return libpoly.common_kind(list(self._matrix.flat))

    @property
    def var(self):
        return 'z' if self.is_discrete else 's'

    def entries(self):
        """Iterator over ``(i, j, entry)`` in row major order."""
        for i in range(self.ny):
            for j in range(self.nu):
                yield i, j, self._matrix[i, j]

    def evaluate(self, s):
        out = np.empty(self.shape, dtype=complex)
        for i, j, entry in self.entries():
            out[i, j] = entry.evaluate(s)
        return out

    def numvec(self):
        """Numerator coefficients as a nested list ``[output][input]``."""
        return [[self._matrix[i, j].num for j in range(self.nu)] for i in range(self.ny)]

    def denvec(self):
        """Denominator coefficients as a nested list ``[output][input]``."""
        return [[self._matrix[i, j].den for j in range(self.nu)] for i in range(self.ny)]

    def is_proper(self):
        return all(entry.is_proper() for entry in self._matrix.flat)

    def __getitem__(self, item):
        rows, cols = item if isinstance(item, tuple) else (item, slice(None))
        rows = np.atleast_1d(np.arange(self.ny)[rows])
        cols = np.atleast_1d(np.arange(self.nu)[cols])
        return TransferFunction(self._matrix[np.ix_(rows, cols)], dt=self.timedomain)

    def map_entries(self, func):
        """New system with ``func`` applied to every entry."""
        out = np.empty(self.shape, dtype=object)
        for i, j, entry in self.entries():
            out[i, j] = func(entry)
        return TransferFunction(out, dt=self.timedomain)

    def to_kind(self, kind):
        """System with all entries converted to ``kind``."""
        return self.map_entries(lambda entry: libpoly.convert_kind(entry, kind))

    def _negate(self):
        return self.map_entries(lambda entry: -entry)

    def scale(self, value):
        return self.map_entries(lambda entry: entry * value)

    def _add_same(self, other):
        timedomain = compatibility.check_systems([self, other], compatibility.same_shape, operation='sum')
        out = np.empty(self.shape, dtype=object)
        for i, j, entry in self.entries():
            out[i, j] = entry + other.matrix[i, j]
        return TransferFunction(out, dt=timedomain)

    def _mul_same(self, other):
        # self * other: other's outputs feed self's inputs
        timedomain = compatibility.check_systems([other, self], compatibility.chained, operation='product')
        out = np.empty((self.ny, other.nu), dtype=object)
        for i in range(self.ny):
            for j in range(other.nu):
                acc = self._matrix[i, 0] * other.matrix[0, j]
                for k in range(1, self.nu):
                    acc = acc + self._matrix[i, k] * other.matrix[k, j]
                out[i, j] = acc
        return TransferFunction(out, dt=timedomain)

    def inverse(self):
        """
        Inverse of a single input single output system.

        Raises:
            DimensionMismatch: if the system is not single input single output.
            DegenerateSystem: for the zero transfer function.
        """
        if not self.is_siso:
            raise DimensionMismatch('Only single input single output transfer functions can be inverted, '
                                    'shape {}'.format(self.shape))
        return self.map_entries(lambda entry: entry.inverse())

    def __eq__(self, other):
        if not isinstance(other, TransferFunction):
            return NotImplemented
        if self.timedomain != other.timedomain or self.shape != other.shape:
            return False
        return all(entry == other.matrix[i, j] for i, j, entry in self.entries())

    __hash__ = None

    def isapprox(self, other, rtol=1e-8, atol=1e-12):
        if not isinstance(other, TransferFunction):
            return False
        if self.timedomain != other.timedomain or self.shape != other.shape:
            return False
        return all(entry.isapprox(other.matrix[i, j], rtol=rtol, atol=atol) for i, j, entry in self.entries())

    def __str__(self):
        precision = get_option('print_precision')
        blocks = []
        for i, j, entry in self.entries():
            fraction = fraction_to_string(entry, self.var, precision)
            if self.is_siso:
                blocks.append(fraction)
            else:
                blocks.append('Input {:g} to Output {:g}\n'.format(j + 1, i + 1) + fraction)
        return '\n\n'.join(blocks) + '\n\n' + self.footer()

    def footer(self):
        if self.is_continuous:
            return 'Continuous-time transfer function model'
        if self.timedomain.is_undefined:
            sample_time = 'unspecified'
        else:
            sample_time = '{:g} (seconds)'.format(self.dt)
        return 'Sample Time: {:s}\nDiscrete-time transfer function model'.format(sample_time)

    def __repr__(self):
        return 'TransferFunction({:s}, shape={}, {})'.format(self.kind.__name__, self.shape, self.timedomain)


def build_matrix(matrix):
    """
    Read-only 2D object array of scalar rational functions of a single form.
    """
    if isinstance(matrix, (libpoly.SisoTf, int, float, complex, np.number)):
        matrix = [[matrix]]

    rows = list(matrix)
    if len(rows) == 0:
        raise DimensionMismatch('A transfer function needs at least one output')
    rows = [list(row) if isinstance(row, (list, tuple, np.ndarray)) else [row] for row in rows]
    ncols = len(rows[0])
    if any(len(row) != ncols for row in rows):
        raise DimensionMismatch('Rows of the transfer function matrix have different lengths: '
                                '{}'.format([len(row) for row in rows]))
    if ncols == 0:
        raise DimensionMismatch('A transfer function needs at least one input')

    try:
        entries = [[libpoly.as_siso(entry) for entry in row] for row in rows]
    except TypeError as err:
        raise DegenerateSystem('Invalid transfer function entry: {}'.format(err))

    kind = libpoly.common_kind([entry for row in entries for entry in row])
    if any(type(entry) is not kind for row in entries for entry in row):
        logger.debug('Mixed entry forms, converting to {:s}'.format(kind.__name__))
    out = np.empty((len(rows), ncols), dtype=object)
    for i, row in enumerate(entries):
        for j, entry in enumerate(row):
            out[i, j] = libpoly.convert_kind(entry, kind)
    out.flags.writeable = False
    return out


def _centre(line, width):
    return ' ' * ((width - len(line)) // 2) + line


def fraction_to_string(entry, var='s', precision=4):
    """
    Numerator line, dash separator as wide as the widest line, denominator line. Both lines are centred.
    """
    numerator, denominator = entry.to_string(var, precision)
    width = max(len(numerator), len(denominator))
    return '\n'.join([_centre(numerator, width), '-' * width, _centre(denominator, width)])
