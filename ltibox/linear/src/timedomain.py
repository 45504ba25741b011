"""Time domain of a linear system

Every system carries one of two tags:

* :class:`Continuous`: continuous-time system, ``dx/dt = A x + B u``.
* :class:`Discrete`: discrete-time system with sample period ``Ts > 0``, ``x[k+1] = A x[k] + B u[k]``.

``Discrete.UNDEFINED`` (``Ts == -1``) stands for a discrete system whose period is inherited from the systems it is
combined with. It compares compatible with any discrete tag and is resolved by :func:`common_timedomain`.
"""
import numpy as np

from ltibox.utils.exceptions import DegenerateSystem, SamplingTimeMismatch
from ltibox.linear.utils.options import get_option

UNDEFINED_DT = -1


class TimeDomain:
    """Base class of the time domain tags. Tags are immutable."""

    __slots__ = ()

    @property
    def dt(self):
        """Sample period, ``None`` for continuous-time systems."""
        return None

    @property
    def is_continuous(self):
        return False

    @property
    def is_discrete(self):
        return False

    def __setattr__(self, key, value):
        raise AttributeError('TimeDomain tags are immutable')


class Continuous(TimeDomain):

    __slots__ = ()

    @property
    def is_continuous(self):
        return True

    def __eq__(self, other):
        return isinstance(other, Continuous)

    def __hash__(self):
        return hash('Continuous')

    def __repr__(self):
        return 'Continuous()'

    def __reduce__(self):
        return Continuous, ()


class Discrete(TimeDomain):

    __slots__ = ('_dt',)

    def __init__(self, dt):
        dt = float(dt)
        if not (dt > 0 or dt == UNDEFINED_DT):
            raise DegenerateSystem('The sample period of a discrete-time system must be positive, '
                                   'got {}'.format(dt))
        object.__setattr__(self, '_dt', dt)

    @property
    def dt(self):
        return self._dt

    @property
    def is_discrete(self):
        return True

    @property
    def is_undefined(self):
        return self._dt == UNDEFINED_DT

    def __eq__(self, other):
        return isinstance(other, Discrete) and self._dt == other._dt

    def __hash__(self):
        return hash(('Discrete', self._dt))

    def __repr__(self):
        if self.is_undefined:
            return 'Discrete(undefined)'
        return 'Discrete({:g})'.format(self._dt)

    def __reduce__(self):
        return Discrete, (self._dt,)


Discrete.UNDEFINED = Discrete(UNDEFINED_DT)
CONTINUOUS = Continuous()


def timedomain_from_dt(dt):
    """
    Returns the time domain tag corresponding to a sample period.

    Args:
        dt (float or TimeDomain or None): ``None`` or ``0`` for continuous-time systems, ``-1`` for a discrete
          system with undefined period, else the sample period.

    Returns:
        TimeDomain: time domain tag
    """
    if isinstance(dt, TimeDomain):
        return dt
    if dt is None or dt == 0:
        return CONTINUOUS
    if not np.isscalar(dt) or isinstance(dt, (str, bool)):
        raise DegenerateSystem('Sample period must be a number, got {}'.format(dt))
    return Discrete(dt)


def is_compatible(td1, td2):
    """
    Two time domains are compatible if they are identical. The undefined discrete tag matches any discrete tag.
    """
    if td1.is_continuous or td2.is_continuous:
        return td1.is_continuous and td2.is_continuous
    if td1.is_undefined or td2.is_undefined:
        return True
    if td1.dt == td2.dt:
        return True
    rtol = get_option('sampling_time_rtol')
    return rtol > 0 and np.abs(td1.dt - td2.dt) <= rtol * max(td1.dt, td2.dt)


def timedomain_mismatches(timedomains):
    """
    Scans every time domain against the first defined one.

    Returns:
        list(str): description of every mismatch found, empty if all are compatible.
    """
    if not timedomains:
        return []
    reference = timedomains[0]
    for td in timedomains:
        if td.is_discrete and not td.is_undefined:
            reference = td
            break

    mismatches = []
    for ith, td in enumerate(timedomains):
        if not is_compatible(reference, td):
            mismatches.append('operand {:g} is {} but expected {}'.format(ith, td, reference))
    return mismatches


def common_timedomain(*timedomains):
    """
    Returns the finalised time domain shared by all arguments. An undefined discrete tag is resolved to the period
    of the other discrete tags, if any.

    Raises:
        SamplingTimeMismatch: if any two time domains differ.
    """
    if len(timedomains) == 0:
        raise ValueError('At least one time domain is required')

    mismatches = timedomain_mismatches(list(timedomains))
    if mismatches:
        raise SamplingTimeMismatch('Sampling time mismatch: ' + '; '.join(mismatches))

    for td in timedomains:
        if td.is_continuous or not td.is_undefined:
            return td
    return timedomains[0]
