"""
Linear time invariant system capability

:class:`LTISystem` is the interface shared by :class:`~ltibox.linear.src.libss.StateSpace` and
:class:`~ltibox.linear.src.libtf.TransferFunction`. The arithmetic operators are resolved by
:mod:`ltibox.linear.src.connections`, which promotes the operands to a common representation before delegating to
the representation specific implementation.
"""
from abc import ABCMeta, abstractmethod

import numpy as np


class LTISystem(metaclass=ABCMeta):

    @property
    @abstractmethod
    def nu(self):
        """Number of inputs."""
        pass

    @property
    @abstractmethod
    def ny(self):
        """Number of outputs."""
        pass

    @property
    @abstractmethod
    def timedomain(self):
        """:class:`~ltibox.linear.src.timedomain.TimeDomain` of the system."""
        pass

    @abstractmethod
    def evaluate(self, s):
        """
        Transfer function matrix evaluated at the complex frequency ``s``.

        Returns:
            np.ndarray: ``(ny, nu)`` complex array
        """
        pass

    def __call__(self, s):
        return self.evaluate(s)

    @property
    def inputs(self):
        """Number of inputs :math:`m` to the system."""
        return self.nu

    @property
    def outputs(self):
        """Number of outputs :math:`p` of the system."""
        return self.ny

    @property
    def shape(self):
        return self.ny, self.nu

    @property
    def dt(self):
        """Sample period, ``None`` for continuous-time systems."""
        return self.timedomain.dt

    @property
    def is_siso(self):
        return self.nu == 1 and self.ny == 1

    @property
    def is_continuous(self):
        return self.timedomain.is_continuous

    @property
    def is_discrete(self):
        return self.timedomain.is_discrete

    # Arithmetic, resolved by the connections module
    def __add__(self, other):
        from ltibox.linear.src import connections
        return connections.add(self, other)

    def __radd__(self, other):
        from ltibox.linear.src import connections
        return connections.add(other, self)

    def __sub__(self, other):
        from ltibox.linear.src import connections
        return connections.add(self, connections.negate(other))

    def __rsub__(self, other):
        from ltibox.linear.src import connections
        return connections.add(other, -self)

    def __mul__(self, other):
        from ltibox.linear.src import connections
        return connections.multiply(self, other)

    def __rmul__(self, other):
        from ltibox.linear.src import connections
        return connections.multiply(other, self)

    def __truediv__(self, other):
        from ltibox.linear.src import connections
        return connections.divide(self, other)

    def __rtruediv__(self, other):
        from ltibox.linear.src import connections
        return connections.divide(other, self)

    def __pow__(self, power):
        """Repeated product, negative powers invert the system."""
        if not isinstance(power, (int, np.integer)) or isinstance(power, bool):
            raise TypeError('Only integer powers of systems are defined, got {}'.format(power))
        if power == 0:
            from ltibox.linear.src.conversion import static_gain
            return static_gain(np.eye(self.ny, self.nu), type(self), self.timedomain)
        base = self if power > 0 else self.inverse()
        result = base
        for _ in range(abs(int(power)) - 1):
            result = result * base
        return result

    def __neg__(self):
        return self._negate()

    @abstractmethod
    def _negate(self):
        pass

    __hash__ = None

    # numpy must defer to the system operators instead of broadcasting over the system
    __array_ufunc__ = None
