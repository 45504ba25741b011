"""
Comparison against the python-control and scipy.signal implementations of the same operations.
"""
import unittest

import control
import numpy as np
import scipy.signal as scsig

from ltibox.linear.src.libss import random_ss
from ltibox.linear.src.builders import tf
from ltibox.linear.src.conversion import ss2tf
from ltibox.linear.src.connections import feedback, series, parallel
from ltibox.linear.src import analysis


def control_response(sys, s):
    return np.atleast_2d(np.squeeze(sys(s)))


class TestAgainstControl(unittest.TestCase):

    def setUp(self):
        self.points = [0.3j, 1. + 1j, 5j]
        self.num1, self.den1 = [1., 2.], [1., 3., 5.]
        self.num2, self.den2 = [4.], [1., 1.]
        self.G1 = tf(self.num1, self.den1)
        self.G2 = tf(self.num2, self.den2)
        self.C1 = control.tf(self.num1, self.den1)
        self.C2 = control.tf(self.num2, self.den2)

    def test_feedback(self):
        closed = feedback(self.G1, self.G2)
        reference = control.feedback(self.C1, self.C2)
        for s in self.points:
            np.testing.assert_allclose(closed.evaluate(s), control_response(reference, s), rtol=1e-8)

        closed = feedback(self.G1, self.G2, sign=1)
        reference = control.feedback(self.C1, self.C2, sign=1)
        for s in self.points:
            np.testing.assert_allclose(closed.evaluate(s), control_response(reference, s), rtol=1e-8)

    def test_series_parallel(self):
        for s in self.points:
            np.testing.assert_allclose(series(self.G1, self.G2).evaluate(s),
                                       control_response(control.series(self.C1, self.C2), s))
            np.testing.assert_allclose(parallel(self.G1, self.G2).evaluate(s),
                                       control_response(control.parallel(self.C1, self.C2), s))

    def test_state_space_feedback(self):
        P = random_ss(3, 2, 2)
        K = random_ss(2, 2, 2)
        closed = feedback(P, K)
        reference = control.feedback(control.ss(*P.get_mats()), control.ss(*K.get_mats()))
        for s in self.points:
            np.testing.assert_allclose(closed.evaluate(s), control_response(reference, s), rtol=1e-6)

    def test_ss2tf(self):
        SS = random_ss(3, 1, 1)
        G = ss2tf(SS)
        reference = control.ss2tf(control.ss(*SS.get_mats()))
        for s in self.points:
            np.testing.assert_allclose(G.evaluate(s), control_response(reference, s), rtol=1e-7)


class TestAgainstScipy(unittest.TestCase):

    def test_freqresp(self):
        num, den = [1., 0.5], [1., 2., 10.]
        w = np.logspace(-1, 2, 20)
        _, reference = scsig.freqresp((num, den), w=w)
        resp = analysis.freqresp(tf(num, den), w)
        np.testing.assert_allclose(resp[0, 0, :], reference)

    def test_discrete_freqresp(self):
        num, den, dt = [1., 0.2], [1., -0.6, 0.08], 0.05
        w = np.linspace(0.1, 50., 15)
        _, reference = scsig.dfreqresp((num, den, dt), w=w * dt)
        resp = analysis.freqresp(tf(num, den, dt), w)
        np.testing.assert_allclose(resp[0, 0, :], reference)


if __name__ == '__main__':
    unittest.main()
