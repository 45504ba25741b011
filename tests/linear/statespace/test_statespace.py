import copy
import unittest

import numpy as np

from ltibox.linear.src import libsparse as libsp
from ltibox.linear.src.libss import StateSpace, compare_ss, random_ss, couple, join, join2, series, sum_ss, \
    addGain, hcat, vcat, feedback, freqresp, static_ss, ss_to_scipy
from ltibox.linear.src.timedomain import Discrete
from ltibox.utils.exceptions import DimensionMismatch, SamplingTimeMismatch, SingularClosedLoop, DegenerateSystem


class Test_dlti(unittest.TestCase):
    """ Test methods into this module for DLTI systems """

    def setUp(self):
        # allocate some state-space model (dense and sparse)
        dt = 0.3
        Ny, Nx, Nu = 4, 3, 2
        A = np.random.rand(Nx, Nx)
        B = np.random.rand(Nx, Nu)
        C = np.random.rand(Ny, Nx)
        D = np.random.rand(Ny, Nu)
        self.SS = StateSpace(A, B, C, D, dt=dt)
        self.SSsp = StateSpace(libsp.csc_matrix(A), libsp.csc_matrix(B), C, D, dt=dt)

    def test_dimensions(self):
        SS = self.SS
        self.assertEqual((SS.states, SS.inputs, SS.outputs), (3, 2, 4))
        self.assertEqual(SS.shape, (4, 2))
        self.assertTrue(SS.is_discrete)
        self.assertEqual(SS.timedomain, Discrete(0.3))

    def test_immutable(self):
        with self.assertRaises(ValueError):
            self.SS.A[0, 0] = 1.
        with self.assertRaises(AttributeError):
            self.SS.A = np.eye(3)

    def test_invalid_matrices(self):
        A, B, C, D = self.SS.get_mats()
        with self.assertRaises(DimensionMismatch):
            StateSpace(A, B, C, np.zeros((4, 3)))
        with self.assertRaises(DimensionMismatch):
            StateSpace(A[:2, :], B, C, D)

        # every failure is reported
        with self.assertRaises(DimensionMismatch) as cm:
            StateSpace(A, B[:2, :], C[:, :2], D)
        self.assertIn('B rows', str(cm.exception))
        self.assertIn('C columns', str(cm.exception))

    def test_scalar_and_vector_input(self):
        SS = StateSpace(-1., 1., 2., 0.5)
        self.assertEqual(SS.shape, (1, 1))
        np.testing.assert_allclose(SS.evaluate(0.), [[2.5]])

        SS = StateSpace(np.eye(2), np.ones(2), np.ones(2), 0)
        self.assertEqual((SS.states, SS.inputs, SS.outputs), (2, 1, 1))

        with self.assertRaises(DimensionMismatch):
            StateSpace(np.eye(2), np.ones((2, 2)), np.ones((2, 2)), 1.)

    def test_evaluate_dense_sparse(self):
        s = 0.5 + 0.5j
        np.testing.assert_allclose(self.SS.evaluate(s), self.SSsp.evaluate(s))
        A, B, C, D = self.SS.get_mats()
        expected = C.dot(np.linalg.solve(s * np.eye(3) - A, B)) + D
        np.testing.assert_allclose(self.SS.transfer_function_evaluation(s), expected)

    def test_evaluate_at_pole(self):
        SS = StateSpace(np.diag([-1., -2.]), np.ones((2, 1)), np.ones((1, 2)), 0.)
        value = SS.evaluate(-1.)
        self.assertTrue(np.isinf(value[0, 0]))

    def test_evaluate_zero_entries_at_pole(self):
        G1 = StateSpace(-1., 1., 1., 0.)
        G2 = StateSpace(-2., 1., 1., 0.)
        value = join([G1, G2]).evaluate(-1.)
        self.assertTrue(np.isinf(value[0, 0]))
        self.assertEqual(value[0, 1], 0.)
        self.assertEqual(value[1, 0], 0.)

    def test_freqresp(self):
        wv = np.array([0.1, 1., 2.])
        Yfreq = freqresp(self.SS, wv)
        self.assertEqual(Yfreq.shape, (4, 2, 3))
        np.testing.assert_allclose(Yfreq[:, :, 1], self.SS.evaluate(np.exp(1j * 0.3)))
        np.testing.assert_allclose(self.SSsp.freqresp(wv), Yfreq)

    def test_addGain(self):

        SS = self.SS
        SSsp = self.SSsp
        Nu, Nx, Ny = SS.inputs, SS.states, SS.outputs
        s = 0.2j

        Kin = np.random.rand(Nu, 3)
        SSin = addGain(SS, Kin, where='in')
        np.testing.assert_allclose(SSin.evaluate(s), SS.evaluate(s).dot(Kin))
        compare_ss(SSin, addGain(SSsp, Kin, where='in'))

        Kout = np.random.rand(2, Ny)
        SSout = addGain(SS, Kout, where='out')
        np.testing.assert_allclose(SSout.evaluate(s), Kout.dot(SS.evaluate(s)))

        Kpar = np.random.rand(Ny, 5)
        SSpar = addGain(SS, Kpar, where='parallel-down')
        self.assertEqual(SSpar.inputs, Nu + 5)
        np.testing.assert_allclose(SSpar.evaluate(s), np.block([SS.evaluate(s), Kpar]))

        # original system unchanged
        self.assertEqual(SS.inputs, Nu)

        with self.assertRaises(DimensionMismatch):
            addGain(SS, np.random.rand(Nu + 1, 2), where='in')
        with self.assertRaises(NameError):
            addGain(SS, Kin, where='somewhere')

    def test_couple(self):
        dt = 0.2
        Nx, Nu, Ny = 4, 3, 2
        SS1 = random_ss(Nx, Nu, Ny, dt=dt, use_sparse=False)
        SS2 = random_ss(Nx, Ny, Nu, dt=dt, use_sparse=False)
        K12 = 0.1 * np.random.rand(Nu, Nu)
        K21 = 0.1 * np.random.rand(Ny, Ny)
        SS = couple(SS1, SS2, K12, K21)
        self.assertEqual((SS.states, SS.inputs, SS.outputs), (2 * Nx, Nu + Ny, Ny + Nu))

        # steady state: solve the coupled static problem
        G1 = SS1.evaluate(1.)
        G2 = SS2.evaluate(1.)
        u1 = np.random.rand(Nu)
        u2 = np.random.rand(Ny)
        # y1 = G1 (u1 + K12 y2), y2 = G2 (u2 + K21 y1)
        lhs = np.block([[np.eye(Ny), -G1.dot(K12)],
                        [-G2.dot(K21), np.eye(Nu)]])
        rhs = np.concatenate((G1.dot(u1), G2.dot(u2)))
        y = np.linalg.solve(lhs, rhs)
        np.testing.assert_allclose(SS.evaluate(1.).dot(np.concatenate((u1, u2))), y, rtol=1e-8)

        SSsp1 = random_ss(Nx, Nu, Ny, dt=0.3)
        with self.assertRaises(SamplingTimeMismatch):
            couple(SSsp1, SS2, K12, K21)

    def test_join(self):
        SS1 = random_ss(3, 2, 4, dt=0.3)
        SS2 = random_ss(2, 1, 1, dt=0.3)
        SS = join2(SS1, SS2)
        self.assertEqual((SS.states, SS.inputs, SS.outputs), (5, 3, 5))
        s = 1j
        G = SS.evaluate(s)
        np.testing.assert_allclose(G[:4, :2], SS1.evaluate(s))
        np.testing.assert_allclose(G[4:, 2:], SS2.evaluate(s))
        np.testing.assert_allclose(G[:4, 2:], 0.)
        compare_ss(SS, join([SS1, SS2]))

    def test_series(self):
        SS1 = self.SS
        SS2 = random_ss(2, SS1.outputs, 3, dt=0.3)
        SS = series(SS1, SS2)
        s = 0.1 + 1j
        np.testing.assert_allclose(SS.evaluate(s), SS2.evaluate(s).dot(SS1.evaluate(s)))

        with self.assertRaises(DimensionMismatch):
            series(SS2, SS1)

    def test_sum_ss(self):
        SS2 = random_ss(2, self.SS.inputs, self.SS.outputs, dt=0.3)
        s = 1j
        np.testing.assert_allclose(sum_ss(self.SS, SS2).evaluate(s), self.SS.evaluate(s) + SS2.evaluate(s))
        np.testing.assert_allclose(sum_ss(self.SS, SS2, negative=True).evaluate(s),
                                   self.SS.evaluate(s) - SS2.evaluate(s))

    def test_hcat_vcat(self):
        SS1 = random_ss(3, 2, 2)
        SS2 = random_ss(1, 1, 2)
        SS3 = random_ss(2, 2, 1)
        s = 0.5j

        SSh = hcat([SS1, SS2])
        self.assertEqual(SSh.shape, (2, 3))
        np.testing.assert_allclose(SSh.evaluate(s), np.hstack([SS1.evaluate(s), SS2.evaluate(s)]))

        SSv = vcat([SS1, SS3])
        self.assertEqual(SSv.shape, (3, 2))
        np.testing.assert_allclose(SSv.evaluate(s), np.vstack([SS1.evaluate(s), SS3.evaluate(s)]))

        with self.assertRaises(DimensionMismatch):
            hcat([SS1, SS3])
        with self.assertRaises(DimensionMismatch):
            vcat([SS1, SS2])

    def test_feedback(self):
        P = random_ss(3, 2, 2)
        K = random_ss(2, 2, 2)
        s = 0.3 + 0.4j
        closed = feedback(P, K)
        Gp = P.evaluate(s)
        Gk = K.evaluate(s)
        expected = np.linalg.solve(np.eye(2) + Gp.dot(Gk), Gp)
        np.testing.assert_allclose(closed.evaluate(s), expected)

    def test_singular_feedback(self):
        P = StateSpace(-1., 1., 1., 1.)
        K = StateSpace(-2., 1., 1., -1.)
        with self.assertRaises(SingularClosedLoop):
            feedback(P, K)

    def test_inverse(self):
        SS = random_ss(3, 2, 2)
        s = 0.7j
        np.testing.assert_allclose(SS.inverse().evaluate(s), np.linalg.inv(SS.evaluate(s)))

        strictly_proper = StateSpace(-1., 1., 1., 0.)
        with self.assertRaises(DegenerateSystem):
            strictly_proper.inverse()

    def test_getitem(self):
        sub = self.SS[1:3, 0]
        self.assertEqual(sub.shape, (2, 1))
        np.testing.assert_allclose(sub.evaluate(1j), self.SS.evaluate(1j)[1:3, :1])

    def test_equality(self):
        self.assertEqual(self.SS, copy.deepcopy(self.SS))
        self.assertEqual(self.SS, self.SSsp)
        other = StateSpace(*self.SS.get_mats(), dt=0.4)
        self.assertNotEqual(self.SS, other)
        self.assertTrue(self.SS.isapprox(self.SSsp))

    def test_static(self):
        SS = static_ss([[1., 2.]], dt=0.3)
        self.assertEqual((SS.states, SS.inputs, SS.outputs), (0, 2, 1))
        self.assertTrue(SS.is_static)
        np.testing.assert_allclose(SS.evaluate(3.), [[1., 2.]])

    def test_random_ss_stable(self):
        for dt in [None, 0.1]:
            SS = random_ss(6, 2, 2, dt=dt)
            if dt is None:
                self.assertTrue(SS.max_eig() < 0.)
            else:
                self.assertTrue(SS.max_eig() < 1.)

    def test_scipy(self):
        scipy_ss = ss_to_scipy(self.SS)
        SS = StateSpace.from_scipy(scipy_ss)
        compare_ss(SS, self.SS)
        self.assertEqual(SS.dt, 0.3)

    def test_repr(self):
        text = repr(self.SS)
        self.assertIn('States: 3', text)
        self.assertIn('Sample Time: 0.3 (seconds)', text)
        self.assertTrue(text.endswith('Discrete-time state-space model'))
        self.assertEqual(self.SS.summary(), 'State-space system\nStates: 3\nInputs: 2\nOutputs: 4\n')


if __name__ == '__main__':
    unittest.main()
