import unittest

import numpy as np

from ltibox.linear.src.libpoly import SisoRational, SisoZpk
from ltibox.linear.src.libtf import TransferFunction
from ltibox.linear.src.builders import tf, zpk
from ltibox.linear.src.timedomain import Discrete
from ltibox.utils.exceptions import DimensionMismatch, DegenerateSystem, SamplingTimeMismatch


class TestTransferFunction(unittest.TestCase):

    def setUp(self):
        self.G = TransferFunction([[SisoRational([1.], [1., 2., 1.])]])
        self.M = TransferFunction([[SisoRational([1.], [1., 1.]), SisoRational([2.], [1., 3.])],
                                   [0., SisoRational([1., 0.], [1., 2.])]])

    def test_dimensions(self):
        self.assertEqual(self.G.shape, (1, 1))
        self.assertTrue(self.G.is_siso)
        self.assertEqual(self.M.shape, (2, 2))
        self.assertEqual((self.M.ny, self.M.nu), (2, 2))
        self.assertTrue(self.M.is_continuous)

    def test_single_entry(self):
        G = TransferFunction(SisoRational([1.], [1., 1.]), dt=0.1)
        self.assertEqual(G.shape, (1, 1))
        self.assertEqual(G.timedomain, Discrete(0.1))

    def test_immutable(self):
        with self.assertRaises(ValueError):
            self.M.matrix[0, 0] = SisoRational([3.])

    def test_invalid(self):
        with self.assertRaises(DimensionMismatch):
            TransferFunction([[1., 2.], [3.]])
        with self.assertRaises(DimensionMismatch):
            TransferFunction([])
        with self.assertRaises(DegenerateSystem):
            TransferFunction([['a']])

    def test_mixed_kinds(self):
        mixed = TransferFunction([[SisoZpk([], [-1.], 1.), SisoRational([1.], [1., 2.])]])
        self.assertIs(mixed.kind, SisoRational)
        self.assertTrue(all(isinstance(entry, SisoRational) for entry in mixed.matrix.flat))

        all_zpk = TransferFunction([[SisoZpk([], [-1.], 1.), SisoZpk([-2.], [-3.], 2.)]])
        self.assertIs(all_zpk.kind, SisoZpk)

    def test_evaluate(self):
        self.assertEqual(self.G.evaluate(0.)[0, 0], 1.)
        s = 1j
        expected = np.array([[1. / (s + 1.), 2. / (s + 3.)],
                             [0., s / (s + 2.)]])
        np.testing.assert_allclose(self.M.evaluate(s), expected)
        np.testing.assert_allclose(self.M(s), expected)

    def test_evaluate_at_pole(self):
        value = self.M.evaluate(-1.)
        self.assertTrue(np.isinf(value[0, 0]))
        self.assertTrue(np.isfinite(value[1, 1]))

    def test_sum_product(self):
        s = 0.2 + 1j
        N = TransferFunction([[SisoRational([1.], [1., 5.])], [SisoRational([3.], [1., 1.])]])

        np.testing.assert_allclose((self.M + self.M).evaluate(s), 2. * self.M.evaluate(s))
        np.testing.assert_allclose((self.M - self.M).evaluate(s), np.zeros((2, 2)))
        np.testing.assert_allclose((self.M * N).evaluate(s), self.M.evaluate(s).dot(N.evaluate(s)))
        np.testing.assert_allclose((-self.M).evaluate(s), -self.M.evaluate(s))
        np.testing.assert_allclose((self.M / 2.).evaluate(s), self.M.evaluate(s) / 2.)

        with self.assertRaises(DimensionMismatch):
            N * self.M

    def test_sampling_time_mismatch(self):
        G1 = tf([1.], [1., 0.5], 0.1)
        G2 = tf([1.], [1., 0.5], 0.2)
        with self.assertRaises(SamplingTimeMismatch):
            G1 + G2
        with self.assertRaises(SamplingTimeMismatch):
            G1 * self.G

    def test_undefined_sample_time(self):
        G1 = tf([1.], [1., 0.5], -1)
        G2 = tf([1.], [1., 0.5], 0.2)
        self.assertEqual((G1 * G2).timedomain, Discrete(0.2))
        self.assertEqual((G1 + G1).timedomain, Discrete.UNDEFINED)

    def test_inverse(self):
        s = 2.
        np.testing.assert_allclose((1. / self.G).evaluate(s), 1. / self.G.evaluate(s))
        with self.assertRaises(DimensionMismatch):
            self.M.inverse()

    def test_power(self):
        s = tf('s')
        G = 1. / (s ** 2 + 2. * s + 1.)
        self.assertTrue(G.isapprox(self.G))
        np.testing.assert_allclose((self.G ** 2).evaluate(1j), self.G.evaluate(1j) ** 2)

    def test_getitem(self):
        entry = self.M[0, 1]
        self.assertEqual(entry.shape, (1, 1))
        self.assertEqual(entry.matrix[0, 0], SisoRational([2.], [1., 3.]))
        self.assertEqual(self.M[:, 0].shape, (2, 1))

    def test_equality(self):
        same = TransferFunction([[SisoRational([2.], [2., 4., 2.])]])
        self.assertEqual(self.G, same)
        self.assertNotEqual(self.G, TransferFunction(self.G.matrix, dt=0.1))
        self.assertTrue(self.G.isapprox(same))

    def test_numvec_denvec(self):
        num = self.M.numvec()
        den = self.M.denvec()
        np.testing.assert_array_equal(num[1][1], [1., 0.])
        np.testing.assert_array_equal(den[0][1], [1., 3.])
        np.testing.assert_array_equal(num[1][0], [0.])

    def test_properness(self):
        self.assertTrue(self.M.is_proper())
        self.assertFalse(tf([1., 0., 0.], [1., 1.]).is_proper())


class TestBuilders(unittest.TestCase):

    def test_tf_siso(self):
        G = tf([1.], [1., 2., 1.])
        self.assertEqual(G.evaluate(0.)[0, 0], 1.)
        self.assertTrue(G.is_continuous)

        Gd = tf([1.], [1., -0.5], 0.1)
        self.assertEqual(Gd.dt, 0.1)
        self.assertEqual(tf([1.], [1., -0.5], Ts=0.1), Gd)

    def test_tf_mimo(self):
        G = tf([[[1.], [2., 0.]], [[0.], [1.]]], [1., 1.])
        self.assertEqual(G.shape, (2, 2))
        np.testing.assert_allclose(G.evaluate(1.), [[0.5, 1.], [0., 0.5]])

        H = tf([[[1.], [1.]]], [[[1., 1.], [1., 2.]]])
        np.testing.assert_allclose(H.evaluate(0.), [[1., 0.5]])

        with self.assertRaises(DimensionMismatch):
            tf([[[1.], [1.]], [[1.]]], [1., 1.])

    def test_tf_variables(self):
        s = tf('s')
        np.testing.assert_allclose(s.evaluate(2.), [[2.]])
        z = tf('z', 0.1)
        self.assertEqual(z.timedomain, Discrete(0.1))
        self.assertTrue(tf('z').timedomain.is_undefined)
        with self.assertRaises(DegenerateSystem):
            tf('s', 0.1)
        with self.assertRaises(DegenerateSystem):
            tf('x')

    def test_tf_static(self):
        K = tf(np.array([[1., 2.], [3., 4.]]))
        self.assertEqual(K.shape, (2, 2))
        np.testing.assert_allclose(K.evaluate(10.), [[1., 2.], [3., 4.]])
        self.assertEqual(tf(2.).shape, (1, 1))

    def test_zpk(self):
        G = zpk([-3.], [-1., -2.], 2.)
        self.assertIs(G.kind, SisoZpk)
        np.testing.assert_allclose(G.evaluate(0.), [[3.]])

        Gd = zpk([], [0.5], 1., 0.1)
        self.assertEqual(Gd.dt, 0.1)

        M = zpk([[[], [-1.]]], [[[-2.], [-3.]]], [[1., 2.]])
        self.assertEqual(M.shape, (1, 2))
        np.testing.assert_allclose(M.evaluate(0.), [[0.5, 2. / 3.]])

    def test_zpk_conversion(self):
        G = tf([2., 6.], [1., 3., 2.])
        Z = zpk(G)
        self.assertIs(Z.kind, SisoZpk)
        self.assertTrue(Z.isapprox(G))
        self.assertIs(tf(Z).kind, SisoRational)

    def test_wrong_arguments(self):
        with self.assertRaises(TypeError):
            tf([1.], [1., 1.], 0.1, 3)
        with self.assertRaises(TypeError):
            tf([1.], [1., 1.], 0.1, Ts=0.1)


if __name__ == '__main__':
    unittest.main()
