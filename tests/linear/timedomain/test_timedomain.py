import copy
import pickle
import unittest

from ltibox.linear.src.timedomain import Continuous, Discrete, timedomain_from_dt, is_compatible, \
    common_timedomain, timedomain_mismatches
from ltibox.linear.utils.options import set_options, reset_options
from ltibox.utils.exceptions import DegenerateSystem, SamplingTimeMismatch


class TestTimeDomain(unittest.TestCase):

    def tearDown(self):
        reset_options()

    def test_from_dt(self):
        self.assertEqual(timedomain_from_dt(None), Continuous())
        self.assertEqual(timedomain_from_dt(0), Continuous())
        self.assertEqual(timedomain_from_dt(0.1), Discrete(0.1))
        self.assertTrue(timedomain_from_dt(-1).is_undefined)

        for dt in [-0.5, 'a']:
            with self.assertRaises(DegenerateSystem):
                timedomain_from_dt(dt)

    def test_properties(self):
        td = Discrete(0.2)
        self.assertTrue(td.is_discrete)
        self.assertFalse(td.is_continuous)
        self.assertEqual(td.dt, 0.2)
        self.assertIsNone(Continuous().dt)

    def test_immutable(self):
        td = Discrete(0.2)
        with self.assertRaises(AttributeError):
            td._dt = 0.3
        self.assertEqual(copy.deepcopy(td), td)
        self.assertEqual(pickle.loads(pickle.dumps(td)), td)
        self.assertEqual(pickle.loads(pickle.dumps(Continuous())), Continuous())

    def test_compatibility(self):
        self.assertTrue(is_compatible(Continuous(), Continuous()))
        self.assertTrue(is_compatible(Discrete(1.), Discrete(1.)))
        self.assertFalse(is_compatible(Discrete(1.), Discrete(2.)))
        self.assertFalse(is_compatible(Continuous(), Discrete(1.)))
        self.assertTrue(is_compatible(Discrete.UNDEFINED, Discrete(2.)))
        self.assertFalse(is_compatible(Discrete.UNDEFINED, Continuous()))

    def test_sampling_time_tolerance(self):
        self.assertFalse(is_compatible(Discrete(0.1), Discrete(0.1 + 1e-12)))
        set_options(sampling_time_rtol=1e-9)
        self.assertTrue(is_compatible(Discrete(0.1), Discrete(0.1 + 1e-12)))

    def test_common_timedomain(self):
        self.assertEqual(common_timedomain(Discrete.UNDEFINED, Discrete(0.5)), Discrete(0.5))
        self.assertEqual(common_timedomain(Discrete.UNDEFINED, Discrete.UNDEFINED), Discrete.UNDEFINED)
        self.assertEqual(common_timedomain(Continuous()), Continuous())

        with self.assertRaises(SamplingTimeMismatch):
            common_timedomain(Discrete(1.), Discrete(2.))

    def test_every_mismatch_reported(self):
        mismatches = timedomain_mismatches([Discrete(1.), Discrete(2.), Continuous(), Discrete(1.)])
        self.assertEqual(len(mismatches), 2)


if __name__ == '__main__':
    unittest.main()
