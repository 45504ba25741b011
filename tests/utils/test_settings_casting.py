import ltibox.utils.settings as settings
import ltibox.utils.exceptions as exceptions
import ltibox.utils.cout_utils as cout
from copy import deepcopy
import numpy as np
import unittest


class TestSettings(unittest.TestCase):
    """
    Tests the settings utilities module
    """

    def setUp(self):
        cout.cout_quiet()
        self.in_dict = dict()
        self.types_dict = dict()
        self.default_dict = dict()
        self.options_dict = dict()

        self.in_dict['integer_var'] = '1234'
        self.types_dict['integer_var'] = 'int'
        self.default_dict['integer_var'] = 0

        self.in_dict['float_var'] = '1.234'
        self.types_dict['float_var'] = 'float'
        self.default_dict['float_var'] = 0.0

        self.in_dict['str_var'] = 'zpk'
        self.types_dict['str_var'] = 'str'
        self.default_dict['str_var'] = 'rational'
        self.options_dict['str_var'] = ['rational', 'zpk']

        self.in_dict['bool_var'] = 'on'
        self.types_dict['bool_var'] = 'bool'
        self.default_dict['bool_var'] = False

        self.in_dict['list_var'] = 'aa, bb, 11, ss'
        self.types_dict['list_var'] = 'list(str)'
        self.default_dict['list_var'] = ['a', 'b']

        self.in_dict['float_list_var'] = '1.1, 2.2, 3.3'
        self.types_dict['float_list_var'] = 'list(float)'
        self.default_dict['float_list_var'] = np.array([0.0, -1.1])

    def test_assigned_values(self):
        in_dict = deepcopy(self.in_dict)
        settings.to_custom_types(in_dict, self.types_dict, self.default_dict, self.options_dict)

        self.assertEqual(in_dict['integer_var'], 1234, 'Integer test for assigned values not passed')
        self.assertEqual(in_dict['float_var'], 1.234, 'Float test for assigned values not passed')
        self.assertEqual(in_dict['str_var'], 'zpk', 'String test for assigned values not passed')
        self.assertTrue(in_dict['bool_var'], 'Bool test for assigned values not passed')
        self.assertEqual(in_dict['list_var'], ['aa', 'bb', '11', 'ss'], 'List test for assigned values not passed')
        np.testing.assert_array_equal(in_dict['float_list_var'], [1.1, 2.2, 3.3])

    def test_default_values(self):
        in_default_dict = dict()
        settings.to_custom_types(in_default_dict, self.types_dict, self.default_dict, self.options_dict)

        self.assertEqual(in_default_dict['integer_var'], 0, 'Integer test for default values not passed')
        self.assertEqual(in_default_dict['float_var'], 0., 'Float test for default values not passed')
        self.assertEqual(in_default_dict['str_var'], 'rational', 'String test for default values not passed')
        self.assertFalse(in_default_dict['bool_var'], 'Bool test for default values not passed')
        self.assertEqual(in_default_dict['list_var'], ['a', 'b'], 'String list test for default values not passed')
        np.testing.assert_array_equal(in_default_dict['float_list_var'], [0.0, -1.1])

        # defaults are copied
        in_default_dict['list_var'].append('c')
        self.assertEqual(self.default_dict['list_var'], ['a', 'b'])

    def test_no_default_value(self):
        for k in self.types_dict:
            temp_default_dict = self.default_dict.copy()
            temp_default_dict[k] = None

            temp_in_dict = deepcopy(self.in_dict)
            del temp_in_dict[k]
            with self.assertRaises(exceptions.NoDefaultValueException):
                settings.to_custom_types(temp_in_dict, self.types_dict, temp_default_dict)

    def test_invalid_values(self):
        in_dict = deepcopy(self.in_dict)
        in_dict['str_var'] = 'polynomial'
        with self.assertRaises(exceptions.NotValidSetting):
            settings.to_custom_types(in_dict, self.types_dict, self.default_dict, self.options_dict)

        in_dict = deepcopy(self.in_dict)
        in_dict['integer_var'] = 'twelve'
        with self.assertRaises(exceptions.NotValidSettingType):
            settings.to_custom_types(in_dict, self.types_dict, self.default_dict)

        in_dict = deepcopy(self.in_dict)
        in_dict['unknown_var'] = '1'
        with self.assertRaises(exceptions.NotRecognisedSetting):
            settings.to_custom_types(in_dict, self.types_dict, self.default_dict)

    def test_str2bool(self):
        for value in ['off', 'False', '0', 'no', '', False, np.bool_(False)]:
            self.assertFalse(settings.str2bool(value))
        for value in ['on', 'True', '1', 'yes', True]:
            self.assertTrue(settings.str2bool(value))

    def test_settings_table(self):
        descriptions = {k: 'Description of ' + k for k in self.types_dict}
        table = settings.SettingsTable().generate(self.types_dict, self.default_dict, descriptions,
                                                  self.options_dict)
        for k in self.types_dict:
            self.assertIn('``' + k + '``', table)
        self.assertIn('Options', table)
        self.assertIn('``rational``, ``zpk``', table)


if __name__ == '__main__':
    unittest.main()
