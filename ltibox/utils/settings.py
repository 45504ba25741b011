"""
Settings Utilities

Settings are declared as three dictionaries keyed by the setting name: ``settings_types`` (one of ``int``,
``float``, ``str``, ``bool``, ``list(str)``, ``list(float)``, ``dict``), ``settings_default`` and
``settings_description``. Optionally ``settings_options`` restricts the admissible values of ``str``, ``int`` and
``list(str)`` settings.

Values read from a settings file are strings and are cast to the declared type by :func:`to_custom_types`.
"""
import numpy as np
import configobj

import ltibox.utils.exceptions as exceptions
import ltibox.utils.cout_utils as cout


def cast(k, v, pytype):
    try:
        val = pytype(v)
    except (TypeError, ValueError):
        raise exceptions.NotValidSettingType(k, v, pytype.__name__)
    return val


def to_custom_types(dictionary, types, default, options=dict()):
    """
    Casts, in place, the entries of ``dictionary`` to the types given in ``types``. Missing entries take the value in
    ``default``.

    Args:
        dictionary (dict): Settings given by the user.
        types (dict): Setting types.
        default (dict): Default values.
        options (dict): Admissible values for some of the settings.

    Raises:
        exceptions.NotRecognisedSetting: if ``dictionary`` contains a setting that is not declared in ``types``.
        exceptions.NotValidSetting: if a setting is not one of its options.
        exceptions.NoDefaultValueException: if a setting is missing and has no default.
    """
    for k in dictionary.keys():
        if k not in types:
            raise exceptions.NotRecognisedSetting(k)

    for k, v in types.items():
        dictionary[k] = get_custom_type(dictionary, v, k, default)

    check_settings_in_options(dictionary, types, options)


def get_default_value(default_value, k, v):
    if default_value is None:
        raise exceptions.NoDefaultValueException(k)
    if v in ['float', 'int', 'str']:
        converted_value = cast(k, default_value, eval(v))
    elif v == 'bool':
        converted_value = str2bool(default_value)
    elif v == 'list(float)':
        converted_value = np.array(default_value, dtype=float)
    else:
        converted_value = default_value.copy()
    notify_default_value(k, converted_value)
    return converted_value


def get_custom_type(dictionary, v, k, default):
    if k not in dictionary:
        return get_default_value(default.get(k), k, v)

    value = dictionary[k]
    if v == 'int':
        return cast(k, value, int)

    elif v == 'float':
        return cast(k, value, float)

    elif v == 'str':
        return cast(k, value, str)

    elif v == 'bool':
        return str2bool(value)

    elif v == 'list(str)':
        if isinstance(value, str):
            value = value.split(',')
        # getting rid of leading and trailing spaces
        return list(map(lambda x: x.strip(), value))

    elif v == 'list(float)':
        if isinstance(value, np.ndarray):
            return value.astype(float)
        if isinstance(value, (list, tuple)):
            return np.array([cast(k, item, float) for item in value])
        value = value.strip('[]')
        if value.find(',') < 0:
            return np.fromstring(value, sep=' ', dtype=float)
        else:
            return np.fromstring(value, sep=',', dtype=float)

    elif v == 'dict':
        if not isinstance(value, dict):
            raise TypeError('Setting for {:s} is not a dictionary'.format(k))
        return value

    else:
        raise TypeError('Variable %s has an unknown type (%s) that cannot be casted' % (k, v))


def check_settings_in_options(settings, settings_types, settings_options):
    """
    Checks that settings given a type ``str`` or ``int`` and allowable options are indeed valid.

    Args:
        settings (dict): Dictionary of processed settings
        settings_types (dict): Dictionary of settings types
        settings_options (dict): Dictionary of options (may be empty)

    Raises:
        exception.NotValidSetting: if the setting is not allowed.
    """
    for k in settings_options:
        if settings_types[k] in ['int', 'str']:
            value = settings[k]
            if value not in settings_options[k]:
                raise exceptions.NotValidSetting(k, value, settings_options[k])

        elif settings_types[k] == 'list(str)':
            for item in settings[k]:
                if item not in settings_options[k] and item:
                    raise exceptions.NotValidSetting(k, item, settings_options[k])


def load_config_file(file_name: str) -> dict:
    """Reads a settings file.

    Args:
        file_name (str): path and file name of the file to be read by ``configobj``.

    Returns:
        config (dict): a ``ConfigObj`` object that behaves like a dictionary
    """
    dict_config = configobj.ConfigObj(file_name, file_error=True)
    return dict_config


def str2bool(string):
    false_list = ['false', 'off', '0', 'no']
    if isinstance(string, (bool, np.bool_)):
        return bool(string)

    if not string:
        return False
    elif str(string).lower() in false_list:
        return False
    else:
        return True


def notify_default_value(k, v):
    cout.cout_wrap('Variable ' + k + ' has no assigned value in the settings file.')
    cout.cout_wrap('    will default to the value: ' + str(v), 1)


class SettingsTable:
    """
    Generates the documentation's setting table at runtime.

    Produces a table in reStructuredText format with the settings' names, types, description and default values that
    is appended to the docstring of the class declaring the settings:

    .. code-block:: python

        settings_table = settings.SettingsTable()
        __doc__ += settings_table.generate(settings_types, settings_default, settings_description)

    """
    def __init__(self):
        self.n_fields = 4
        self.field_length = [0] * self.n_fields
        self.titles = ['Name', 'Type', 'Description', 'Default']

        self.settings_types = dict()
        self.settings_description = dict()
        self.settings_default = dict()
        self.settings_options = dict()
        self.settings_options_strings = dict()

        self.line_format = ''

    def generate(self, settings_types, settings_default, settings_description, settings_options=dict(),
                 header_line=None):
        """
        Returns a rst-format table with the settings' names, types, description and default values

        Args:
            settings_types (dict): Setting types.
            settings_default (dict): Settings default value.
            settings_description (dict): Setting description.
            settings_options (dict): Admissible values (optional).
            header_line (str): Header line description (optional)

        Returns:
            str: .rst formatted string with a table containing the settings' information.
        """
        self.settings_types = settings_types
        self.settings_default = settings_default
        self.settings_description = settings_description

        if header_line is None:
            header_line = 'The settings accepted are given by a dictionary, with the following key-value pairs:'

        if settings_options:
            self.settings_options = settings_options
            self.n_fields += 1
            self.field_length.append(0)
            self.titles.append('Options')
            self.process_options()

        self.set_field_length()
        self.line_format = self.setting_line_format()

        table_string = '\n    ' + header_line + '\n'
        table_string += '\n    ' + self.print_divider_line()
        table_string += '    ' + self.print_header()
        table_string += '    ' + self.print_divider_line()
        for setting in self.settings_types:
            table_string += '    ' + self.print_setting(setting)
        table_string += '    ' + self.print_divider_line()

        return table_string

    def process_options(self):
        for k, v in self.settings_options.items():
            self.settings_options_strings[k] = ', '.join(['``%s``' % str(option) for option in v])

    def set_field_length(self):
        field_lengths = [[] for i in range(self.n_fields)]
        for setting in self.settings_types:
            field_lengths[0].append(len(setting) + 4)
            field_lengths[1].append(len(str(self.settings_types[setting])) + 4)
            field_lengths[2].append(len(self.settings_description.get(setting, '')))
            field_lengths[3].append(len(str(self.settings_default.get(setting, ''))) + 4)
            if self.settings_options:
                field_lengths[4].append(len(self.settings_options_strings.get(setting, '')))

        for i_field in range(self.n_fields):
            field_lengths[i_field].append(len(self.titles[i_field]))
            self.field_length[i_field] = max(field_lengths[i_field]) + 2  # two spaces as column dividers

    def print_divider_line(self):
        divider = ''
        for i_field in range(self.n_fields):
            divider += '='*(self.field_length[i_field]-2) + '  '
        return divider + '\n'

    def print_setting(self, setting):
        fields = ['``' + str(setting) + '``',
                  '``' + str(self.settings_types.get(setting, '')) + '``',
                  self.settings_description.get(setting, ''),
                  '``' + str(self.settings_default.get(setting, '')) + '``']
        if self.settings_options:
            fields.append(self.settings_options_strings.get(setting, ''))
        return self.line_format.format(fields) + '\n'

    def print_header(self):
        return self.line_format.format(self.titles) + '\n'

    def setting_line_format(self):
        string = ''
        for i_field in range(self.n_fields):
            string += '{0[' + str(i_field) + ']:<' + str(self.field_length[i_field]) + '}'
        return string
