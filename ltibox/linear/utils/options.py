"""Toolbox settings

Numerical tolerances and output options shared by the system algebra. A single :class:`LinearOptions` instance is
kept at module level and accessed through :func:`get_option`; it can be modified with :func:`set_options` or from a
settings file with :func:`load_options`::

    [ltibox]
    singular_tolerance = 1e-12
    print_info = on

"""
import ltibox.utils.settings as settings
import ltibox.utils.cout_utils as cout


class LinearOptions:
    """
    Settings of the system algebra.
    """
    settings_types = dict()
    settings_default = dict()
    settings_description = dict()
    settings_options = dict()

    settings_types['singular_tolerance'] = 'float'
    settings_default['singular_tolerance'] = 1e-13
    settings_description['singular_tolerance'] = 'Reciprocal condition number below which the feedthrough term of ' \
                                                 'a feedback loop is considered singular'

    settings_types['sampling_time_rtol'] = 'float'
    settings_default['sampling_time_rtol'] = 0.
    settings_description['sampling_time_rtol'] = 'Relative tolerance when comparing sample periods. ``0`` requires ' \
                                                 'exactly equal periods'

    settings_types['coefficient_rtol'] = 'float'
    settings_default['coefficient_rtol'] = 1e-10
    settings_description['coefficient_rtol'] = 'Leading numerator coefficients smaller than this, relative to the ' \
                                               'largest coefficient of the entry, are dropped after a state-space ' \
                                               'to transfer function conversion'

    settings_types['print_info'] = 'bool'
    settings_default['print_info'] = False
    settings_description['print_info'] = 'Report conversions and closed loops on the console'

    settings_types['print_precision'] = 'int'
    settings_default['print_precision'] = 4
    settings_description['print_precision'] = 'Significant digits of the coefficients in the textual rendering of ' \
                                              'transfer functions'

    settings_types['rational_form'] = 'str'
    settings_default['rational_form'] = 'rational'
    settings_description['rational_form'] = 'Scalar form of the entries of transfer functions obtained by conversion'
    settings_options['rational_form'] = ['rational', 'zpk']

    settings_table = settings.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description, settings_options)

    def __init__(self):
        self.settings = dict()
        self.initialise()

    def initialise(self, in_settings=None):
        new_settings = dict()
        if in_settings is not None:
            new_settings.update(in_settings)

        settings.to_custom_types(new_settings, self.settings_types, self.settings_default, self.settings_options)
        self.settings = new_settings

        if self.settings['print_info']:
            cout.cout_talk()
        else:
            cout.cout_quiet()

    def update(self, **kwargs):
        new_settings = dict(self.settings)
        new_settings.update(kwargs)
        self.initialise(new_settings)

    def __getitem__(self, item):
        return self.settings[item]


def _quiet_defaults():
    # the default notices are only of interest when reading a file
    talking = cout.cout_wrap.print_screen
    cout.cout_quiet()
    options = LinearOptions()
    if talking:
        cout.cout_talk()
    return options


options = _quiet_defaults()


def get_option(name):
    return options[name]


def set_options(**kwargs):
    """
    Modify some of the settings, keeping the value of the others.

    Examples:

        >>> set_options(singular_tolerance=1e-10, print_info=True)
    """
    options.update(**kwargs)


def reset_options():
    """Restore the default settings."""
    options.settings = _quiet_defaults().settings
    cout.cout_quiet()


def load_options(file_name):
    """
    Load the settings from a file. The settings are read from an ``[ltibox]`` section if present, else from the top
    level of the file.

    Args:
        file_name (str): Path to the settings file.
    """
    config = settings.load_config_file(file_name)
    if 'ltibox' in config:
        in_settings = dict(config['ltibox'])
    else:
        in_settings = dict(config)
    options.initialise(in_settings)
