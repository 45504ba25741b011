"""ltibox Exception Classes

Errors raised by the system algebra derive from :class:`LTIError` and from the closest builtin exception, so that
``except ValueError`` style handlers keep working. Settings errors report themselves through the console writer in
the same way the rest of the settings machinery does.
"""
import ltibox.utils.cout_utils as cout


class LTIError(Exception):
    """Base class of every error raised by the system algebra."""
    pass


class DimensionMismatch(LTIError, ValueError):
    """
    Operand shapes are not compatible with the requested operation, or the matrices given to a state-space model do
    not describe a valid realisation.
    """
    pass


class SamplingTimeMismatch(LTIError, ValueError):
    """The time domains of the operands differ."""
    pass


class IncompatibleTimeDomain(SamplingTimeMismatch):
    """Raised when two operands cannot be promoted to a common representation because of their time domains."""
    pass


class DegenerateSystem(LTIError, ValueError):
    """Zero denominator, invalid sample time or a system that cannot be realised."""
    pass


class SingularClosedLoop(LTIError, ArithmeticError):
    """The feedthrough term of a feedback loop, ``I + D_P D_K``, is numerically singular."""
    pass


class UnsupportedBroadcast(LTIError, TypeError):
    """
    A single-input single-output system was combined with a non-diagonal array, or with an operand type the algebra
    does not know about.
    """
    pass


class DefaultValueBaseException(Exception):
    def __init__(self, variable, value, message=''):
        super().__init__(message)
        self.variable = variable
        self.value = value

    def output_message(self, message, color_id=3):
        cout.cout_wrap.print_separator(3)
        cout.cout_wrap(message, color_id)
        cout.cout_wrap.print_separator(3)


class NoDefaultValueException(DefaultValueBaseException):
    def __init__(self, variable, value=None, message=''):
        message = 'The variable {:s} has no default value, please indicate one'.format(variable)
        super().__init__(variable, value, message=message)
        self.output_message(message)


class NotValidSetting(DefaultValueBaseException):
    """
    Raised when a user gives a setting an invalid value
    """

    def __init__(self, setting, variable, options, value=None, message=''):
        message = 'The setting %s with entry %s is not one of the valid options: %s' % (setting, variable, options)
        super().__init__(variable, value, message=message)
        self.output_message(message, color_id=4)


class NotValidSettingType(DefaultValueBaseException):
    """
    Raised when a user gives a setting with an invalid type
    """

    def __init__(self, setting, variable, data_types, value=None, message=''):
        message = 'The setting %s with entry %s is not one of the valid types: %s' % (setting, variable, data_types)
        super().__init__(variable, value, message=message)
        self.output_message(message, color_id=4)


class NotRecognisedSetting(DefaultValueBaseException):
    """
    Raised when a setting is not recognised
    """
    def __init__(self, setting, value=None, message=''):
        message = 'Unrecognised setting {:s}. Please check input file and/or documentation'.format(setting)
        super().__init__(variable=setting, value=value, message=message)
        self.output_message(message, color_id=4)
