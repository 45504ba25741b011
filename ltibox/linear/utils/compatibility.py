"""
Operand validation shared by the interconnection operators.

Every operator calls :func:`check_systems` with its operands and a dimension predicate. All the time domains are
scanned and every failing condition is reported in a single exception, which helps when composing many systems at
once.

A predicate is a callable taking the list of systems and returning a list of error messages (empty if the operands
are compatible).
"""
from ltibox.utils.exceptions import DimensionMismatch, SamplingTimeMismatch
from ltibox.linear.src.timedomain import timedomain_mismatches, common_timedomain


def check_systems(systems, predicate=None, operation='operation'):
    """
    Validates the operands of an interconnection.

    Args:
        systems (list(LTISystem)): Operands.
        predicate (callable (optional)): Dimension predicate.
        operation (str): Name of the operation, used in the error messages.

    Returns:
        TimeDomain: The finalised time domain shared by the operands.

    Raises:
        SamplingTimeMismatch: if any time domains differ. The message includes the dimension errors, if any.
        DimensionMismatch: if the dimension predicate fails.
    """
    systems = list(systems)
    if len(systems) < 1:
        raise DimensionMismatch('{:s} requires at least one system'.format(operation))

    timedomains = [sys.timedomain for sys in systems]
    td_errors = timedomain_mismatches(timedomains)
    dim_errors = predicate(systems) if predicate is not None else []

    if td_errors:
        raise SamplingTimeMismatch('Sampling time mismatch in {:s}: '.format(operation)
                                   + '; '.join(td_errors + dim_errors))
    if dim_errors:
        raise DimensionMismatch('Dimension mismatch in {:s}: '.format(operation) + '; '.join(dim_errors))

    return common_timedomain(*timedomains)


def same_outputs(systems):
    ny = systems[0].ny
    return ['operand {:g} has {:g} outputs, expected {:g}'.format(ith, sys.ny, ny)
            for ith, sys in enumerate(systems) if sys.ny != ny]


def same_inputs(systems):
    nu = systems[0].nu
    return ['operand {:g} has {:g} inputs, expected {:g}'.format(ith, sys.nu, nu)
            for ith, sys in enumerate(systems) if sys.nu != nu]


def same_shape(systems):
    shape = systems[0].shape
    return ['operand {:g} has shape {}, expected {}'.format(ith, sys.shape, shape)
            for ith, sys in enumerate(systems) if sys.shape != shape]


def chained(systems):
    """
    Outputs of each operand feed the inputs of the next one, ``u -> sys0 -> sys1 -> ... -> y``.
    """
    errors = []
    for ith in range(len(systems) - 1):
        if systems[ith].ny != systems[ith + 1].nu:
            errors.append('operand {:g} has {:g} outputs but operand {:g} has {:g} inputs'.format(
                ith, systems[ith].ny, ith + 1, systems[ith + 1].nu))
    return errors


def square(systems):
    return ['operand {:g} is not square, shape {}'.format(ith, sys.shape)
            for ith, sys in enumerate(systems) if sys.ny != sys.nu]


def loop(systems):
    """
    Forward path ``systems[0]`` closed by the return path ``systems[1]``.
    """
    plant, controller = systems
    errors = []
    if controller.nu != plant.ny:
        errors.append('feedback path has {:g} inputs but the forward path has {:g} outputs'.format(
            controller.nu, plant.ny))
    if controller.ny != plant.nu:
        errors.append('feedback path has {:g} outputs but the forward path has {:g} inputs'.format(
            controller.ny, plant.nu))
    return errors
