"""ltibox

Algebra of linear time invariant systems: state-space and transfer function models, conversion between the two and
their interconnection (series, parallel, feedback, concatenation and block building).

Example:

    >>> import ltibox
    >>> G = ltibox.tf([1.], [1., 2., 1.])
    >>> T = ltibox.feedback(G)
    >>> ltibox.dcgain(T)
    array([[0.5]])

"""
from ltibox.version import __version__

from ltibox.linear.src.timedomain import Continuous, Discrete
from ltibox.linear.src.libss import StateSpace
from ltibox.linear.src.libtf import TransferFunction
from ltibox.linear.src.builders import tf, zpk, ss
from ltibox.linear.src.conversion import ss2tf, tf2ss, promote
from ltibox.linear.src.connections import series, parallel, feedback, append, hcat, vcat, sysblock, \
    diagonal_expand, array2mimo, sensitivity, comp_sensitivity, input_sensitivity, output_sensitivity, \
    input_comp_sensitivity, output_comp_sensitivity, G_PS, G_CS, gangoffour, feedback2dof, starprod, lft
from ltibox.linear.src.analysis import evalfr, freqresp, dcgain, poles, isstable, zpkdata, ssdata, numvec, denvec, \
    isproper, iscontinuous, isdiscrete
from ltibox.linear.utils.options import get_option, set_options, reset_options, load_options
from ltibox.utils.exceptions import LTIError, DimensionMismatch, SamplingTimeMismatch, IncompatibleTimeDomain, \
    DegenerateSystem, SingularClosedLoop, UnsupportedBroadcast
