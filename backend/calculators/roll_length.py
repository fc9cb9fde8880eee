"""
Remaining length of material on a roll.

The wound material is an annulus between the core (ID) and the outside (OD).
Its area divided by the material thickness is the unwound length:

    length_in = pi * (od_in^2 - id_in^2) / (4 * thickness_in)

All inputs are converted to inches first and nothing is rounded here; the
live preview runs at full precision and rounding happens when a roll is saved.
"""

import logging
import math

from ..schemas import CalcInvalid, CalcResult, CalcValid, RollInputs
from ..units import to_inches

logger = logging.getLogger(__name__)

INVALID_GEOMETRY_MESSAGE = "Check that OD > ID and thickness > 0"

INCHES_PER_FOOT = 12.0
INCHES_PER_YARD = 36.0
METERS_PER_INCH = 0.0254


def compute(od: float, id: float, thickness: float, unit) -> CalcResult:
    """Length of material on the roll, or CalcInvalid when the geometry can't be wound."""
    od_in = to_inches(od, unit)
    id_in = to_inches(id, unit)
    t_in = to_inches(thickness, unit)

    # Written as negated comparisons so NaN inputs fall through to invalid
    if not (od_in > id_in) or not (t_in > 0):
        return CalcInvalid(message=INVALID_GEOMETRY_MESSAGE)

    length_in = (math.pi * (od_in * od_in - id_in * id_in)) / (4 * t_in)

    # Infinite OD, or a thickness so large the length underflows to 0
    if not math.isfinite(length_in) or not (length_in > 0):
        logger.debug("Rejected non-finite/zero length for od=%s id=%s t=%s", od, id, thickness)
        return CalcInvalid(message=INVALID_GEOMETRY_MESSAGE)

    return CalcValid(
        length_in=length_in,
        length_ft=length_in / INCHES_PER_FOOT,
        length_m=length_in * METERS_PER_INCH,
        length_yd=length_in / INCHES_PER_YARD,
    )


def compute_inputs(inputs: RollInputs) -> CalcResult:
    return compute(inputs.od, inputs.id, inputs.thickness, inputs.unit)
