"""
Inch / millimeter conversion and the rounding policy for each quantity.

Conversions return full precision. Callers round with round_to() using the
decimals for the quantity they hold:
- OD / ID: 3 decimals in either unit
- thickness: 4 decimals when going to mm, 5 decimals when going to inches
- saved lengths: 2 decimals
"""

import math
from decimal import Decimal

from .models import Unit

MM_PER_IN = 25.4
IN_PER_MM = 1 / MM_PER_IN

DIAMETER_DECIMALS = 3
THICKNESS_MM_DECIMALS = 4
THICKNESS_IN_DECIMALS = 5
LENGTH_DECIMALS = 2

# Applying a stored preset shows mm to the micron, inches to 5 places
PRESET_MM_DECIMALS = 3
PRESET_IN_DECIMALS = 5


def round_to(value: float, decimals: int = 3) -> float:
    """
    Round half up to `decimals` places. NaN and +/-inf round to 0.

    Values too large to scale (value * 10^decimals overflows) already have
    no fractional digits to round and come back unchanged.
    """
    if value is None or not math.isfinite(value):
        return 0.0
    p = 10 ** decimals
    scaled = value * p
    if not math.isfinite(scaled):
        return value
    return math.floor(scaled + 0.5) / p


def to_inches(value: float, unit) -> float:
    return value * IN_PER_MM if Unit(unit) == Unit.MILLIMETER else value


def to_millimeters(value: float, unit) -> float:
    return value * MM_PER_IN if Unit(unit) == Unit.INCH else value


def convert(value: float, from_unit, to_unit) -> float:
    """Convert between units at full precision."""
    if Unit(to_unit) == Unit.MILLIMETER:
        return to_millimeters(value, from_unit)
    return to_inches(value, from_unit)


def convert_diameter(value: float, from_unit, to_unit) -> float:
    """OD/ID conversion for a unit toggle — always 3 decimals."""
    return round_to(convert(value, from_unit, to_unit), DIAMETER_DECIMALS)


def convert_thickness(value: float, from_unit, to_unit) -> float:
    """Thickness conversion for a unit toggle — 4 decimals in mm, 5 in inches."""
    decimals = THICKNESS_MM_DECIMALS if Unit(to_unit) == Unit.MILLIMETER else THICKNESS_IN_DECIMALS
    return round_to(convert(value, from_unit, to_unit), decimals)


def format_number(value: float) -> str:
    """
    Plain string form of a stored number, as used in CSV cells and search.

    Whole numbers drop the fractional part (6.0 -> "6"); everything else
    uses the shortest digits that read back to the same float. Plain
    decimals are used down to 1e-6, exponents below that and from 1e21 up,
    written without zero padding ("1e-7", "1.5e+21").
    """
    if not isinstance(value, float):
        return str(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    exponent = int(exponent)
    if -7 < exponent < 0:
        return format(Decimal(text), "f")
    sign = "+" if exponent > 0 else "-"
    return f"{mantissa}e{sign}{abs(exponent)}"


def format_decimal(value: float, decimals: int = 3) -> str:
    """Display form with at most `decimals` places and no trailing zeros."""
    text = f"{round_to(value, decimals):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def unit_label(unit) -> str:
    return Unit(unit).value
