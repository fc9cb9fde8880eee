"""
CSV export of saved rolls.

Column order is fixed, every cell is quoted, embedded quotes are doubled.
Rows come out in the order given (the history is newest first); nothing is
sorted or filtered here. Lines are joined with "\\n" and there is no trailing
newline, so an empty history exports as the header line alone.
"""

import csv
import io
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional

from .config import settings
from .schemas import SavedRoll
from .units import format_number

CSV_HEADER = [
    "Saved At", "Name", "Unit", "OD", "ID", "Thickness",
    "Length_in", "Length_ft", "Length_m", "Length_yd",
]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def iso_timestamp(saved_at_ms: int) -> str:
    """Epoch milliseconds -> '2025-03-01T14:05:09.123Z'."""
    dt = _EPOCH + timedelta(milliseconds=saved_at_ms)
    return dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond // 1000:03d}Z"


def roll_row(roll: SavedRoll) -> list:
    return [
        iso_timestamp(roll.saved_at),
        roll.name or "",
        roll.unit.value,
        format_number(roll.od),
        format_number(roll.id),
        format_number(roll.thickness),
        format_number(roll.length_in),
        format_number(roll.length_ft),
        format_number(roll.length_m),
        format_number(roll.length_yd),
    ]


def export_csv(rows: Iterable[SavedRoll]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for roll in rows:
        writer.writerow(roll_row(roll))
    return buf.getvalue().removesuffix("\n")


def csv_filename(today: Optional[date] = None) -> str:
    """vinyl_rolls_2025-03-01.csv — UTC date unless one is given."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return f"{settings.CSV_FILENAME_PREFIX}_{today.isoformat()}.csv"
