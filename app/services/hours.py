"""
Hour Reconciliation Engine

A report's category hours must add up to the day's total hours.

Target hours:
- standard => first number found in the shift string ("8時間（9:00〜18:00）" -> 8)
- flex     => end - start (wrapping past midnight) minus break, in hours,
              floored at 0 and rounded to one decimal

Current total = sns + wix + design + other.
The two match when they differ by no more than HOURS_TOLERANCE.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Mapping, Optional, Union

from app.constants import CATEGORY_KEYS

HOURS_TOLERANCE = 0.01
MINUTES_PER_DAY = 24 * 60
DEFAULT_FLEX_TOTAL = "8.0"

_NUMBER_RE = re.compile(r"(\d+(\.\d+)?)")
_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

Number = Union[int, float, str, Decimal, None]


def coerce_hours(value: Number) -> float:
    """Coerce form input to a float; blanks, garbage, inf and nan count as 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_shift_hours(shift: Optional[str]) -> float:
    """Extract the first integer or decimal number from a shift string."""
    if not shift:
        return 0.0
    match = _NUMBER_RE.search(shift)
    return coerce_hours(match.group(1)) if match else 0.0


def parse_clock(value: str) -> int:
    """
    Convert an HH:MM clock time to minutes since midnight.

    Raises:
        ValueError: if the value is not a valid same-day clock time
    """
    match = _CLOCK_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return hours * 60 + minutes


def calculate_flex_total(start: str, end: str, break_hours: Number = 0) -> float:
    """
    Calculate worked hours for a flex day.

    Args:
        start: Start time, HH:MM
        end: End time, HH:MM (earlier than start means the shift crossed midnight)
        break_hours: Break length in hours

    Returns:
        Worked hours rounded half-up to one decimal, never negative
    """
    elapsed = parse_clock(end) - parse_clock(start)
    if elapsed < 0:
        elapsed += MINUTES_PER_DAY

    break_minutes = coerce_hours(break_hours) * 60
    worked_minutes = max(0.0, elapsed - break_minutes)

    # Round the binary value, so 423 minutes (7.0499...h) gives 7.0, not 7.1
    hours = Decimal(worked_minutes / 60)
    return float(hours.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def parse_flex_total(work_hours: Optional[str]) -> str:
    """
    Recover the flex total from a stored display string like "7.5h (Flex)".

    Falls back to DEFAULT_FLEX_TOTAL when the string has no usable total.
    """
    head = (work_hours or "").split("h")[0].strip()
    try:
        Decimal(head)
    except InvalidOperation:
        return DEFAULT_FLEX_TOTAL
    return head


def sum_category_hours(category_hours: Mapping[str, Number]) -> float:
    """Sum the four category hour values."""
    return sum(coerce_hours(category_hours.get(key)) for key in CATEGORY_KEYS)


def target_hours(work_type: str, work_hours: str, flex_total: Number = None) -> float:
    """Return the total the category hours must reconcile with."""
    if work_type == "flex":
        return coerce_hours(flex_total)
    return parse_shift_hours(work_hours)


def hours_match(current: float, target: float) -> bool:
    """True when the category total is within tolerance of the target."""
    # 8.0 vs 7.99 is a gap of exactly 0.01, not 0.010000000000000231
    return round(abs(current - target), 9) <= HOURS_TOLERANCE


def format_hours(value: Number) -> str:
    """Render an hour value without a trailing .0 for whole numbers."""
    number = coerce_hours(value)
    if number == int(number):
        return str(int(number))
    return f"{number:g}"
