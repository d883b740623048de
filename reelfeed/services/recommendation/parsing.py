import math
import re

from reelfeed.services.recommendation.constants import HOURS_MIN_DAYS, UNKNOWN_AGE_DAYS

_VIEWS_RE = re.compile(r"(\d+(?:\.\d+)?)\s*([kmb万億])?", re.IGNORECASE)
_VIEW_MULTIPLIERS = {
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
    "万": 10_000,
    "億": 100_000_000,
}
_INT_RE = re.compile(r"(\d+)")

# Checked in order; first unit found wins.
# (unit tokens, day-equivalents per unit, minimum result in days)
_AGE_UNITS: list[tuple[tuple[str, ...], float, float]] = [
    (("second", "秒"), 0.0, 0.0),
    (("minute", "min", "分前"), 0.0, 0.0),
    (("hour", "時間"), 1 / 24, HOURS_MIN_DAYS),
    (("day", "日"), 1.0, 0.0),
    (("week", "週"), 7.0, 0.0),
    (("month", "か月", "ヶ月", "カ月", "月"), 30.0, 0.0),
    (("year", "年"), 365.0, 0.0),
]


def parse_views(text: str | None) -> float:
    """
    Parse a view-count label ("1.2M views", "12万回視聴", "1,234 views").

    Returns 0.0 when no number can be found.
    """
    if not text:
        return 0.0
    match = _VIEWS_RE.search(text.replace(",", ""))
    if not match:
        return 0.0
    try:
        value = float(match.group(1))
    except ValueError:
        return 0.0
    suffix = (match.group(2) or "").lower()
    return value * _VIEW_MULTIPLIERS.get(suffix, 1)


def parse_upload_age(text: str | None) -> float:
    """
    Approximate "days ago" from an upload-age label ("3 days ago", "2週間前").

    Unrecognized labels map to UNKNOWN_AGE_DAYS so they rank as old.
    """
    if not text:
        return UNKNOWN_AGE_DAYS
    lowered = text.lower()
    match = _INT_RE.search(lowered)
    amount = int(match.group(1)) if match else 0

    for tokens, days_per_unit, floor in _AGE_UNITS:
        if any(tok in lowered for tok in tokens):
            return max(amount * days_per_unit, floor)
    return UNKNOWN_AGE_DAYS


def parse_duration(text: str | None) -> int:
    """Duration label ("1:02:03", "12:34" or raw seconds) to seconds; 0 if unparseable."""
    if not text:
        return 0
    parts = text.strip().split(":")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        return 0
    if any(n < 0 for n in numbers) or len(numbers) > 3:
        return 0
    seconds = 0
    for n in numbers:
        seconds = seconds * 60 + n
    return seconds


def log_scale(value: float) -> float:
    """log10(value + 1), clamped at 0 for negative inputs."""
    return math.log10(max(0.0, value) + 1.0)
