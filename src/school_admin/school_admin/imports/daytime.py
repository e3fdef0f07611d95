from __future__ import annotations

import re

from ..core.constants import DAY_NAMES_EN, DAY_NAMES_ID
from ..core.exceptions import InvalidDay, InvalidTimeFormat

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def _build_day_tokens() -> dict[str, int]:
    tokens: dict[str, int] = {}
    for day in range(7):
        tokens[DAY_NAMES_ID[day].lower()] = day
        tokens[DAY_NAMES_EN[day].lower()] = day
        tokens[str(day)] = day
    tokens["jum'at"] = 4
    return tokens


DAY_TOKENS = _build_day_tokens()


def parse_day(token: str) -> int:
    """'Senin' / 'monday' / '0' -> 0 (Monday) .. 6 (Sunday)."""
    key = (token or "").strip().lower()
    if key not in DAY_TOKENS:
        raise InvalidDay(f"Day '{token}' is not valid (use Senin-Minggu, Monday-Sunday or 0-6)")
    return DAY_TOKENS[key]


def day_name(day_of_week: int) -> str:
    return DAY_NAMES_ID[day_of_week] if 0 <= day_of_week < 7 else str(day_of_week)


def excel_fraction_to_time(text: str) -> str:
    """Excel stores times as a fraction of a day: '0.5' -> '12:00'.

    Values that are not a plain number in [0, 1) come back unchanged.
    """
    if not text or ":" in text:
        return text
    try:
        fraction = float(text)
    except ValueError:
        return text
    if not 0 <= fraction < 1:
        return text

    total_minutes = round(fraction * 24 * 60)
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def normalize_time(text: str, label: str = "Time") -> str:
    """Validate H:MM / HH:MM and zero-pad to HH:MM."""
    value = excel_fraction_to_time((text or "").strip())
    match = _TIME_RE.match(value)
    if not match:
        raise InvalidTimeFormat(f"{label} '{text}' must use the HH:MM format")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidTimeFormat(f"{label} '{text}' is not a valid time of day")
    return f"{hours:02d}:{minutes:02d}"
