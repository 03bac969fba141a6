"""Calendar labels for availability dates.

Gregorian locales get a single "Oct 18, 2025" label. The Persian locale gets a
two-part Jalali (solar Hijri) label such as ("شنبه 26", "مهر 1404").

The Gregorian -> Jalali conversion follows the 33-year break-table algorithm
used by the jalaali reference implementations; integer division and modulo
truncate toward zero as in that algorithm.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, NamedTuple, Tuple

logger = logging.getLogger(__name__)

GREGORIAN_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Indexed by date.weekday() (Monday = 0)
WEEKDAY_NAMES: Dict[str, Tuple[str, ...]] = {
    "fa": ("دوشنبه", "سه‌شنبه", "چهارشنبه", "پنج‌شنبه", "جمعه", "شنبه", "یکشنبه"),
    "en": ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"),
}

JALALI_MONTH_NAMES: Dict[str, Tuple[str, ...]] = {
    "fa": (
        "فروردین", "اردیبهشت", "خرداد", "تیر", "مرداد", "شهریور",
        "مهر", "آبان", "آذر", "دی", "بهمن", "اسفند",
    ),
    "en": (
        "Farvardin", "Ordibehesht", "Khordad", "Tir", "Mordad", "Shahrivar",
        "Mehr", "Aban", "Azar", "Dey", "Bahman", "Esfand",
    ),
}

_BREAKS = (
    -61, 9, 38, 199, 426, 686, 756, 818, 1111, 1181,
    1210, 1635, 2060, 2097, 2192, 2262, 2324, 2394, 2456, 3178,
)


class JalaliDate(NamedTuple):
    year: int
    month: int
    day: int


@dataclass(frozen=True)
class CalendarLabel:
    text: str
    sub_text: str = ""


def is_persian(locale: str) -> bool:
    normalized = (locale or "").lower()
    return normalized == "fa" or normalized.startswith(("fa-", "fa_"))


def _div(a: int, b: int) -> int:
    return int(a / b)


def _mod(a: int, b: int) -> int:
    return a - _div(a, b) * b


def _jal_cal(jy: int) -> Tuple[int, int]:
    """Return (leap, march) for Jalali year jy: leap is the position in the 4-year
    cycle (0 for a leap year) and march is the March day of Farvardin 1st."""
    if jy < _BREAKS[0] or jy >= _BREAKS[-1]:
        raise ValueError(f"Jalali year {jy} is out of the supported range")

    gy = jy + 621
    leap_j = -14
    jp = _BREAKS[0]
    jump = 0
    for jm in _BREAKS[1:]:
        jump = jm - jp
        if jy < jm:
            break
        leap_j += _div(jump, 33) * 8 + _div(_mod(jump, 33), 4)
        jp = jm

    n = jy - jp
    leap_j += _div(n, 33) * 8 + _div(_mod(n, 33) + 3, 4)
    if _mod(jump, 33) == 4 and jump - n == 4:
        leap_j += 1

    leap_g = _div(gy, 4) - _div((_div(gy, 100) + 1) * 3, 4) - 150
    march = 20 + leap_j - leap_g

    if jump - n < 6:
        n = n - jump + _div(jump + 4, 33) * 33
    leap = _mod(_mod(n + 1, 33) - 1, 4)
    if leap == -1:
        leap = 4
    return leap, march


def _g2d(gy: int, gm: int, gd: int) -> int:
    """Julian day number of a Gregorian date."""
    d = (
        _div((gy + _div(gm - 8, 6) + 100100) * 1461, 4)
        + _div(153 * _mod(gm + 9, 12) + 2, 5)
        + gd
        - 34840408
    )
    return d - _div(_div(gy + 100100 + _div(gm - 8, 6), 100) * 3, 4) + 752


def to_jalali(value: date) -> JalaliDate:
    """Convert a Gregorian date to the Jalali calendar."""
    jdn = _g2d(value.year, value.month, value.day)
    jy = value.year - 621
    leap, march = _jal_cal(jy)
    k = jdn - _g2d(value.year, 3, march)

    if k >= 0:
        if k <= 185:
            return JalaliDate(jy, 1 + _div(k, 31), _mod(k, 31) + 1)
        k -= 186
    else:
        jy -= 1
        k += 179
        if leap == 1:
            k += 1
    return JalaliDate(jy, 7 + _div(k, 30), _mod(k, 30) + 1)


def gregorian_label(value: date) -> CalendarLabel:
    return CalendarLabel(f"{GREGORIAN_MONTHS[value.month - 1]} {value.day:02d}, {value.year}")


def jalali_label(value: date, locale: str = "fa") -> CalendarLabel:
    names = "fa" if is_persian(locale) else "en"
    jalali = to_jalali(value)
    weekday = WEEKDAY_NAMES[names][value.weekday()]
    month = JALALI_MONTH_NAMES[names][jalali.month - 1]
    return CalendarLabel(
        text=f"{weekday} {jalali.day:02d}",
        sub_text=f"{month} {jalali.year}",
    )


def format_label(value: date, locale: str) -> CalendarLabel:
    """Locale-appropriate label for value.

    Dates outside the Jalali break table keep the Gregorian label.
    """
    if is_persian(locale):
        try:
            return jalali_label(value, locale)
        except ValueError:
            logger.warning("No Jalali label for %s, using Gregorian", value)
    return gregorian_label(value)
