from __future__ import annotations

import calendar
from datetime import date, time, timedelta
from typing import Dict, List, Sequence, Tuple

from .config import MEAL_HISTORY_DAYS, WEIGHT_HISTORY_MONTHS
from .schemas import MealRecord, WeightRecord


# ----------------------------
# Windows (trailing, inclusive)
# ----------------------------

def meal_window(today: date, days: int = MEAL_HISTORY_DAYS) -> Tuple[date, date]:
    """``days`` calendar days ending today, today included."""
    return today - timedelta(days=max(days, 1) - 1), today


def _months_before(d: date, months: int) -> date:
    index = d.year * 12 + (d.month - 1) - months
    year, month0 = divmod(index, 12)
    month = month0 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def weight_window(today: date, months: int = WEIGHT_HISTORY_MONTHS) -> Tuple[date, date]:
    return _months_before(today, months), today


# ----------------------------
# Formatting
# ----------------------------

def _fmt_weekday_date(d: date) -> str:
    # "Tue, Dec 24"
    return f"{d.strftime('%a, %b')} {d.day}"


def _fmt_month_day(d: date) -> str:
    # "Dec 24"
    return f"{d.strftime('%b')} {d.day}"


def _fmt_time(t: time) -> str:
    # "08:30 AM"
    return t.strftime("%I:%M %p")


def _meal_label(days: int) -> str:
    return f"Meal History (Last {days} Days)"


def _weight_label(months: int) -> str:
    return "Weight History (Last Month)" if months == 1 else f"Weight History (Last {months} Months)"


def no_meals_sentinel(days: int = MEAL_HISTORY_DAYS) -> str:
    return f"{_meal_label(days)}: No meals logged."


def no_weights_sentinel(months: int = WEIGHT_HISTORY_MONTHS) -> str:
    return f"{_weight_label(months)}: No weight entries logged."


# ----------------------------
# Meals -> per-day blocks
# ----------------------------

def build_meal_history(records: Sequence[MealRecord], days: int = MEAL_HISTORY_DAYS) -> str:
    """
    Groups meals by day, newest day first. Each day gets a header with the
    calorie subtotal, then its meals in ascending time order. Meals logged at
    the same time keep their input order.
    """
    if not records:
        return no_meals_sentinel(days)

    by_day: Dict[date, List[MealRecord]] = {}
    for record in records:
        by_day.setdefault(record.entry_date, []).append(record)

    lines = [f"{_meal_label(days)}:"]
    for day in sorted(by_day, reverse=True):
        meals = sorted(by_day[day], key=lambda m: m.entry_time)
        subtotal = sum(int(m.calories or 0) for m in meals)
        lines.append("")
        lines.append(f"{_fmt_weekday_date(day)} (Total: {subtotal} cal):")
        lines.extend(
            f"  - {_fmt_time(m.entry_time)}: {m.food_name} ({int(m.calories or 0)} cal)"
            for m in meals
        )
    return "\n".join(lines)


# ----------------------------
# Weights -> list + net trend
# ----------------------------

def weight_trend(change: float) -> str:
    if change > 0:
        return "gained"
    if change < 0:
        return "lost"
    return "maintained"


def build_weight_history(records: Sequence[WeightRecord], months: int = WEIGHT_HISTORY_MONTHS) -> str:
    """
    One line per entry in date order. With two or more entries a closing line
    reports the net change between the first and the last entry of the window.
    """
    if not records:
        return no_weights_sentinel(months)

    ordered = sorted(records, key=lambda r: r.entry_date)
    lines = [f"{_weight_label(months)}:"]
    lines.extend(f"  - {_fmt_month_day(r.entry_date)}: {r.weight_kg:.1f} kg" for r in ordered)

    if len(ordered) >= 2:
        change = ordered[-1].weight_kg - ordered[0].weight_kg
        lines.append(f"  Overall: {weight_trend(change)} {abs(change):.1f} kg")
    return "\n".join(lines)
