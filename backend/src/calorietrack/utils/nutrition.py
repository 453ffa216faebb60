from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict

ACTIVITY_MULTIPLIERS: Dict[str, float] = {
    "SEDENTARY": 1.2,
    "LIGHTLY_ACTIVE": 1.375,
    "MODERATELY_ACTIVE": 1.55,
    "VERY_ACTIVE": 1.725,
}

# 1 kg body fat ~ 7700 kcal, spread over 7 days ~ 1100 kcal/day per kg/week.
KCAL_PER_KG_WEEK = 1100


@dataclass
class DerivedMetrics:
    bmi: float = 0.0
    bmr: float = 0.0
    tdee: int = 0
    allowed_daily_intake: int = 0

    def to_dict(self) -> Dict[str, float]:
        return {
            "bmi": float(self.bmi),
            "bmr": float(self.bmr),
            "tdee": int(self.tdee),
            "allowed_daily_intake": int(self.allowed_daily_intake),
        }


def _enum_value(x) -> str:
    return str(getattr(x, "value", x)).upper()


def age_on(dob: date, today: date) -> int:
    """Full years between ``dob`` and ``today`` (birthday-aware)."""
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return max(0, years)


def bmi(weight_kg: float, height_cm: float) -> float:
    height_m = float(height_cm or 0.0) / 100.0
    if height_m <= 0:
        return 0.0
    return round(float(weight_kg or 0.0) / (height_m * height_m), 2)


def bmr(weight_kg: float, height_cm: float, age: int, sex) -> float:
    """Mifflin-St Jeor."""
    base = 10 * float(weight_kg) + 6.25 * float(height_cm) - 5 * int(age)
    return base + 5 if _enum_value(sex) == "MALE" else base - 161


def tdee(bmr_kcal: float, activity_level) -> int:
    multiplier = ACTIVITY_MULTIPLIERS.get(_enum_value(activity_level), 1.2)
    return int(round(bmr_kcal * multiplier))


def daily_allowance(tdee_kcal: int, weekly_goal_kg: float, goal_type) -> int:
    adjustment = int(round(float(weekly_goal_kg or 0.0) * KCAL_PER_KG_WEEK))
    goal = _enum_value(goal_type)
    if goal == "LOSE":
        return tdee_kcal - adjustment
    if goal == "GAIN":
        return tdee_kcal + adjustment
    return tdee_kcal


def derive_metrics(
    weight_kg: float,
    height_cm: float,
    dob: date,
    sex,
    activity_level,
    weekly_goal_kg: float,
    goal_type,
    today: date,
) -> DerivedMetrics:
    age = age_on(dob, today)
    bmr_kcal = bmr(weight_kg, height_cm, age, sex)
    tdee_kcal = tdee(bmr_kcal, activity_level)
    return DerivedMetrics(
        bmi=bmi(weight_kg, height_cm),
        bmr=bmr_kcal,
        tdee=tdee_kcal,
        allowed_daily_intake=daily_allowance(tdee_kcal, weekly_goal_kg, goal_type),
    )


def goal_type_for(current_kg: float, target_kg: float) -> str:
    """LOSE/GAIN/MAINTAIN from where the target sits relative to today's weight."""
    if target_kg < current_kg:
        return "LOSE"
    if target_kg > current_kg:
        return "GAIN"
    return "MAINTAIN"
