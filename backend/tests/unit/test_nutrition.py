from datetime import date

from calorietrack.models.users import ActivityLevel, GoalType, Sex
from calorietrack.utils.nutrition import (
    DerivedMetrics,
    age_on,
    bmi,
    bmr,
    daily_allowance,
    derive_metrics,
    goal_type_for,
    tdee,
)


def test_age_on_respects_birthday():
    dob = date(1990, 6, 15)
    assert age_on(dob, date(2024, 6, 14)) == 33
    assert age_on(dob, date(2024, 6, 15)) == 34
    assert age_on(date(2030, 1, 1), date(2024, 1, 1)) == 0


def test_bmi_basic_and_zero_height():
    assert bmi(70, 175) == 22.86
    assert bmi(70, 0) == 0.0


def test_bmr_mifflin_st_jeor():
    assert bmr(80, 180, 30, "MALE") == 1780
    assert bmr(60, 165, 25, Sex.female) == 1345.25


def test_tdee_uses_activity_multiplier():
    assert tdee(1780, ActivityLevel.moderately_active) == 2759
    assert tdee(1000, "sedentary") == 1200
    # unknown levels fall back to sedentary
    assert tdee(1000, "COUCH") == 1200


def test_daily_allowance_by_goal():
    assert daily_allowance(2759, 0.5, GoalType.lose) == 2209
    assert daily_allowance(2759, 0.5, GoalType.gain) == 3309
    assert daily_allowance(2759, 0.5, GoalType.maintain) == 2759
    assert daily_allowance(2759, None, "LOSE") == 2759


def test_derive_metrics_combines_everything():
    m = derive_metrics(
        weight_kg=80,
        height_cm=180,
        dob=date(1994, 1, 1),
        sex=Sex.male,
        activity_level=ActivityLevel.moderately_active,
        weekly_goal_kg=0.5,
        goal_type=GoalType.lose,
        today=date(2024, 12, 24),
    )
    assert m == DerivedMetrics(bmi=24.69, bmr=1780, tdee=2759, allowed_daily_intake=2209)
    assert m.to_dict()["allowed_daily_intake"] == 2209


def test_goal_type_follows_target_weight():
    assert goal_type_for(80.0, 72.5) == "LOSE"
    assert goal_type_for(60.0, 65.0) == "GAIN"
    assert goal_type_for(70.0, 70.0) == "MAINTAIN"
