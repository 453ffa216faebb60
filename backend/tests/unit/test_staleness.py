from datetime import datetime, timedelta, timezone

from calorietrack.routers.advisor.staleness import (
    ArtifactState,
    RegenerationDecision,
    artifact_state,
    plan_regeneration,
)

NOW = datetime(2024, 12, 24, 9, 0, 0, tzinfo=timezone.utc)


def test_artifact_states():
    assert artifact_state(None, None, NOW) is ArtifactState.absent
    assert artifact_state("", NOW, NOW) is ArtifactState.absent
    assert artifact_state("plan", NOW - timedelta(days=6, hours=23), NOW) is ArtifactState.fresh
    assert artifact_state("plan", NOW - timedelta(days=7), NOW) is ArtifactState.stale
    assert artifact_state("plan", NOW - timedelta(days=30), NOW) is ArtifactState.stale


def test_text_without_timestamp_is_stale():
    assert artifact_state("plan", None, NOW) is ArtifactState.stale


def test_absent_plan_regenerates_without_review():
    assert plan_regeneration(None, None, NOW) == RegenerationDecision(
        regenerate_plan=True, review_first=False
    )


def test_stale_plan_is_reviewed_first():
    decision = plan_regeneration("old plan", NOW - timedelta(days=8), NOW)
    assert decision == RegenerationDecision(regenerate_plan=True, review_first=True)


def test_fresh_plan_is_left_alone():
    decision = plan_regeneration("plan", NOW - timedelta(days=1), NOW)
    assert decision == RegenerationDecision(regenerate_plan=False, review_first=False)


def test_custom_max_age():
    decision = plan_regeneration("plan", NOW - timedelta(days=2), NOW, max_age=timedelta(days=1))
    assert decision.regenerate_plan and decision.review_first


def test_timestamp_read_back_without_tzinfo_counts_as_utc():
    stored = datetime(2024, 12, 17, 10, 0, 0)  # as SQLite hands it back
    assert artifact_state("plan", stored, NOW) is ArtifactState.fresh
    assert artifact_state("plan", stored - timedelta(hours=1), NOW) is ArtifactState.stale
