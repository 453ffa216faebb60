from __future__ import annotations

from datetime import timedelta

from calorietrack.core.config import get_settings

SETTINGS = get_settings()

GEMINI_API_URL = SETTINGS.gemini_api_url
GEMINI_MODEL = SETTINGS.gemini_model
GEMINI_TIMEOUT = SETTINGS.gemini_timeout_seconds

# ~2000 tokens at ~4 chars/token of prior chat turns
HISTORY_CHAR_BUDGET = int(SETTINGS.advisor_history_tokens * SETTINGS.advisor_chars_per_token)

MEAL_HISTORY_DAYS = SETTINGS.advisor_meal_history_days
WEIGHT_HISTORY_MONTHS = SETTINGS.advisor_weight_history_months
ARTIFACT_MAX_AGE = timedelta(days=SETTINGS.advisor_artifact_max_age_days)
