from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from .config import GEMINI_API_URL, GEMINI_MODEL, GEMINI_TIMEOUT, SETTINGS
from .schemas import PromptTurn

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response received from AI service."
UNPARSEABLE_RESPONSE = "Unable to parse AI response."

# Gemini only knows "user" and "model"; system context travels as a user turn.
_GEMINI_ROLES = {"system": "user", "user": "user", "assistant": "model"}


class AdvisorLLMError(RuntimeError):
    """The text-generation backend could not be reached or refused the request."""


def build_contents(turns: Sequence[PromptTurn]) -> List[Dict[str, Any]]:
    return [
        {"role": _GEMINI_ROLES.get(turn.role, "user"), "parts": [{"text": turn.text}]}
        for turn in turns
    ]


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        model: str = GEMINI_MODEL,
        base_url: str = GEMINI_API_URL,
        timeout: float = GEMINI_TIMEOUT,
        enabled: bool = True,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout
        self.enabled = enabled

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.model}:generateContent"

    def send_prompt(self, turns: Sequence[PromptTurn]) -> Dict[str, Any]:
        """POST the ordered turns to generateContent and return the raw JSON."""
        if not self.enabled:
            raise AdvisorLLMError("LLM disabled (ADVISOR_LLM_ENABLED=false)")
        if not self.api_key:
            raise AdvisorLLMError("GEMINI_API_KEY is not configured")

        try:
            r = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json={"contents": build_contents(turns)},
                timeout=self.timeout,
            )
            r.raise_for_status()
            return r.json()
        except requests.RequestException as exc:
            raise AdvisorLLMError(f"Gemini request failed: {exc}") from exc
        except ValueError as exc:
            raise AdvisorLLMError("Gemini returned a non-JSON body") from exc


def extract_first_candidate_text(raw: Optional[Dict[str, Any]]) -> str:
    """candidates[0].content.parts[0].text, or a fixed sentinel; never raises."""
    if raw is None:
        return NO_RESPONSE
    try:
        text = raw["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        logger.error("Error parsing Gemini response: %r", exc)
        return UNPARSEABLE_RESPONSE
    if not isinstance(text, str):
        logger.error("Gemini candidate text has unexpected type %s", type(text).__name__)
        return UNPARSEABLE_RESPONSE
    return text


def get_llm_client() -> GeminiClient:
    return GeminiClient(
        api_key=SETTINGS.gemini_api_key,
        enabled=SETTINGS.advisor_llm_enabled,
    )
