import pytest
import requests

from calorietrack.routers.advisor.llm import (
    NO_RESPONSE,
    UNPARSEABLE_RESPONSE,
    AdvisorLLMError,
    GeminiClient,
    build_contents,
    extract_first_candidate_text,
)
from calorietrack.routers.advisor.schemas import PromptTurn


class FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


TURNS = [
    PromptTurn(role="system", text="context"),
    PromptTurn(role="assistant", text="ack"),
    PromptTurn(role="user", text="question"),
]


def _client(**kwargs):
    defaults = dict(api_key="secret", model="gemini-test", base_url="https://example.test/models/", timeout=5)
    defaults.update(kwargs)
    return GeminiClient(**defaults)


def test_extract_first_candidate_text():
    raw = {"candidates": [{"content": {"parts": [{"text": "Eat more greens."}, {"text": "ignored"}]}}]}
    assert extract_first_candidate_text(raw) == "Eat more greens."


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{"text": None}]}}]},
        {"candidates": "nope"},
    ],
)
def test_extract_returns_sentinel_for_unexpected_shapes(raw):
    assert extract_first_candidate_text(raw) == UNPARSEABLE_RESPONSE


def test_extract_none_response():
    assert extract_first_candidate_text(None) == NO_RESPONSE


def test_build_contents_maps_roles():
    contents = build_contents(TURNS)
    assert [c["role"] for c in contents] == ["user", "model", "user"]
    assert contents[2]["parts"] == [{"text": "question"}]


def test_send_prompt_posts_generate_content(monkeypatch):
    seen = {}

    def fake_post(url, params, json, timeout):
        seen.update(url=url, params=params, json=json, timeout=timeout)
        return FakeResponse({"candidates": []})

    monkeypatch.setattr("calorietrack.routers.advisor.llm.requests.post", fake_post)
    assert _client().send_prompt(TURNS) == {"candidates": []}
    assert seen["url"] == "https://example.test/models/gemini-test:generateContent"
    assert seen["params"] == {"key": "secret"}
    assert seen["json"] == {"contents": build_contents(TURNS)}
    assert seen["timeout"] == 5


def test_send_prompt_wraps_http_errors(monkeypatch):
    monkeypatch.setattr(
        "calorietrack.routers.advisor.llm.requests.post",
        lambda *a, **kw: FakeResponse({}, status_code=503),
    )
    with pytest.raises(AdvisorLLMError):
        _client().send_prompt(TURNS)


def test_send_prompt_wraps_timeouts(monkeypatch):
    def fake_post(*_args, **_kwargs):
        raise requests.Timeout("read timed out")

    monkeypatch.setattr("calorietrack.routers.advisor.llm.requests.post", fake_post)
    with pytest.raises(AdvisorLLMError):
        _client().send_prompt(TURNS)


def test_send_prompt_wraps_invalid_json(monkeypatch):
    monkeypatch.setattr(
        "calorietrack.routers.advisor.llm.requests.post",
        lambda *a, **kw: FakeResponse(ValueError("no json")),
    )
    with pytest.raises(AdvisorLLMError):
        _client().send_prompt(TURNS)


@pytest.mark.parametrize("kwargs", [{"enabled": False}, {"api_key": ""}])
def test_send_prompt_refuses_without_backend(monkeypatch, kwargs):
    def fake_post(*_args, **_kwargs):
        raise AssertionError("must not be called")

    monkeypatch.setattr("calorietrack.routers.advisor.llm.requests.post", fake_post)
    with pytest.raises(AdvisorLLMError):
        _client(**kwargs).send_prompt(TURNS)
