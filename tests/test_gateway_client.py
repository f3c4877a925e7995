from __future__ import annotations

import json

import httpx
import pytest

from ptflow_ai.common.config import Settings
from ptflow_ai.common.schema import GenerationRequest
from ptflow_ai.gateway.client import GatewayClient, INVALID_MODEL_MESSAGE, PROVIDERS_IGNORED_MESSAGE

REQUEST = GenerationRequest(system_prompt="You are a PT assistant.", user_prompt="Summarize the session.")


def _settings(**overrides: object) -> Settings:
    values = {"api_key": "sk-test", "base_url": "https://openrouter.test/api/v1", "app_url": "https://clinic.test"}
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


class _Recorder:
    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.calls: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _client(recorder: _Recorder, **overrides: object) -> GatewayClient:
    return GatewayClient(_settings(**overrides), transport=httpx.MockTransport(recorder))


def _completion(content: object) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]})


def test_missing_key_fails_without_network() -> None:
    recorder = _Recorder(_completion("unused"))
    result = _client(recorder, api_key="").generate(REQUEST)
    assert result.text == ""
    assert result.error == "OpenRouter API key not configured"
    assert recorder.calls == []


def test_success_returns_content_verbatim() -> None:
    content = "  S: Pain 3/10\n\nO: ROM 0-110  \n"
    result = _client(_Recorder(_completion(content))).generate(REQUEST)
    assert result.ok
    assert result.text == content


def test_request_shape_and_headers() -> None:
    recorder = _Recorder(_completion("ok"))
    req = GenerationRequest(system_prompt="sys", user_prompt="usr", temperature=0.3, max_tokens=1500)
    _client(recorder, model="anthropic/claude-3-haiku").generate(req)

    assert len(recorder.calls) == 1
    sent = recorder.calls[0]
    assert sent.method == "POST"
    assert str(sent.url) == "https://openrouter.test/api/v1/chat/completions"
    assert sent.headers["Authorization"] == "Bearer sk-test"
    assert sent.headers["HTTP-Referer"] == "https://clinic.test"
    assert sent.headers["X-Title"] == "PT Flow AI"
    body = json.loads(sent.content)
    assert body["model"] == "anthropic/claude-3-haiku"
    assert body["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "usr"},
    ]
    assert body["temperature"] == pytest.approx(0.3)
    assert body["max_tokens"] == 1500


def test_request_model_overrides_default() -> None:
    recorder = _Recorder(_completion("ok"))
    req = GenerationRequest(system_prompt="sys", user_prompt="usr", model="openai/gpt-4o-mini")
    _client(recorder).generate(req)
    assert json.loads(recorder.calls[0].content)["model"] == "openai/gpt-4o-mini"


@pytest.mark.parametrize("body", [{"choices": []}, {"choices": [{"message": {}}]}, {"id": "x"}, {"choices": [{"message": {"content": None}}]}])
def test_missing_content_is_empty_text_not_error(body: dict) -> None:
    result = _client(_Recorder(httpx.Response(200, json=body))).generate(REQUEST)
    assert result.text == ""
    assert result.error is None


@pytest.mark.parametrize("status", [400, 404, 503])
def test_providers_ignored_is_translated(status: int) -> None:
    body = '{"error":{"message":"All providers have been ignored. To change your default ignored providers, visit settings.","code":404}}'
    result = _client(_Recorder(httpx.Response(status, text=body))).generate(REQUEST)
    assert result.text == ""
    assert result.error == PROVIDERS_IGNORED_MESSAGE
    assert "openrouter.ai/settings/preferences" in result.error


def test_invalid_model_is_translated() -> None:
    body = '{"error":{"message":"acme/nope is not a valid model ID","code":400}}'
    result = _client(_Recorder(httpx.Response(400, text=body))).generate(REQUEST)
    assert result.error == INVALID_MODEL_MESSAGE


@pytest.mark.parametrize(
    "status, expected",
    [(502, "API request failed: 502 Bad Gateway"), (302, "API request failed: 302 Found")],
)
def test_other_errors_do_not_leak_body(status: int, expected: str) -> None:
    body = '{"error":{"message":"internal trace id 123 upstream exploded"}}'
    result = _client(_Recorder(httpx.Response(status, text=body))).generate(REQUEST)
    assert result.text == ""
    assert result.error == expected


def test_timeout_becomes_error_result() -> None:
    recorder = _Recorder(httpx.ReadTimeout("timed out"))
    result = _client(recorder, request_timeout=5.0).generate(REQUEST)
    assert result.text == ""
    assert result.error == "OpenRouter request timed out after 5s"


def test_connection_error_becomes_error_result() -> None:
    result = _client(_Recorder(httpx.ConnectError("Name or service not known"))).generate(REQUEST)
    assert result.text == ""
    assert result.error == "Name or service not known"


def test_malformed_json_becomes_error_result() -> None:
    result = _client(_Recorder(httpx.Response(200, text="<html>not json</html>"))).generate(REQUEST)
    assert result.text == ""
    assert result.error
