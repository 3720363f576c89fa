import httpx
import pytest

from career_core.domain.exceptions import ApiError, NetworkError, RateLimitError, ValidationError
from career_core.domain.models import AttachmentPart, GenerateRequest, ProviderTurn, TextPart
from career_core.providers.gemini_client import GeminiClient


class SettingsStub:
    gemini_api_key = "g" * 20
    http_timeout = 1.0
    gemini_base_url = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model = None


OK_BODY = {
    "candidates": [
        {
            "content": {"role": "model", "parts": [{"text": "hel"}, {"text": "lo"}]},
            "finishReason": "STOP",
        }
    ],
    "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 2, "totalTokenCount": 5},
}


def _fake_client(monkeypatch, status_code=200, body=None, captured=None, raise_exc=None):
    class Resp:
        def __init__(self):
            self.status_code = status_code
            self.text = "error body"

        def json(self):
            if isinstance(body, Exception):
                raise body
            return body

    class Client:
        def __init__(self, *a, **kw):
            pass

        def __enter__(self):
            return self

        def __exit__(self, *a):
            return False

        def post(self, url, json=None, headers=None, **_):
            if raise_exc:
                raise raise_exc
            if captured is not None:
                captured["url"] = url
                captured["payload"] = json
                captured["headers"] = headers
            return Resp()

    monkeypatch.setattr("httpx.Client", Client)


def test_gemini_client_basic(monkeypatch):
    _fake_client(monkeypatch, body=OK_BODY)
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("hi")])
    res = GeminiClient(SettingsStub()).generate(req)
    assert res.text == "hello"
    assert res.finish_reason == "STOP"
    assert res.usage.total_tokens == 5


def test_gemini_payload_shape(monkeypatch):
    captured = {}
    _fake_client(monkeypatch, body=OK_BODY, captured=captured)
    req = GenerateRequest(
        provider="gemini",
        model="resume-extract",
        parts=[TextPart("instruction"), AttachmentPart(data="AAE=", mime_type="application/pdf")],
        system_instruction="be nice",
        history=[ProviderTurn(role="model", parts=[TextPart("hello")])],
        response_schema={"type": "OBJECT", "properties": {}},
    )
    GeminiClient(SettingsStub()).generate(req)
    payload = captured["payload"]
    assert captured["url"].endswith("/models/gemini-2.5-flash:generateContent")
    assert captured["headers"]["x-goog-api-key"] == SettingsStub.gemini_api_key
    assert payload["systemInstruction"] == {"parts": [{"text": "be nice"}]}
    assert payload["contents"][0] == {"role": "model", "parts": [{"text": "hello"}]}
    assert payload["contents"][1]["role"] == "user"
    assert payload["contents"][1]["parts"] == [
        {"text": "instruction"},
        {"inlineData": {"mimeType": "application/pdf", "data": "AAE="}},
    ]
    assert payload["generationConfig"]["responseMimeType"] == "application/json"
    assert payload["generationConfig"]["responseSchema"] == {"type": "OBJECT", "properties": {}}
    assert payload["generationConfig"]["temperature"] == 0.2


def test_free_text_request_has_no_json_config(monkeypatch):
    captured = {}
    _fake_client(monkeypatch, body=OK_BODY, captured=captured)
    req = GenerateRequest(provider="gemini", model="summarizer", parts=[TextPart("x")])
    GeminiClient(SettingsStub()).generate(req)
    config = captured["payload"]["generationConfig"]
    assert "responseMimeType" not in config
    assert "systemInstruction" not in captured["payload"]


def test_model_override(monkeypatch):
    class Overridden(SettingsStub):
        gemini_model = "gemini-2.5-pro"

    captured = {}
    _fake_client(monkeypatch, body=OK_BODY, captured=captured)
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    GeminiClient(Overridden()).generate(req)
    assert "/models/gemini-2.5-pro:generateContent" in captured["url"]


def test_thought_parts_are_skipped(monkeypatch):
    body = {"candidates": [{"content": {"parts": [{"text": "thinking", "thought": True}, {"text": "answer"}]}}]}
    _fake_client(monkeypatch, body=body)
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    assert GeminiClient(SettingsStub()).generate(req).text == "answer"


def test_missing_api_key():
    class NoKey(SettingsStub):
        gemini_api_key = None

    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    with pytest.raises(ValidationError):
        GeminiClient(NoKey()).generate(req)


def test_unknown_model():
    req = GenerateRequest(provider="gemini", model="nope", parts=[TextPart("x")])
    with pytest.raises(ValidationError):
        GeminiClient(SettingsStub()).generate(req)


@pytest.mark.parametrize(
    "status_code,exc_type",
    [(429, RateLimitError), (400, ApiError), (500, ApiError)],
)
def test_http_errors(monkeypatch, status_code, exc_type):
    _fake_client(monkeypatch, status_code=status_code, body={})
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    with pytest.raises(exc_type):
        GeminiClient(SettingsStub()).generate(req)


def test_network_error(monkeypatch):
    _fake_client(monkeypatch, raise_exc=httpx.ConnectTimeout("timed out"))
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    with pytest.raises(NetworkError):
        GeminiClient(SettingsStub()).generate(req)


def test_malformed_body(monkeypatch):
    _fake_client(monkeypatch, body=ValueError("not json"))
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    with pytest.raises(ApiError) as exc:
        GeminiClient(SettingsStub()).generate(req)
    assert exc.value.code == "MALFORMED_RESPONSE"


def test_blocked_prompt(monkeypatch):
    _fake_client(monkeypatch, body={"promptFeedback": {"blockReason": "SAFETY"}})
    req = GenerateRequest(provider="gemini", model="career-chat", parts=[TextPart("x")])
    with pytest.raises(ApiError) as exc:
        GeminiClient(SettingsStub()).generate(req)
    assert exc.value.code == "PROMPT_BLOCKED"


def test_request_requires_leading_text_part():
    with pytest.raises(ValidationError):
        GenerateRequest(provider="gemini", model="career-chat", parts=[])
    with pytest.raises(ValidationError):
        GenerateRequest(
            provider="gemini",
            model="career-chat",
            parts=[AttachmentPart(data="AAE=", mime_type="image/png"), TextPart("late")],
        )
