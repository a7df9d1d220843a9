import json

import httpx
import pytest

from lumina.constants import FALLBACK_INSIGHT
from lumina.services import ai_service
from lumina.settings import Settings


def configure_with(handler, api_key="test-key"):
    settings = Settings(GEMINI_API_KEY=api_key)
    ai_service.configure(lambda: settings, transport=httpx.MockTransport(handler))
    return settings


def text_response(text):
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


@pytest.fixture(autouse=True)
def reset_ai_service():
    yield
    ai_service.configure(None)


def test_vision_image_returns_data_uri():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "candidates": [
                    {"content": {"parts": [{"text": "here"}, {"inlineData": {"mimeType": "image/jpeg", "data": "QUJD"}}]}}
                ]
            },
        )

    configure_with(handler)

    assert ai_service.generate_vision_image("a cabin by a lake") == "data:image/jpeg;base64,QUJD"
    assert "gemini-2.5-flash-image:generateContent" in seen["url"]
    assert "key=test-key" in seen["url"]
    assert seen["body"]["generationConfig"]["imageConfig"] == {"aspectRatio": "1:1"}
    assert "a cabin by a lake" in seen["body"]["contents"][0]["parts"][0]["text"]


def test_vision_image_without_image_part_is_none():
    configure_with(lambda request: text_response("sorry"))

    assert ai_service.generate_vision_image("anything") is None


def test_vision_image_http_error_is_none():
    configure_with(lambda request: httpx.Response(500, json={"error": "down"}))

    assert ai_service.generate_vision_image("anything") is None


def test_daily_insight_uses_model_text():
    configure_with(lambda request: text_response("  Keep going, one step at a time. "))

    assert ai_service.get_daily_insight("0 overdue tasks") == "Keep going, one step at a time."


def test_daily_insight_falls_back_without_key():
    def handler(request):
        raise AssertionError("no request expected")

    configure_with(handler, api_key="")

    assert ai_service.get_daily_insight("status") == FALLBACK_INSIGHT


def test_daily_insight_falls_back_on_transport_error():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    configure_with(handler)

    assert ai_service.get_daily_insight("status") == FALLBACK_INSIGHT


def test_planning_suggestions_parse_json_payload():
    payload = [
        {"habit": "Run 20 minutes", "description": "Build base fitness"},
        {"habit": "", "description": "dropped"},
        {"habit": "Stretch", "description": "Stay loose"},
    ]
    configure_with(lambda request: text_response(json.dumps(payload)))

    suggestions = ai_service.get_planning_suggestions("run a half marathon")

    assert [item["habit"] for item in suggestions] == ["Run 20 minutes", "Stretch"]


def test_planning_suggestions_bad_json_is_empty():
    configure_with(lambda request: text_response("not json"))

    assert ai_service.get_planning_suggestions("goals") == []
    assert ai_service.get_planning_suggestions("   ") == []


@pytest.mark.parametrize(
    "body",
    [
        [{"error": "x"}],
        {"candidates": [{"content": {"parts": ["oops"]}}]},
        {"candidates": ["oops"]},
        {"candidates": [{"content": "oops"}]},
    ],
)
def test_unexpected_response_shapes_fall_back(body):
    configure_with(lambda request: httpx.Response(200, json=body))

    assert ai_service.get_daily_insight("status") == FALLBACK_INSIGHT
    assert ai_service.generate_vision_image("a lake") is None
    assert ai_service.get_planning_suggestions("goals") == []


def test_non_dict_inline_data_is_ignored():
    configure_with(
        lambda request: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"inlineData": "QUJD"}]}}]})
    )

    assert ai_service.generate_vision_image("a lake") is None
