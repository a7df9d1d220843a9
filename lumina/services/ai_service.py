from __future__ import annotations

import json
import logging

import httpx

from lumina.constants import FALLBACK_INSIGHT

logger = logging.getLogger(__name__)

GENERATE_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

INSIGHT_INSTRUCTION = (
    "You are a warm, encouraging personal planning coach. "
    "Reply with exactly one short sentence (under 25 words) that motivates the user "
    "based on their status. No lists, no quotes, no emojis."
)

_SETTINGS_GETTER = None
_TRANSPORT = None


class AIServiceError(RuntimeError):
    pass


def configure(settings_getter, transport=None):
    global _SETTINGS_GETTER, _TRANSPORT
    _SETTINGS_GETTER = settings_getter
    _TRANSPORT = transport


def _settings():
    if _SETTINGS_GETTER is None:
        raise AIServiceError("AI service not configured")
    settings = _SETTINGS_GETTER()
    if not settings.ai_configured:
        raise AIServiceError("GEMINI_API_KEY not configured")
    return settings


def _generate(model: str, payload: dict) -> dict:
    settings = _settings()
    with httpx.Client(timeout=max(settings.request_timeout, 30.0), transport=_TRANSPORT) as client:
        response = client.post(
            GENERATE_URL.format(model=model),
            params={"key": settings.gemini_api_key},
            json=payload,
        )
    response.raise_for_status()
    return response.json()


def _parts(body) -> list[dict]:
    """Parts of the first candidate; anything not shaped like a part is skipped."""
    if not isinstance(body, dict):
        return []
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return []
    content = candidates[0].get("content")
    if not isinstance(content, dict) or not isinstance(content.get("parts"), list):
        return []
    return [part for part in content["parts"] if isinstance(part, dict)]


def _text(body: dict) -> str:
    return "".join(str(part.get("text") or "") for part in _parts(body)).strip()


def vision_prompt(prompt: str) -> str:
    return (
        f"A highly aesthetic, inspirational vision board image representing: {prompt}. "
        "Cinematic lighting, soft textures, modern photography style."
    )


def generate_vision_image(prompt: str) -> str | None:
    """Generate a square vision-board image and return it as a data URI."""
    prompt = str(prompt or "").strip()
    if not prompt:
        return None
    try:
        settings = _settings()
        body = _generate(
            settings.gemini_image_model,
            {
                "contents": [{"parts": [{"text": vision_prompt(prompt)}]}],
                "generationConfig": {
                    "responseModalities": ["TEXT", "IMAGE"],
                    "imageConfig": {"aspectRatio": "1:1"},
                },
            },
        )
    except AIServiceError as exc:
        logger.warning("Vision image skipped: %s", exc)
        return None
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Error generating vision image: %s", exc)
        return None

    for part in _parts(body):
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and inline.get("data"):
            mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            return f"data:{mime_type};base64,{inline['data']}"
    logger.warning("Image model returned no image part")
    return None


def get_daily_insight(status_text: str) -> str:
    try:
        settings = _settings()
        body = _generate(
            settings.gemini_text_model,
            {
                "systemInstruction": {"parts": [{"text": INSIGHT_INSTRUCTION}]},
                "contents": [{"role": "user", "parts": [{"text": str(status_text or "")}]}],
            },
        )
    except AIServiceError as exc:
        logger.warning("Daily insight skipped: %s", exc)
        return FALLBACK_INSIGHT
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Error getting daily insight: %s", exc)
        return FALLBACK_INSIGHT
    return _text(body) or FALLBACK_INSIGHT


def get_planning_suggestions(goals: str) -> list[dict]:
    """Ask for three daily habits that support ``goals``."""
    goals = str(goals or "").strip()
    if not goals:
        return []
    try:
        settings = _settings()
        body = _generate(
            settings.gemini_text_model,
            {
                "contents": [
                    {
                        "parts": [
                            {
                                "text": (
                                    f'Based on these goals: "{goals}", suggest 3 actionable daily habits. '
                                    "Return as JSON with habit and description."
                                )
                            }
                        ]
                    }
                ],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "habit": {"type": "STRING"},
                                "description": {"type": "STRING"},
                            },
                            "required": ["habit", "description"],
                        },
                    },
                },
            },
        )
        payload = json.loads(_text(body) or "[]")
    except AIServiceError as exc:
        logger.warning("Planning suggestions skipped: %s", exc)
        return []
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Error getting planning suggestions: %s", exc)
        return []

    if not isinstance(payload, list):
        return []
    suggestions = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        habit = str(item.get("habit") or "").strip()
        if habit:
            suggestions.append({"habit": habit, "description": str(item.get("description") or "").strip()})
    return suggestions
