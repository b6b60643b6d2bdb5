from __future__ import annotations

import base64
import binascii
import json
import logging
from collections import Counter
from typing import Protocol, Sequence

import requests

from dukan.config import AiSettings
from dukan.domain.errors import GenerationError

log = logging.getLogger("dukan.ai")

SORT_PROMPT = (
    "Here is a list of products: {names}. Please categorize them and return a JSON array "
    "of just the product names in a professionally sorted order based on common store "
    "categories (e.g., fruits, vegetables, dairy, etc.). Only return the JSON array of names."
)


class AiAssist(Protocol):
    def request_image(self, prompt: str) -> bytes: ...
    def request_category_sort(self, names: Sequence[str]) -> list[str]: ...


def fallback_name_order(names: Sequence[str]) -> list[str]:
    return sorted(names)


def is_permutation(candidate: object, names: Sequence[str]) -> bool:
    if not isinstance(candidate, list):
        return False
    if not all(isinstance(n, str) for n in candidate):
        return False
    return Counter(candidate) == Counter(names)


class DisabledAiAssist:
    """Used when no API key is configured."""

    def request_image(self, prompt: str) -> bytes:
        raise GenerationError("AI image generation is not configured.")

    def request_category_sort(self, names: Sequence[str]) -> list[str]:
        return fallback_name_order(names)


class GeminiAssist:
    def __init__(self, settings: AiSettings, session: requests.Session | None = None):
        self.settings = settings
        self.session = session or requests.Session()

    def _post_json(self, url: str, body: dict) -> dict:
        r = self.session.post(
            url,
            json=body,
            headers={"x-goog-api-key": self.settings.api_key},
            timeout=self.settings.timeout_seconds,
        )
        r.raise_for_status()
        return r.json()

    def _model_url(self, model: str, method: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/models/{model}:{method}"

    def request_image(self, prompt: str) -> bytes:
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1, "aspectRatio": "1:1", "outputOptions": {"mimeType": "image/png"}},
        }
        try:
            data = self._post_json(self._model_url(self.settings.image_model, "predict"), body)
        except (requests.RequestException, ValueError) as e:
            log.warning("image_request_failed model=%s error=%s", self.settings.image_model, e)
            raise GenerationError("Image generation failed. Please try again.") from e

        predictions = data.get("predictions") if isinstance(data, dict) else None
        if not predictions or not isinstance(predictions[0], dict) or not predictions[0].get("bytesBase64Encoded"):
            log.warning("image_request_empty model=%s", self.settings.image_model)
            raise GenerationError("Image generation failed or returned no images.")

        try:
            image = base64.b64decode(predictions[0]["bytesBase64Encoded"], validate=True)
        except (binascii.Error, ValueError) as e:
            raise GenerationError("Image generation returned undecodable data.") from e
        log.info("image_generated model=%s bytes=%s", self.settings.image_model, len(image))
        return image

    def _extract_text(self, data: dict) -> str:
        # {"candidates": [{"content": {"parts": [{"text": "[...]"}]}}]}
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(str(p.get("text", "")) for p in parts).strip()

    def request_category_sort(self, names: Sequence[str]) -> list[str]:
        names = list(names)
        if not names:
            return []

        body = {
            "contents": [{"parts": [{"text": SORT_PROMPT.format(names=", ".join(names))}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
        }
        try:
            data = self._post_json(self._model_url(self.settings.text_model, "generateContent"), body)
            ordered = json.loads(self._extract_text(data))
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            log.warning("category_sort_failed count=%s error=%s", len(names), e)
            return fallback_name_order(names)

        if not is_permutation(ordered, names):
            log.warning("category_sort_invalid count=%s received=%r", len(names), ordered)
            return fallback_name_order(names)

        log.info("category_sort_ok count=%s", len(names))
        return ordered


def build_ai_assist(settings: AiSettings) -> AiAssist:
    if not settings.enabled:
        return DisabledAiAssist()
    return GeminiAssist(settings)
