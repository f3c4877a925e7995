"""OpenRouter chat-completion client.

Every call is one blocking POST to ``{base_url}/chat/completions``. The client
never raises: configuration, HTTP and transport failures all come back as
``GenerationResult.error``.
"""
from __future__ import annotations
import logging
from typing import Any

import httpx

from ptflow_ai.common.config import PROVIDER_NAME, Settings
from ptflow_ai.common.schema import GenerationRequest, GenerationResult

LOGGER = logging.getLogger("ptflow.gateway")

PROVIDERS_IGNORED_MESSAGE = (
    f"{PROVIDER_NAME} account configuration error: All AI providers are disabled. "
    "Please visit https://openrouter.ai/settings/preferences to enable at least "
    "one provider (e.g., Anthropic/Claude)."
)
INVALID_MODEL_MESSAGE = (
    f"{PROVIDER_NAME} rejected the configured model id. "
    "Check OPENROUTER_MODEL against https://openrouter.ai/models."
)

# Upstream error bodies are only surfaced through these translations.
_ACTIONABLE_ERRORS: tuple[tuple[str, str], ...] = (
    ("All providers have been ignored", PROVIDERS_IGNORED_MESSAGE),
    ("is not a valid model ID", INVALID_MODEL_MESSAGE),
)


def _extract_content(data: Any) -> str:
    """Return ``choices[0].message.content`` or "" when the shape is off."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def _translate_error(response: httpx.Response) -> str:
    body = response.text
    for needle, message in _ACTIONABLE_ERRORS:
        if needle in body:
            return message
    return f"API request failed: {response.status_code} {response.reason_phrase}"


class GatewayClient:
    """Hosted chat-completion client.

    Args:
        settings: Provider credentials, model id, base URL and attribution.
        transport: Optional httpx transport, used by tests to avoid the network.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return self.settings.ai_configured

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "HTTP-Referer": self.settings.app_url,
            "X-Title": self.settings.app_title,
        }

    def _payload(self, request: GenerationRequest) -> dict[str, Any]:
        return {
            "model": request.model or self.settings.model,
            "messages": [
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_prompt},
            ],
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        }

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run one completion. Never raises."""
        if not self.configured:
            return GenerationResult.failure(f"{PROVIDER_NAME} API key not configured")

        url = f"{self.settings.base_url}/chat/completions"
        timeout = self.settings.request_timeout
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                r = client.post(url, headers=self._headers(), json=self._payload(request))
                if not r.is_success:
                    LOGGER.error("%s API error %s: %s", PROVIDER_NAME, r.status_code, r.text)
                    return GenerationResult.failure(_translate_error(r))
                data = r.json()
        except httpx.TimeoutException as e:
            LOGGER.error("%s request timed out after %ss: %s", PROVIDER_NAME, timeout, e)
            return GenerationResult.failure(f"{PROVIDER_NAME} request timed out after {timeout:g}s")
        except Exception as e:
            LOGGER.error("AI call error: %s", e)
            return GenerationResult.failure(str(e) or type(e).__name__)

        text = _extract_content(data)
        if not text:
            LOGGER.warning("%s response carried no completion content", PROVIDER_NAME)
        return GenerationResult(text=text)
