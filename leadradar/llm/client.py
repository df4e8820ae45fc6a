"""OpenAI-compatible chat client returning parsed JSON."""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from collections.abc import Callable
from typing import Any

import requests

from leadradar.core.config import Config, get_config
from leadradar.core.exceptions import AIProviderError

logger = logging.getLogger(__name__)
_RATE_LOCK = threading.Lock()
_LAST_REQUEST_TS = 0.0

RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504}
_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_JSON_BODY = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")

ChatJsonCaller = Callable[..., Any]


def _apply_rate_limit(min_interval_seconds: float) -> None:
    global _LAST_REQUEST_TS
    if min_interval_seconds <= 0:
        return

    with _RATE_LOCK:
        now = time.monotonic()
        elapsed = now - _LAST_REQUEST_TS
        if elapsed < min_interval_seconds:
            time.sleep(min_interval_seconds - elapsed)
        _LAST_REQUEST_TS = time.monotonic()


def extract_json_text(content: str) -> str:
    """Strip markdown fences or prose around a JSON payload."""
    fenced = _CODE_BLOCK.search(content)
    if fenced:
        return fenced.group(1).strip()
    body = _JSON_BODY.search(content)
    if body:
        return body.group(1).strip()
    return content.strip()


def _retry_delay(response: requests.Response | None, attempt: int) -> float:
    if response is not None:
        retry_after = response.headers.get("Retry-After", "")
        if retry_after.isdigit():
            return min(float(retry_after), 30.0)
    return min(2 * attempt, 5)


def call_chat_json(
    system: str,
    user: str,
    model: str,
    max_tokens: int = 800,
    temperature: float = 0.4,
    config: Config | None = None,
) -> Any:
    """Send one chat completion and return the decoded JSON reply.

    Retries transport errors, retryable status codes and unparsable replies up
    to ``LLM_MAX_RETRIES`` times, then raises ``AIProviderError``.
    """
    cfg = config or get_config()
    if not cfg.OPENAI_API_KEY:
        raise AIProviderError("Missing OPENAI_API_KEY")

    payload = {
        "model": model,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    url = f"{cfg.OPENAI_BASE_URL.rstrip('/')}/chat/completions"
    headers = {"Authorization": f"Bearer {cfg.OPENAI_API_KEY}"}

    last_error: Exception | None = None
    total_attempts = cfg.LLM_MAX_RETRIES + 1

    for attempt in range(1, total_attempts + 1):
        response: requests.Response | None = None
        try:
            _apply_rate_limit(cfg.LLM_MIN_INTERVAL_SECONDS)
            response = requests.post(url, json=payload, headers=headers, timeout=(5, cfg.LLM_TIMEOUT_SECONDS))
            if response.status_code in RETRYABLE_STATUS_CODES:
                raise requests.HTTPError(f"Retryable provider status {response.status_code}", response=response)
            if not response.ok:
                raise AIProviderError(f"Provider error {response.status_code}: {response.text[:200]}")

            content = response.json()["choices"][0]["message"]["content"]
            if not isinstance(content, str) or not content.strip():
                raise ValueError("empty content")
            return json.loads(extract_json_text(content))
        except AIProviderError:
            raise
        except (requests.exceptions.RequestException, ValueError, KeyError, IndexError, TypeError) as exc:
            last_error = exc
            logger.warning(
                "llm.call.failed",
                extra={
                    "event": "llm.call.failed",
                    "model": model,
                    "attempt": attempt,
                    "attempts_total": total_attempts,
                    "error": str(exc),
                },
            )
            if attempt < total_attempts:
                time.sleep(_retry_delay(response, attempt))

    logger.error(
        "llm.call.unavailable",
        extra={
            "event": "llm.call.unavailable",
            "model": model,
            "error": str(last_error) if last_error else "unknown",
        },
    )
    raise AIProviderError(f"AI provider unavailable: {last_error}")
