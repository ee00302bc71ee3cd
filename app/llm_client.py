"""OpenAI-compatible completion client for the hosted model gateway."""
from __future__ import annotations

import time
from typing import Any

from app.config import settings
from app.errors import ConfigurationError
from app.services.logger import log_llm_call


def get_client() -> Any:
    """Build an AsyncOpenAI client pointed at the configured gateway.

    Credentials are read on every call so a missing key is reported at request
    time. Retries are disabled: a failed completion degrades to the fallback
    mapping instead.
    """
    from openai import AsyncOpenAI

    if not settings.completion_api_key:
        raise ConfigurationError("Completion API key not configured")

    base_url = settings.completion_base_url.strip() or "https://ai.gateway.lovable.dev/v1"
    return AsyncOpenAI(
        api_key=settings.completion_api_key,
        base_url=base_url,
        timeout=settings.completion_timeout_sec,
        max_retries=0,
    )


def get_model() -> str:
    return settings.completion_model


async def complete(*, system: str, user: str, caller: str, model: str | None = None) -> str:
    """Run one chat completion and return the first choice's text.

    Errors raised by the SDK propagate to the caller after being logged.
    """
    client = get_client()
    model = model or get_model()
    started = time.monotonic()
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=settings.completion_max_tokens,
        )
    except Exception as e:
        log_llm_call(
            model=model,
            caller=caller,
            duration_ms=int((time.monotonic() - started) * 1000),
            status="error",
            error=str(e),
        )
        raise

    usage = getattr(response, "usage", None)
    log_llm_call(
        model=model,
        caller=caller,
        input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        duration_ms=int((time.monotonic() - started) * 1000),
    )

    choices = getattr(response, "choices", None) or []
    if not choices:
        return ""
    return getattr(choices[0].message, "content", None) or ""
