"""Provider-specific transport client for text-generation requests.

Architectural role:
    Executes HTTP requests against the configured text provider and normalizes the
    response into a plain string.

Model invocation flow:
    `service.refine_prompt` -> `send_request(payload)` -> provider branch
    (OpenAI-compatible / Anthropic / Gemini) -> parsed text.

Retry behavior:
    No retry loop is implemented. Each HTTP call is attempted once with
    `REQUEST_TIMEOUT`.

Failure handling model:
    Failures raise `RuntimeError` (or `ValueError` for an unknown provider) carrying a
    sanitized, provider-labeled message. Raw response bodies and keys never reach
    the message, because it is shown to end users.
"""

import logging

import requests

from pixel_genie.llm.provider_config import (
    PROVIDER,
    MODEL_NAME,
    PROVIDERS,
    ANTHROPIC_URL,
    GEMINI_URL_TEMPLATE,
    REQUEST_TIMEOUT,
    load_key,
)


logger = logging.getLogger(__name__)


def _build_sanitized_http_error(provider_name: str, err: requests.exceptions.RequestException) -> str:
    """Build provider-labeled HTTP error text without exposing raw internals.

    Args:
        provider_name: Active provider label.
        err: Request exception instance.

    Returns:
        Sanitized error string with optional status code.
    """
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    label = str(provider_name or "provider").upper()
    if status_code:
        return f"{label} HTTP ERROR ({status_code})"
    return f"{label} HTTP ERROR"


def _sanitize_runtime_error(provider_name: str) -> str:
    """Build generic provider-labeled runtime failure text."""
    label = str(provider_name or "provider").upper()
    return f"{label} REQUEST FAILED"


def _split_system(messages):
    """Separate the system instruction from user/assistant turns."""
    system_prompt = None
    turns = []

    for msg in messages:
        if not isinstance(msg, dict):
            continue

        role = msg.get("role")
        content = msg.get("content", "")

        if role == "system":
            if isinstance(content, str) and content.strip():
                system_prompt = content.strip()
        elif role in ["user", "assistant"] and content:
            turns.append({"role": role, "content": content})

    return system_prompt, turns


def build_anthropic_payload(payload: dict) -> dict:
    """Remap a chat payload to the Anthropic messages schema."""
    system_prompt, turns = _split_system(payload.get("messages", []))

    anthropic_payload = {
        "model": payload.get("model", MODEL_NAME),
        "max_tokens": payload.get("max_tokens", 1024),
        "messages": turns,
    }

    if system_prompt:
        anthropic_payload["system"] = system_prompt

    if "temperature" in payload:
        anthropic_payload["temperature"] = payload["temperature"]
    if "top_p" in payload:
        anthropic_payload["top_p"] = payload["top_p"]

    return anthropic_payload


def build_gemini_payload(payload: dict) -> dict:
    """Remap a chat payload to the Gemini `generateContent` schema.

    Assistant turns become role `model`. The system message is forwarded as
    `systemInstruction` rather than folded into the user turns.
    """
    system_prompt, turns = _split_system(payload.get("messages", []))

    gemini_payload = {
        "contents": [
            {
                "role": "model" if turn["role"] == "assistant" else "user",
                "parts": [{"text": str(turn["content"])}],
            }
            for turn in turns
        ],
    }

    if system_prompt:
        gemini_payload["systemInstruction"] = {"parts": [{"text": system_prompt}]}

    generation_config = {}
    if "temperature" in payload:
        generation_config["temperature"] = payload["temperature"]
    if "top_p" in payload:
        generation_config["topP"] = payload["top_p"]
    if "max_tokens" in payload:
        generation_config["maxOutputTokens"] = payload["max_tokens"]
    if generation_config:
        gemini_payload["generationConfig"] = generation_config

    return gemini_payload


def _post(url: str, headers: dict, body: dict) -> dict:
    response = requests.post(
        url,
        headers=headers,
        json=body,
        timeout=REQUEST_TIMEOUT,
    )
    response.raise_for_status()
    return response.json()


def send_request(payload: dict) -> str:
    """Send one request to the configured provider and return the response text.

    Args:
        payload: Provider-agnostic chat payload (`model`, `messages`, sampling
            parameters) produced by `service.refine_prompt`.

    Returns:
        Stripped response text.

    Raises:
        ValueError: The configured provider is unknown.
        RuntimeError: Missing key, HTTP failure, or unparsable response. The
            message is sanitized and labeled with the provider name.
    """
    if PROVIDER not in PROVIDERS:
        raise ValueError(f"Unknown text provider: {PROVIDER}")

    try:

        if PROVIDER == "anthropic":

            api_key = load_key(PROVIDERS["anthropic"]["key_file"])
            if not api_key:
                raise RuntimeError("ANTHROPIC KEY NOT FOUND")

            headers = {
                "x-api-key": api_key,
                "anthropic-version": "2023-06-01",
                "Content-Type": "application/json",
            }

            data = _post(ANTHROPIC_URL, headers, build_anthropic_payload(payload))
            return data["content"][0]["text"].strip()

        elif PROVIDER == "gemini":

            api_key = load_key(PROVIDERS["gemini"]["key_file"])
            if not api_key:
                raise RuntimeError("GEMINI KEY NOT FOUND")

            url = GEMINI_URL_TEMPLATE.format(model=payload.get("model", MODEL_NAME))

            headers = {
                "x-goog-api-key": api_key,
                "Content-Type": "application/json",
            }

            data = _post(url, headers, build_gemini_payload(payload))
            return data["candidates"][0]["content"]["parts"][0]["text"].strip()

        else:

            config = PROVIDERS[PROVIDER]

            headers = {
                "Content-Type": "application/json"
            }

            if config["key_file"]:
                api_key = load_key(config["key_file"])
                if not api_key:
                    raise RuntimeError(f"{PROVIDER.upper()} KEY NOT FOUND")

                headers["Authorization"] = f"Bearer {api_key}"

            data = _post(config["url"], headers, payload)
            return data["choices"][0]["message"]["content"].strip()

    except requests.exceptions.RequestException as err:
        logger.warning("Text provider request failed: %s", type(err).__name__)
        raise RuntimeError(_build_sanitized_http_error(PROVIDER, err)) from err

    except (KeyError, IndexError, TypeError, ValueError) as err:
        logger.warning("Text provider returned an unexpected response shape")
        raise RuntimeError(_sanitize_runtime_error(PROVIDER)) from err
