"""AI Horde-specific image-generation client.

Processing flow:
    1. Read provider endpoint configuration.
    2. Build submission payload from prompt + generation params.
    3. Submit async generation job.
    4. Poll status endpoint until completion, fault, or `HORDE_MAX_WAIT`.
    5. Download the first generation and return it as base64 text.

Error handling strategy:
    - Configuration and provider-state issues raise `RuntimeError`.
    - HTTP-layer failures are converted to provider-labeled `RuntimeError`s.
      Request URLs (presigned download links included) never reach the message.

Performance characteristics:
    - Uses synchronous HTTP and blocking sleep-based polling. The orchestrator runs
      this in a worker thread.
"""

import base64
import logging
import os
import time

import requests

from pixel_genie.llm.provider_config import (
    IMAGE_PROVIDERS,
    HORDE_ANONYMOUS_KEY,
    HORDE_POLL_INTERVAL,
    HORDE_MAX_WAIT,
    REQUEST_TIMEOUT,
)


logger = logging.getLogger(__name__)

# Style model used when AI_HORDE_MODEL is not set.
DEFAULT_HORDE_MODEL = "AlbedoBase XL (SDXL)"
PROVIDER_LABEL = "AI_HORDE"


def _build_sanitized_http_error(err: requests.exceptions.RequestException) -> str:
    """Build provider-labeled HTTP error text without the request URL."""
    status_code = None
    if getattr(err, "response", None) is not None:
        status_code = getattr(err.response, "status_code", None)

    if status_code:
        return f"{PROVIDER_LABEL} IMAGE HTTP ERROR ({status_code})"
    return f"{PROVIDER_LABEL} IMAGE HTTP ERROR"


def _download_as_base64(reference: str) -> str:
    """Return base64 text for a generation that is either a URL or inline base64."""
    if not reference.startswith(("http://", "https://")):
        return reference

    response = requests.get(reference, timeout=REQUEST_TIMEOUT)
    response.raise_for_status()
    return base64.b64encode(response.content).decode("ascii")


def send_ai_horde_request(
    prompt: str,
    width: int,
    height: int,
    steps: int,
) -> str:
    """Submit and poll an AI Horde async image generation job.

    Args:
        prompt: Refined prompt forwarded to AI Horde.
        width: Requested output width.
        height: Requested output height.
        steps: Sampling/inference steps.

    Returns:
        Base64 image payload of the first generation.

    Failure handling:
        - Missing provider config/status URL -> `RuntimeError`
        - Faulted job or exhausted wait budget -> `RuntimeError`
        - Missing image after completion -> `RuntimeError`
        - HTTP transport/status failures -> `RuntimeError("AI_HORDE IMAGE HTTP ERROR (<status>)")`
        - Unparsable responses -> `RuntimeError("AI_HORDE IMAGE REQUEST FAILED")`
    """
    provider_config = IMAGE_PROVIDERS.get("ai_horde")
    if not provider_config:
        raise RuntimeError("AI Horde provider config missing.")

    status_url = provider_config.get("status_url")
    if not status_url:
        raise RuntimeError("AI Horde status_url missing in provider config.")

    headers = {
        "apikey": os.getenv("AI_HORDE_API_KEY") or HORDE_ANONYMOUS_KEY,
        "Content-Type": "application/json"
    }

    payload = {
        "prompt": prompt,
        "params": {
            "width": width,
            "height": height,
            "steps": steps,
            "n": 1,
        },
        "models": [os.getenv("AI_HORDE_MODEL", DEFAULT_HORDE_MODEL)],
        "r2": True,
    }

    try:
        return _submit_and_poll(provider_config["url"], status_url, headers, payload)
    except requests.exceptions.RequestException as err:
        logger.warning("AI Horde request failed: %s", type(err).__name__)
        raise RuntimeError(_build_sanitized_http_error(err)) from err
    except ValueError as err:
        logger.warning("AI Horde returned an unparsable response")
        raise RuntimeError(f"{PROVIDER_LABEL} IMAGE REQUEST FAILED") from err


def _submit_and_poll(submit_url: str, status_url: str, headers: dict, payload: dict) -> str:
    submit_response = requests.post(
        submit_url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT
    )
    logger.debug("AI Horde submit status: %s", submit_response.status_code)
    submit_response.raise_for_status()

    job_id = submit_response.json().get("id")
    if not job_id:
        raise RuntimeError("AI Horde did not return a job id.")

    logger.info("AI Horde job %s submitted", job_id)
    deadline = time.monotonic() + HORDE_MAX_WAIT

    while True:
        if time.monotonic() > deadline:
            raise RuntimeError("AI Horde job timed out.")

        status_response = requests.get(
            f"{status_url}{job_id}", headers=headers, timeout=REQUEST_TIMEOUT
        )
        if status_response.status_code == 429:
            time.sleep(HORDE_POLL_INTERVAL + 1)
            continue
        status_response.raise_for_status()
        status_data = status_response.json()

        if status_data.get("faulted"):
            raise RuntimeError("AI Horde job faulted.")

        finished = bool(status_data.get("done") or status_data.get("finished"))
        generations = status_data.get("generations") or []

        if finished and generations:
            reference = generations[0].get("img") or generations[0].get("image_url")
            if not reference:
                raise RuntimeError("AI Horde finished but no image was returned.")
            return _download_as_base64(reference)

        time.sleep(HORDE_POLL_INTERVAL)
