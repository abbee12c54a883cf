"""Generic image-provider HTTP client.

Processing flow:
    1. Resolve active provider config from `pixel_genie.llm.provider_config`.
    2. Optionally load API key from configured key file.
    3. Build the provider-specific request body for a single image.
    4. Submit it and extract the base64 image payload from the response.

Supported providers:
    - `gemini`: Imagen `:predict` (`predictions[0].bytesBase64Encoded`).
    - `openai`: Images API with `response_format=b64_json` (`data[0].b64_json`).
    - `local`: Stable Diffusion WebUI txt2img (`images[0]`).

Error handling strategy:
    - Unknown provider -> `ValueError`.
    - Missing key, non-200 status, or missing image data -> `RuntimeError` with a
      provider-labeled message. Response bodies are logged at debug level only.
"""

import logging

import requests

from pixel_genie.llm.provider_config import (
    IMAGE_PROVIDER,
    IMAGE_PROVIDERS,
    IMAGE_MODEL,
    IMAGE_ASPECT_RATIO,
    IMAGE_MIME_TYPE,
    IMAGE_WIDTH,
    IMAGE_HEIGHT,
    IMAGE_STEPS,
    REQUEST_TIMEOUT,
    load_key,
)


logger = logging.getLogger(__name__)


def build_image_payload(provider: str, prompt: str) -> dict:
    """Build the request body for `provider`."""
    if provider == "gemini":
        return {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": 1,
                "aspectRatio": IMAGE_ASPECT_RATIO,
                "outputOptions": {"mimeType": IMAGE_MIME_TYPE},
            },
        }

    if provider == "openai":
        return {
            "model": IMAGE_MODEL,
            "prompt": prompt,
            "n": 1,
            "size": f"{IMAGE_WIDTH}x{IMAGE_HEIGHT}",
            "response_format": "b64_json",
        }

    return {
        "prompt": prompt,
        "steps": IMAGE_STEPS,
        "width": IMAGE_WIDTH,
        "height": IMAGE_HEIGHT,
        "batch_size": 1,
    }


def extract_image_data(provider: str, data: dict) -> str | None:
    """Pull the base64 image payload out of a provider response, if any."""
    try:
        if provider == "gemini":
            return data["predictions"][0]["bytesBase64Encoded"]
        if provider == "openai":
            return data["data"][0]["b64_json"]
        return data["images"][0]
    except (KeyError, IndexError, TypeError):
        return None


def send_image_request(prompt: str) -> str:
    """Generate one image with the currently selected provider.

    Args:
        prompt: Refined text prompt.

    Returns:
        Base64 image payload (without data-URI header).

    Interaction with core:
        Called by `pixel_genie.image.service.generate_image`.
    """
    provider_config = IMAGE_PROVIDERS.get(IMAGE_PROVIDER)
    if not provider_config:
        raise ValueError(f"Unknown image provider: {IMAGE_PROVIDER}")

    label = IMAGE_PROVIDER.upper()
    url = provider_config["url"].format(model=IMAGE_MODEL)
    key_file = provider_config.get("key_file")
    headers = {"Content-Type": "application/json"}

    if key_file is not None:
        api_key = load_key(key_file)
        if not api_key:
            raise RuntimeError(f"{label} IMAGE KEY NOT FOUND")
        if IMAGE_PROVIDER == "gemini":
            headers["x-goog-api-key"] = api_key
        else:
            headers["Authorization"] = f"Bearer {api_key}"

    payload = build_image_payload(IMAGE_PROVIDER, prompt)

    try:
        response = requests.post(url, json=payload, headers=headers, timeout=REQUEST_TIMEOUT)
    except requests.exceptions.RequestException as err:
        raise RuntimeError(f"{label} IMAGE REQUEST FAILED") from err

    if response.status_code != 200:
        logger.debug("Image provider error body: %s", response.text)
        raise RuntimeError(
            f"{label} IMAGE HTTP ERROR ({response.status_code})"
        )

    try:
        data = response.json()
    except ValueError as err:
        logger.debug("Image provider returned a non-JSON body: %s", response.text)
        raise RuntimeError(f"{label} IMAGE REQUEST FAILED") from err

    image_data = extract_image_data(IMAGE_PROVIDER, data)
    if not image_data:
        # Imagen answers 200 with no predictions when the safety filter drops the image.
        raise RuntimeError("No image was generated. The prompt may have been blocked.")

    return image_data
