"""Provider/runtime configuration for the text and image layers.

Architectural role:
    Centralizes model/provider selection and credential lookup for
    `pixel_genie.llm.service`, `pixel_genie.llm.client` and `pixel_genie.image`.

Model call flow integration:
    - `service.refine_prompt` consumes `MODEL_NAME` and `SYSTEM_MESSAGE`.
    - `client.send_request` consumes provider endpoint maps and key resolution.
    - `pixel_genie.image` consumes the `IMAGE_*` settings.

Determinism:
    Deterministic for a fixed process environment and key files. Values are resolved
    at import time (plus runtime key-file reads in `load_key`).

Failure behavior:
    Missing key material is represented as `None` and turned into provider-labeled
    `RuntimeError`s by the clients.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Primary model routing controls.
PROVIDER = os.getenv("PROVIDER", "gemini")
MODEL_NAME = os.getenv("MODEL_NAME", "gemini-2.5-flash")

# Single transport timeout (seconds) shared by text and image requests.
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))

# OpenAI-compatible and provider-specific endpoint map.
PROVIDERS = {

    "local": {
        "url": "http://127.0.0.1:8080/v1/chat/completions",
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/chat/completions",
        "key_file": "config/openai.key"
    },

    "groq": {
        "url": "https://api.groq.com/openai/v1/chat/completions",
        "key_file": "config/groq.key"
    },

    "together": {
        "url": "https://api.together.xyz/v1/chat/completions",
        "key_file": "config/together.key"
    },

    "openrouter": {
        "url": "https://openrouter.ai/api/v1/chat/completions",
        "key_file": "config/openrouter.key"
    },

    "mistral": {
        "url": "https://api.mistral.ai/v1/chat/completions",
        "key_file": "config/mistral.key"
    },

    "deepinfra": {
        "url": "https://api.deepinfra.com/v1/openai/chat/completions",
        "key_file": "config/deepinfra.key"
    },

    "fireworks": {
        "url": "https://api.fireworks.ai/inference/v1/chat/completions",
        "key_file": "config/fireworks.key"
    },

    "anthropic": {
        "url": "https://api.anthropic.com/v1/messages",
        "key_file": "config/anthropic.key"
    },

    "gemini": {
        "url": "https://generativelanguage.googleapis.com/v1beta/models",
        "key_file": "config/gemini.key"
    },

}


ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"

GEMINI_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "{model}:generateContent"
)


# Shared system instruction sent with every refinement request.
SYSTEM_MESSAGE = (
    "You are an expert prompt engineer for pixel-art image generators.\n"
    "You rewrite short ideas into rich, concrete image prompts.\n"
    "You answer with the rewritten prompt only, never with explanations.\n"
)


def load_key(path):
    """Load API key from environment override or key file.

    Resolution order:
        1. Environment variable inferred from file stem (for example
           `config/gemini.key` -> `GEMINI_API_KEY`).
        2. Raw file contents at `path`.

    Args:
        path: Configured key file path or `None`.

    Returns:
        Key string or `None` when not available.

    Edge cases:
        - `None` path returns `None`.
        - Missing or empty file returns `None`.
    """
    if not path:
        return None
    key_name = os.path.splitext(os.path.basename(path))[0].upper() + "_API_KEY"
    env_value = os.getenv(key_name)
    if env_value:
        return env_value
    if not os.path.exists(path):
        return None
    with open(path, "r") as f:
        return f.read().strip() or None


# Image generation provider settings consumed by `pixel_genie.image` modules.
IMAGE_PROVIDER = os.getenv("IMAGE_PROVIDER", "gemini")
# Default model per image provider. dall-e-2 is the OpenAI model that accepts
# 512x512 together with `response_format=b64_json`.
DEFAULT_IMAGE_MODELS = {
    "gemini": "imagen-3.0-generate-002",
    "openai": "dall-e-2",
}


def default_image_model(provider):
    """Return the model used for `provider` when IMAGE_MODEL is not set."""
    return DEFAULT_IMAGE_MODELS.get(provider, "")


IMAGE_MODEL = os.getenv("IMAGE_MODEL") or default_image_model(IMAGE_PROVIDER)
IMAGE_MIME_TYPE = os.getenv("IMAGE_MIME_TYPE", "image/png")
IMAGE_ASPECT_RATIO = os.getenv("IMAGE_ASPECT_RATIO", "1:1")
IMAGE_WIDTH = int(os.getenv("IMAGE_WIDTH", "512"))
IMAGE_HEIGHT = int(os.getenv("IMAGE_HEIGHT", "512"))
IMAGE_STEPS = int(os.getenv("IMAGE_STEPS", "25"))

# AI Horde polling budget (seconds).
HORDE_POLL_INTERVAL = float(os.getenv("HORDE_POLL_INTERVAL", "2"))
HORDE_MAX_WAIT = float(os.getenv("HORDE_MAX_WAIT", "300"))
HORDE_ANONYMOUS_KEY = "0000000000"

IMAGE_PROVIDERS = {

    "gemini": {
        "url": (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            "{model}:predict"
        ),
        "key_file": "config/gemini.key"
    },

    "local": {
        "url": "http://127.0.0.1:7860/sdapi/v1/txt2img",
        "key_file": None
    },

    "openai": {
        "url": "https://api.openai.com/v1/images/generations",
        "key_file": "config/openai.key"
    },

    "ai_horde": {
        "url": "https://aihorde.net/api/v2/generate/async",
        "status_url": "https://aihorde.net/api/v2/generate/status/",
        "key_file": None
    }

}
