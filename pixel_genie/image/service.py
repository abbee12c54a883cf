"""Image-generation capability used by the request orchestrator.

Role in pipeline:
    - Receives the refined prompt from `pixel_genie.core.engine`.
    - Selects provider path (`ai_horde` vs generic provider client).
    - Wraps the base64 payload in a data URI suitable for direct display.

Error handling strategy:
    - Exceptions from provider clients are intentionally propagated; the
      orchestrator turns them into user-visible messages.
"""

from pixel_genie.image.client import send_image_request
from pixel_genie.image.encoding import to_data_uri
from pixel_genie.image.horde_client import send_ai_horde_request
from pixel_genie.llm.provider_config import (
    IMAGE_PROVIDER,
    IMAGE_MIME_TYPE,
    IMAGE_WIDTH,
    IMAGE_HEIGHT,
    IMAGE_STEPS,
)


def generate_image(prompt: str) -> str:
    """Generate a pixel-art image for `prompt`.

    Returns:
        `data:<mime>;base64,<payload>` string.
    """
    if IMAGE_PROVIDER == "ai_horde":
        # Horde workers deliver webp.
        encoded = send_ai_horde_request(prompt, IMAGE_WIDTH, IMAGE_HEIGHT, IMAGE_STEPS)
        return to_data_uri(encoded, "image/webp")

    return to_data_uri(send_image_request(prompt), IMAGE_MIME_TYPE)
