"""Prompt-refinement entrypoint for the text model.

Architectural role:
    Implements the prompt-refinement capability consumed by
    `pixel_genie.core.engine`. Bridges prompt construction
    (`pixel_genie.prompting`) to transport (`pixel_genie.llm.client`).

Model call flow:
    raw prompt -> refinement prompt -> payload construction ->
    `client.send_request(...)` -> cleaned refined prompt.

Determinism:
    Payload construction is deterministic for fixed inputs and configuration.
    Generated output remains non-deterministic because inference runs remotely.
"""

from pixel_genie.llm.provider_config import SYSTEM_MESSAGE, MODEL_NAME
from pixel_genie.llm.client import send_request
from pixel_genie.prompting.prompt_builder import (
    build_refinement_prompt,
    clean_refined_prompt,
)


def build_payload(raw_prompt: str) -> dict:
    """Build the provider-agnostic chat payload for one refinement.

    Parameter semantics:
        - `temperature=0.7`: enough variety for creative rewrites.
        - `top_p=0.95`: nucleus sampling cap.
        - `max_tokens=256`: refined prompts are a single paragraph.
    """
    return {
        "model": MODEL_NAME,
        "messages": [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": build_refinement_prompt(raw_prompt)}
        ],
        "temperature": 0.7,
        "top_p": 0.95,
        "max_tokens": 256,
    }


def refine_prompt(raw_prompt: str) -> str:
    """Turn a raw idea into a pixel-art image prompt.

    Args:
        raw_prompt: User text; validation happens upstream in the orchestrator.

    Returns:
        Single-line refined prompt.

    Raises:
        RuntimeError: Transport failure (from `client`) or empty model output.
    """
    refined = clean_refined_prompt(send_request(build_payload(raw_prompt)))

    if not refined:
        raise RuntimeError("The model returned an empty refined prompt.")

    return refined
