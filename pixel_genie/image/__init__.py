"""Image generation adapter package.

Scope:
    Provides text-to-image provider clients and the dispatch service used by the
    orchestrator as its image-generation capability.

Module split:
    - `client`: Imagen / OpenAI / local Stable Diffusion requests.
    - `horde_client`: AI Horde async job submission and polling.
    - `encoding`: base64 data-URI helpers.
    - `service`: provider dispatch returning a data URI.
"""
