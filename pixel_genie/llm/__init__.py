"""Text-generation access package.

Architectural role:
    Provides provider configuration, request-payload construction, and transport
    adapters used by the orchestrator to refine prompts.

Module split:
    - `provider_config`: environment-driven provider and model configuration
      (also read by `pixel_genie.image`).
    - `service`: prompt-refinement capability.
    - `client`: provider-specific HTTP transport and response parsing.
"""
