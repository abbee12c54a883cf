"""Pixel Art Genie surface adapters.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and response shaping.
- Delegates orchestration to `pixel_genie.core.engine`.

Scope:
- Request lifecycle control for adapter concerns only.
- No direct model invocation logic is implemented in this package.
"""
