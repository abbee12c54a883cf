"""Generation state contract shared by `pixel_genie.core.engine` and the surfaces.

Architectural role:
    Defines the transient state of one user interaction. The orchestrator owns and
    mutates it; the HTTP page, the JSON API and the CLI only read snapshots.

Lifecycle:
    `initial_prompt` changes on input, the remaining fields are reset on every
    accepted submission and filled in as the two pipeline steps complete.
"""

from dataclasses import asdict, dataclass


@dataclass
class GenerationState:
    """Snapshot of one prompt-to-image interaction.

    Attributes:
        initial_prompt: Raw user text as last entered.
        refined_prompt: Text-model output; empty until step 1 succeeds.
        generated_image: Data URI of the image; `None` until step 2 succeeds.
        is_loading: True while a request sequence is in flight.
        error: Last failure description; empty when there is none.
        current_stage: Human-readable progress label while loading.
    """

    initial_prompt: str = ""
    refined_prompt: str = ""
    generated_image: str | None = None
    is_loading: bool = False
    error: str = ""
    current_stage: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
