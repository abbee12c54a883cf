"""Request orchestration for the prompt -> refined prompt -> image pipeline.

Architectural role:
    Provides the single controller used by the HTTP and CLI layers. It validates the
    prompt, awaits the prompt-refinement capability, then the image-generation
    capability, and records every transition in a `GenerationState`.

Control-flow model:
    1. Refuse the submission if a sequence is already loading.
    2. Validate the prompt (empty/whitespace -> validation error, no remote call).
    3. Reset refined prompt, image and error; set loading.
    4. Step 1: refine. Failure stops the sequence.
    5. Step 2: generate from the refined prompt.
    6. Always clear loading and the stage label.

Interaction surface:
    - Text: `pixel_genie.llm.service.refine_prompt` (default refiner).
    - Image: `pixel_genie.image.service.generate_image` (default generator).
    - Listeners: callables notified with a state snapshot after each transition.

Error handling strategy:
    Remote failures are logged with `logger.exception` and converted into the
    state's `error` field. Nothing is retried.

Concurrency:
    Blocking capabilities run in a worker thread via `asyncio.to_thread`; coroutine
    capabilities are awaited directly. The loading check and the loading flag are
    set without an intervening await, so one event loop never runs two sequences.
"""

import asyncio
import dataclasses
import inspect
import logging
from typing import Any, Awaitable, Callable, Protocol

from pixel_genie.core.state import GenerationState
from pixel_genie.image.service import generate_image
from pixel_genie.llm.service import refine_prompt


logger = logging.getLogger(__name__)

EMPTY_PROMPT_MESSAGE = "Please enter a prompt."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
STAGE_REFINING = "Refining prompt with Gemini..."
STAGE_GENERATING = "Generating pixel art with Imagen..."


class PromptRefiner(Protocol):
    """Prompt-refinement capability: raw prompt -> refined prompt."""

    def __call__(self, raw_prompt: str) -> str | Awaitable[str]:
        ...


class ImageGenerator(Protocol):
    """Image-generation capability: refined prompt -> encoded image."""

    def __call__(self, refined_prompt: str) -> str | Awaitable[str]:
        ...


StateListener = Callable[[GenerationState], Any]


class GenerationInProgressError(RuntimeError):
    """Raised when a submission arrives while a sequence is still loading."""

    def __init__(self):
        super().__init__("A generation is already in progress.")


async def _invoke(capability: Callable[[str], Any], argument: str) -> Any:
    """Await a capability, pushing synchronous ones to a worker thread."""
    if inspect.iscoroutinefunction(capability):
        return await capability(argument)

    result = await asyncio.to_thread(capability, argument)
    if inspect.isawaitable(result):
        return await result
    return result


def describe_error(err: BaseException) -> str:
    """Return the user-facing message for a failure."""
    message = str(err).strip()
    return message or UNKNOWN_ERROR_MESSAGE


class GenerationPipeline:
    """Owns the generation state and runs the two-step pipeline."""

    def __init__(
        self,
        refiner: PromptRefiner | None = None,
        generator: ImageGenerator | None = None,
    ):
        self._refine = refiner or refine_prompt
        self._generate = generator or generate_image
        self._state = GenerationState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> GenerationState:
        """Copy of the current state."""
        return dataclasses.replace(self._state)

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _update(self, **changes) -> None:
        for name, value in changes.items():
            setattr(self._state, name, value)

        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("State listener failed")

    def set_prompt(self, prompt: str) -> None:
        """Record the raw prompt as typed (input change)."""
        self._update(initial_prompt=prompt or "")

    async def submit(self, prompt: str | None = None) -> GenerationState:
        """Run one request sequence and return the final state.

        Args:
            prompt: New raw prompt. `None` reuses the last `set_prompt` value.

        Returns:
            Snapshot of the state after the sequence finished.

        Raises:
            GenerationInProgressError: A sequence is already loading. State is left
                untouched.

        Edge cases:
            - Empty/whitespace prompt sets `EMPTY_PROMPT_MESSAGE` and returns without
              touching the refined prompt or image.
            - Step 1 failure leaves refined prompt and image empty.
            - Step 2 failure keeps the refined prompt.
        """
        if self._state.is_loading:
            raise GenerationInProgressError()

        if prompt is not None:
            self._state.initial_prompt = prompt

        raw_prompt = self._state.initial_prompt
        if not raw_prompt.strip():
            self._update(error=EMPTY_PROMPT_MESSAGE)
            return self.state

        self._update(
            is_loading=True,
            error="",
            refined_prompt="",
            generated_image=None,
        )

        try:
            self._update(current_stage=STAGE_REFINING)
            logger.info("Refining prompt (%d chars)", len(raw_prompt))
            refined = await _invoke(self._refine, raw_prompt)
            self._update(refined_prompt=refined)

            self._update(current_stage=STAGE_GENERATING)
            logger.info("Generating image from refined prompt")
            image = await _invoke(self._generate, refined)
            self._update(generated_image=image)

        except Exception as err:
            logger.exception("Generation sequence failed")
            self._update(error=describe_error(err))

        finally:
            self._update(is_loading=False, current_stage="")

        return self.state
