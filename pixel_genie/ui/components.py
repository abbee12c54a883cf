"""State-to-HTML components for the single-page interface.

Each function is a pure render-state mapping: it returns markup for the given
fields and an empty string when the component is hidden. All user-supplied or
model-supplied text is HTML-escaped.
"""

from html import escape

from pixel_genie.core.state import GenerationState


PROCESSING_PLACEHOLDER = "Processing..."


def prompt_input(value: str, is_loading: bool) -> str:
    """Textarea and submit button; both disabled while loading."""
    disabled = " disabled" if is_loading else ""
    label = "Generating..." if is_loading else "Generate Pixel Art"

    return (
        '<form id="prompt-form" class="prompt-form">'
        '<label for="prompt" class="sr-only">Your idea</label>'
        '<textarea id="prompt" name="prompt" rows="3" '
        'placeholder="e.g., a brave knight fighting a dragon in a dark cave"'
        f"{disabled}>{escape(value)}</textarea>"
        f'<button type="submit" id="submit"{disabled}>{label}</button>'
        "</form>"
    )


def loading_indicator(is_loading: bool, stage: str) -> str:
    """Spinner plus stage label, rendered only while loading."""
    if not is_loading:
        return ""

    return (
        '<div class="loading" role="status">'
        '<div class="spinner"></div>'
        f'<p class="stage">{escape(stage or PROCESSING_PLACEHOLDER)}</p>'
        "</div>"
    )


def error_banner(message: str | None) -> str:
    if not message:
        return ""

    return (
        '<div class="error" role="alert">'
        "<strong>Error:</strong> "
        f"<span>{escape(message)}</span>"
        "</div>"
    )


def refined_prompt_panel(refined_prompt: str, is_loading: bool) -> str:
    """Refined prompt text, shown once available and no sequence is running."""
    if not refined_prompt or is_loading:
        return ""

    return (
        '<div class="refined">'
        "<h3>Refined Prompt:</h3>"
        f"<p>{escape(refined_prompt)}</p>"
        "</div>"
    )


def image_viewer(image: str | None, alt_text: str, is_loading: bool) -> str:
    """Generated image, a loading placeholder, or an empty placeholder."""
    if image:
        return (
            '<div class="viewer">'
            f'<img src="{escape(image, quote=True)}" alt="{escape(alt_text, quote=True)}">'
            "</div>"
        )

    if is_loading:
        return (
            '<div class="viewer placeholder loading-placeholder">'
            "<p>Your masterpiece is being created...</p>"
            "</div>"
        )

    return (
        '<div class="viewer placeholder">'
        "<p>Your generated pixel art will appear here.</p>"
        "</div>"
    )


def main_panel(state: GenerationState) -> str:
    """Everything below the header that depends on state."""
    return "".join([
        prompt_input(state.initial_prompt, state.is_loading),
        loading_indicator(state.is_loading, state.current_stage),
        error_banner(state.error),
        refined_prompt_panel(state.refined_prompt, state.is_loading),
        image_viewer(
            state.generated_image,
            state.refined_prompt or state.initial_prompt,
            state.is_loading,
        ),
    ])
