"""Prompt assembly helpers for pixel-art prompt refinement.

This module only builds prompt strings from user input. Provider selection,
validation and model invocation happen outside this module.

Design constraints:
    - Deterministic construction for identical inputs.
    - Fixed ordering of prompt components.
    - No I/O, no global state mutation.

Prompt safety model:
    User text is interpolated as a raw string inside a delimited block. Safety is
    instruction-led, not parser-enforced.
"""


# =========================================================
# STYLE GUIDE
# =========================================================
# Style constraints every refined prompt must carry. Ordering is preserved in the
# rendered bullet list.

PIXEL_ART_STYLE_RULES = (
    "Describe the scene as pixel art (8-bit or 16-bit era).",
    "Mention a limited, coherent color palette.",
    "Ask for crisp, hard-edged pixels with no anti-aliasing and no blur.",
    "Name the subject, its pose or action, and the background.",
    "Add lighting and mood in a few words.",
    "Keep it to a single paragraph of at most 80 words.",
)


# =========================================================
# REFINEMENT PROMPT
# =========================================================
# Prompt component order:
#   1) Task statement
#   2) Style rules
#   3) Delimited user idea
#   4) Output contract
#   5) Assistant cue ("Refined prompt:")

def build_refinement_prompt(raw_prompt: str) -> str:
    """Build the instruction that turns a raw idea into a pixel-art prompt.

    Args:
        raw_prompt: User text as typed. It is stripped before insertion.

    Returns:
        Fully assembled prompt string for the text model.
    """
    rules = "\n".join(f"- {rule}" for rule in PIXEL_ART_STYLE_RULES)

    return (
        "Rewrite the following idea into a detailed prompt for an image generator "
        "that produces pixel art.\n\n"
        "Rules:\n"
        f"{rules}\n\n"
        "Idea:\n"
        '"""\n'
        f"{raw_prompt.strip()}\n"
        '"""\n\n'
        "Return only the rewritten prompt, without quotes, labels or commentary.\n\n"
        "Refined prompt:"
    )


def clean_refined_prompt(text: str) -> str:
    """Normalize model output into a single-line prompt.

    Strips whitespace, a leading `Refined prompt:` label the model sometimes echoes,
    and one layer of wrapping quotes. Internal line breaks collapse to spaces.
    """
    cleaned = (text or "").strip()

    label = "refined prompt:"
    if cleaned.lower().startswith(label):
        cleaned = cleaned[len(label):].strip()

    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("\"", "'"):
        cleaned = cleaned[1:-1].strip()

    return " ".join(cleaned.split())
