"""
Terminal adapter for Pixel Art Genie.

Architectural role:
- Exposes the generation pipeline from a terminal, one-shot or interactive.
- Delegates all pipeline work to `pixel_genie.core.engine.GenerationPipeline`.
- Writes generated images to disk, since a terminal cannot display them.

Request lifecycle (per prompt):
1. Read the prompt from argv (one-shot) or stdin (interactive).
2. Submit it to the pipeline; stage labels are printed as they change.
3. Print the refined prompt and the saved image path, or the error message.

Input validation behavior:
- Empty input is forwarded to the pipeline, which reports the validation error.

Error handling strategy:
- EOF and keyboard interrupts end the interactive loop without a traceback.
- Image decoding/writing failures are reported and count as a failed run.

Exit codes:
- 0 when the last run succeeded, 1 when it ended with an error.
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import asyncio
import os
import sys
from datetime import datetime

from pixel_genie.api.main import configure_logging
from pixel_genie.core.engine import GenerationPipeline
from pixel_genie.core.state import GenerationState
from pixel_genie.image.encoding import extension_for, split_data_uri


SEPARATOR = "-" * 60


# =========================================================
# UTF-8 SAFE OUTPUT
# Best-effort stdout encoding normalization for interactive terminals.
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except (AttributeError, ValueError, OSError):
        pass


def save_image(data_uri: str, output_dir: str) -> str:
    """Decode `data_uri` into `output_dir` and return the written path."""
    mime_type, raw = split_data_uri(data_uri)

    os.makedirs(output_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    path = os.path.join(output_dir, f"pixel_art_{stamp}.{extension_for(mime_type)}")

    with open(path, "wb") as f:
        f.write(raw)

    return path


class StagePrinter:
    """Pipeline listener that prints each new stage label once."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout
        self.last_stage = ""

    def __call__(self, state: GenerationState):
        if state.current_stage and state.current_stage != self.last_stage:
            print(f"... {state.current_stage}", file=self.stream, flush=True)
        self.last_stage = state.current_stage


def run_once(pipeline: GenerationPipeline, prompt: str, output_dir: str) -> bool:
    """Run one sequence, print the outcome, and return whether it succeeded."""
    state = asyncio.run(pipeline.submit(prompt))

    if state.refined_prompt:
        print("\nRefined Prompt:\n")
        print(state.refined_prompt)

    if state.error:
        print(f"\nError: {state.error}")
        return False

    try:
        path = save_image(state.generated_image, output_dir)
    except (ValueError, OSError) as e:
        print(f"\nError: could not save image ({e})")
        return False

    print(f"\nImage saved to: {path}")
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixel-genie",
        description="Turn an idea into pixel art.",
    )
    parser.add_argument(
        "prompt",
        nargs="*",
        help="Prompt for a single run. Omit to start an interactive session.",
    )
    parser.add_argument(
        "--output-dir",
        default=os.getenv("OUTPUT_DIR", "output"),
        help="Directory for generated images (default: %(default)s).",
    )
    return parser


def main(argv=None, pipeline: GenerationPipeline | None = None) -> int:
    """
    Parse arguments and run one-shot or interactive mode.

    Args:
        argv: Argument list; `sys.argv[1:]` when omitted.
        pipeline: Orchestrator to use; a default one is created when omitted.

    Returns:
        Process exit code.
    """
    args = build_parser().parse_args(argv)
    configure_logging()

    pipeline = pipeline or GenerationPipeline()
    printer = StagePrinter()
    pipeline.add_listener(printer)

    try:
        if args.prompt:
            succeeded = run_once(pipeline, " ".join(args.prompt), args.output_dir)
        else:
            succeeded = interactive(pipeline, args.output_dir)
    finally:
        # An injected pipeline outlives this call.
        pipeline.remove_listener(printer)

    return 0 if succeeded else 1


def interactive(pipeline: GenerationPipeline, output_dir: str) -> bool:
    """Prompt loop; returns whether the last run succeeded."""
    print("Pixel Art Genie started. (Type 'exit' to quit)\n")
    print(SEPARATOR)

    succeeded = True

    while True:

        try:
            prompt = input("Prompt: ").strip()

        except EOFError:
            print()
            break

        except KeyboardInterrupt:
            print("\nOperation cancelled by user.")
            break

        if prompt.lower() in ("exit", "quit"):
            print("Shutting down.")
            break

        succeeded = run_once(pipeline, prompt, output_dir)

        print("\n" + SEPARATOR + "\n")

    return succeeded


if __name__ == "__main__":
    sys.exit(main())
