"""
HTTP API adapter for the Pixel Art Genie pipeline.

Architectural role:
- Serve the single-page interface rendered by `pixel_genie.ui`.
- Expose the generation state and the submit action as JSON.
- Delegate all pipeline work to `pixel_genie.core.engine.GenerationPipeline`.

Endpoint responsibilities:
- `GET /`: full page for the current state.
- `GET /view`: main panel fragment, polled by the page while loading.
- `GET /api/state`: current state as JSON.
- `POST /api/generate`: run one request sequence and return the final state.
- `GET /healthz`: liveness probe.

API request lifecycle (`POST /api/generate`):
1. Parse and validate the JSON body (`prompt`) with pydantic.
2. Refuse with HTTP 409 while another sequence is loading.
3. Await the pipeline; validation and remote failures land in `error`.
4. Return the final state snapshot.

Error handling strategy:
- Malformed bodies follow FastAPI's default 422 handling.
- A concurrent submission returns structured 409 JSON.
- Pipeline failures are reported in the state with HTTP 200, mirroring the page's
  error banner.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Emits request debug logs only when `DEBUG == "true"`.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from pixel_genie.core.engine import GenerationInProgressError, GenerationPipeline
from pixel_genie.ui.components import main_panel
from pixel_genie.ui.page import render_page


logger = logging.getLogger(__name__)

# Sensitive request/response debug logging is opt-in.
DEBUG = os.getenv("DEBUG") == "true"


# ============================================================
# Request Schema
# ============================================================

class GenerateRequest(BaseModel):
    """Body of `POST /api/generate`."""
    prompt: str


# ============================================================
# Application Factory
# ============================================================

def create_app(pipeline: GenerationPipeline | None = None) -> FastAPI:
    """
    Build the FastAPI application around one pipeline instance.

    Args:
        pipeline: Orchestrator to expose. A default one wired to the configured
            providers is created when omitted.

    Returns:
        Configured `FastAPI` application. The pipeline is reachable as
        `app.state.pipeline`.
    """
    app = FastAPI(title="Pixel Art Genie")
    app.state.pipeline = pipeline or GenerationPipeline()

    @app.get("/", response_class=HTMLResponse)
    def index():
        return render_page(app.state.pipeline.state)

    @app.get("/view", response_class=HTMLResponse)
    def view():
        return main_panel(app.state.pipeline.state)

    @app.get("/api/state")
    def get_state():
        return app.state.pipeline.state.to_dict()

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.post("/api/generate")
    async def generate(body: GenerateRequest):
        """
        Run the two-step pipeline for `body.prompt`.

        Returns HTTP 409 when a sequence is already in flight; otherwise the final
        state, whose `error` field carries validation or remote failures.
        """
        if DEBUG:
            logger.debug("Incoming prompt: %r", body.prompt)

        try:
            state = await app.state.pipeline.submit(body.prompt)
        except GenerationInProgressError as err:
            return JSONResponse(status_code=409, content={"error": str(err)})

        if DEBUG:
            logger.debug(
                "Final state: error=%r refined=%r image=%s",
                state.error,
                state.refined_prompt,
                "set" if state.generated_image else "empty",
            )

        return state.to_dict()

    return app


app = create_app()
