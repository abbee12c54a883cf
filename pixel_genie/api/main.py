"""
HTTP server entrypoint for Pixel Art Genie.

Architectural role:
- Configures process-wide logging from `LOG_LEVEL`.
- Serves `pixel_genie.api.http_api:app` with uvicorn on `HOST`/`PORT`.

Side effects:
- Loads environment variables at import time via `load_dotenv()`.
- Binds a TCP socket until interrupted.
"""

from dotenv import load_dotenv

load_dotenv()

import logging
import os


def configure_logging():
    """Apply `LOG_LEVEL` (default INFO) to the root logger."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    import uvicorn

    configure_logging()
    uvicorn.run(
        "pixel_genie.api.http_api:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    main()
