"""FastAPI application for inspecting pairs.

The API is read-only: it exposes reserves, oracle accumulators and quotes.
State changes happen in-process through the Pair interface.
"""

import os

import uvicorn
from fastapi import FastAPI

from ammpair import __version__
from ammpair.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("AMMPAIR_HOST", "127.0.0.1")
PORT = int(os.environ.get("AMMPAIR_PORT", "8000"))
DEBUG = os.environ.get("AMMPAIR_DEBUG", "false").lower() in ("true", "1", "yes")

app = FastAPI(
    title="AMM Pair",
    description="Reserves, TWAP accumulators and quotes of constant product pairs",
    version=__version__,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - AMMPAIR_HOST: Host to bind to (default: 127.0.0.1)
    - AMMPAIR_PORT: Port to bind to (default: 8000)
    - AMMPAIR_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "ammpair.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
