"""Entry point running the records service under uvicorn."""

from fastapi import FastAPI

from services.records.app import app
from shared.config.settings import get_settings


def get_app() -> FastAPI:
    """Return the FastAPI app instance."""
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "services.records.main:app",
        host=settings.app.host,
        port=settings.app.port,
    )
