"""
Review Picker - FastAPI app.

Endpoints:
- GET /next-review  draw one random review and remove it from the remote file
- GET /status       how many reviews remain (read-only)
- GET /health       liveness

Run:
    python -m review_picker          (reads GITHUB_TOKEN / GITHUB_OWNER / GITHUB_REPO)
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from review_picker.drawer import ReviewDrawer
from review_picker.errors import ConfigError, MalformedDataError
from review_picker.github_client import GitHubContentClient
from review_picker.schemas import (
    ErrorResponse,
    NextReviewResponse,
    NoReviewsResponse,
    StatusResponse,
)
from review_picker.settings import Settings

logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Invalid JSON format in reviews.json"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def _error_response(exc: Exception) -> JSONResponse:
    message = INVALID_JSON_MESSAGE if isinstance(exc, MalformedDataError) else INTERNAL_ERROR_MESSAGE
    return JSONResponse(status_code=500, content=ErrorResponse(error=message).model_dump())


def create_app(settings: Optional[Settings] = None, drawer: Optional[ReviewDrawer] = None) -> FastAPI:
    """
    Build the app around a drawer.

    With no drawer, one is built from settings (or Settings.from_env()) on top
    of a GitHubContentClient that is closed on shutdown.
    """
    client: Optional[GitHubContentClient] = None
    if drawer is None:
        settings = settings or Settings.from_env()
        client = GitHubContentClient(settings)
        drawer = ReviewDrawer(client, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        s = drawer.settings
        logger.info(
            "Review picker serving %s/%s:%s@%s",
            s.github_owner, s.github_repo, s.file_path, s.github_branch,
        )
        yield
        logger.info("Review picker shutting down")
        if client is not None:
            await client.aclose()

    app = FastAPI(
        title="Review Picker",
        description="Draws random reviews from a JSON list stored in a GitHub repository",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.drawer = drawer

    @app.get("/health")
    async def health():
        """Liveness: app is running. Does not touch the store."""
        return {"status": "ok"}

    @app.get("/next-review")
    async def next_review(request: Request):
        """Pick ONE random review, remove it from the file, commit, and return it."""
        try:
            result = await request.app.state.drawer.draw_next()
        except Exception as e:
            logger.exception("Error in /next-review")
            return _error_response(e)
        if result.done:
            return NoReviewsResponse(message=result.message, review=None).model_dump()
        return NextReviewResponse(review=result.review, remaining=result.remaining).model_dump()

    @app.get("/status")
    async def status(request: Request):
        """How many reviews remain."""
        try:
            count = await request.app.state.drawer.get_count()
        except Exception as e:
            logger.exception("Error in /status")
            return _error_response(e)
        return StatusResponse(count=count).model_dump()

    return app


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    import uvicorn
    app = create_app(settings)
    logger.info(f"✅ Server running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
