"""
FastAPI application for the storysync proxy.

Exposes the synchronization boundary used by the requirements dashboard:
validate the batch, replicate it into the tracker, answer with a single
success flag or error message.
"""

from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storysync import __version__
from storysync.config import Config
from storysync.sync.synchronizer import BatchSynchronizer
from storysync.validation import check_sync_request

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None, synchronizer: BatchSynchronizer | None = None) -> FastAPI:
    """Create the proxy application.

    Args:
        config: Service configuration; defaults are used when omitted.
        synchronizer: Pre-built synchronizer, mainly to stub the tracker in tests.
    """
    config = config or Config()
    synchronizer = synchronizer or BatchSynchronizer(config.tracker)

    app = FastAPI(
        title="storysync",
        description="Replicates dashboard work items into an issue tracker",
        version=__version__,
    )
    app.state.config = config
    app.state.synchronizer = synchronizer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    async def sync_items(request: Request) -> JSONResponse:
        """Replicate a batch of work items into the tracker."""
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid JSON body"})

        sync_request, error = check_sync_request(payload)
        if sync_request is None:
            return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": error})

        result = await request.app.state.synchronizer.synchronize(sync_request)
        if result.success:
            return JSONResponse(content={"success": True})
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": result.error_message})

    app.add_api_route("/api/sync", sync_items, methods=["POST"], tags=["sync"])
    # Route name used by the first dashboard releases
    app.add_api_route("/api/jira", sync_items, methods=["POST"], tags=["sync"], include_in_schema=False)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
