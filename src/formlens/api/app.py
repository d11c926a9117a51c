"""FastAPI application exposing the read endpoints."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from formlens import __version__
from formlens.config import Settings, load_settings
from formlens.gateway import SubmissionGateway, build_gateways

from .handlers import handle_get_forms, handle_get_submissions


def create_app(settings: Optional[Settings] = None, gateway: Optional[SubmissionGateway] = None) -> FastAPI:
    """App wired to a submission gateway; built from settings when none is given."""
    collections = None
    if gateway is None:
        settings = settings or load_settings()
        gateway, collections = build_gateways(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await gateway.aclose()
        if collections is not None:
            await collections.aclose()

    app = FastAPI(title="formlens", version=__version__, lifespan=lifespan)
    app.state.gateway = gateway

    @app.get("/_api/forms")
    async def get_forms(request: Request):
        status, body = await handle_get_forms(request.query_params, request.app.state.gateway)
        return JSONResponse(status_code=status, content=body)

    @app.get("/_api/submissions")
    async def get_submissions(request: Request):
        status, body = await handle_get_submissions(request.query_params, request.app.state.gateway)
        return JSONResponse(status_code=status, content=body)

    return app
