# octogrbl/dependencies.py
from contextlib import asynccontextmanager
import httpx
from fastapi import FastAPI, Request

from .driver import OctoPrintGrblDriver
from .settings import settings

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Creates the shared httpx.AsyncClient and the configured driver at start-up
    and closes the client at shutdown.
    """
    app.state.driver = OctoPrintGrblDriver.from_settings(settings)
    async with httpx.AsyncClient(timeout=settings.upload_timeout) as client:
        app.state.http_client = client
        yield

def get_http_client(request: Request) -> httpx.AsyncClient:
    """Dependency providing the shared httpx.AsyncClient."""
    return request.app.state.http_client

def get_driver(request: Request) -> OctoPrintGrblDriver:
    """Dependency providing the driver whose properties the host edits."""
    return request.app.state.driver
