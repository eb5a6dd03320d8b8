"""Host-facing RPC endpoints.

Routes:
  GET  /metadata      plugin identity
  GET  /capabilities  supported capability set
  POST /configure     apply feature gates (400 on invalid config)
  POST /detect        detect a Go project
  POST /execute       run a catalogue command; failures are in the body
  GET  /commands      list catalogue entries
  GET  /health        200 while serving, 503 after shutdown begins
"""

import asyncio
import logging
import threading
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from glide_go.plugin.errors import ConfigInvalidError, PluginNotServingError
from glide_go.plugin.schemas import (
    CapabilitiesResponse,
    CommandInfo,
    ConfigureResponse,
    ContextRequest,
    ContextResponse,
    ExecuteRequest,
    ExecuteResponse,
    HealthResponse,
    Metadata,
)
from glide_go.plugin.shell import GoPlugin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["plugin"])


def get_plugin(request: Request) -> GoPlugin:
    return request.app.state.plugin


@router.get("/metadata", response_model=Metadata)
async def metadata(plugin: GoPlugin = Depends(get_plugin)) -> Metadata:
    return plugin.metadata()


@router.get("/capabilities", response_model=CapabilitiesResponse)
async def capabilities(plugin: GoPlugin = Depends(get_plugin)) -> CapabilitiesResponse:
    return CapabilitiesResponse(capabilities=plugin.capabilities())


@router.post("/configure", response_model=ConfigureResponse)
async def configure(
    body: Any = Body(default=None),
    plugin: GoPlugin = Depends(get_plugin),
) -> ConfigureResponse:
    """Apply the host's typed configuration.

    The body is validated by the plugin rather than by FastAPI so that a
    bad value surfaces as a config-invalid error the host can recognise.
    """
    try:
        config = plugin.configure(body)
    except ConfigInvalidError as exc:
        logger.warning("Rejected plugin configuration: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"kind": exc.kind, "message": str(exc)},
        ) from exc
    return ConfigureResponse(config=config)


@router.post("/detect", response_model=ContextResponse)
async def detect(
    body: ContextRequest,
    plugin: GoPlugin = Depends(get_plugin),
) -> ContextResponse:
    # Detection is blocking file I/O; keep it off the event loop. A worker
    # thread cannot be cancelled, so the walk is told to stop instead.
    cancelled = threading.Event()
    try:
        return await asyncio.to_thread(plugin.detect_context, body, cancelled)
    except asyncio.CancelledError:
        cancelled.set()
        raise


@router.post("/execute", response_model=ExecuteResponse)
async def execute(
    body: ExecuteRequest,
    plugin: GoPlugin = Depends(get_plugin),
) -> ExecuteResponse:
    return await plugin.execute(body)


@router.get("/commands", response_model=list[CommandInfo])
async def list_commands(plugin: GoPlugin = Depends(get_plugin)) -> list[CommandInfo]:
    return plugin.list_commands()


@router.get("/health", response_model=HealthResponse)
async def health(plugin: GoPlugin = Depends(get_plugin)) -> HealthResponse:
    try:
        plugin.health_check()
    except PluginNotServingError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"kind": exc.kind, "message": str(exc)},
        ) from exc
    return HealthResponse()
