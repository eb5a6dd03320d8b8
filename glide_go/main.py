from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from glide_go import __version__
from glide_go.core.config import Settings, get_settings
from glide_go.core.logging import configure_structlog
from glide_go.core.middleware import RequestIdMiddleware
from glide_go.core.sentry import init_sentry
from glide_go.plugin.config import load_plugin_config
from glide_go.plugin.router import router as plugin_router
from glide_go.plugin.shell import GoPlugin


def build_plugin(settings: Settings) -> GoPlugin:
    """Construct the plugin described by `settings` and apply its initial config.

    A config file, when set, takes precedence over the GLIDE_GO_ENABLE_* gates.
    """
    plugin = GoPlugin(commands={} if settings.detection_only else None)
    if settings.config_file:
        plugin.configure(load_plugin_config(settings.config_file))
    else:
        plugin.configure(
            {
                "enable_workspace": settings.enable_workspace,
                "enable_tools": settings.enable_tools,
            }
        )
    return plugin


def create_app(
    settings: Optional[Settings] = None,
    plugin: Optional[GoPlugin] = None,
) -> FastAPI:
    settings = settings or get_settings()

    # ---------------------------------------------------------------------------
    # Logging: configure structlog before anything logs
    # ---------------------------------------------------------------------------
    configure_structlog(debug=settings.debug)

    init_sentry(
        dsn=settings.sentry_dsn,
        environment="development" if settings.debug else "production",
    )

    plugin = plugin or build_plugin(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        plugin.register()
        try:
            yield
        finally:
            plugin.shutdown()

    _app = FastAPI(
        title="Glide Go Plugin",
        description="Go framework detector and command provider for Glide",
        version=__version__,
        lifespan=lifespan,
    )
    _app.state.plugin = plugin
    _app.state.settings = settings

    _app.add_middleware(RequestIdMiddleware)
    _app.include_router(plugin_router)

    return _app
