import os
import pkgutil
from dataclasses import dataclass
from importlib import import_module
from typing import Awaitable, Callable

from fastapi import APIRouter

from todo_app.context import ServerContext
from todo_app.livereload.broadcaster import StyleBroadcaster
from todo_app.livereload.build_identity import BuildIdentity, build_identity
from todo_app.livereload.registry import ConnectionRegistry
from todo_app.logging import logger
from todo_app.render.orchestrator import RenderMode, StreamingRenderOrchestrator
from todo_app.settings import app_settings
from todo_app.storage.database import Database


@dataclass
class RouterConfig:
    """
    Inputs for building a server.

    Attributes:
        client: Client bundle served at /client.js
        styles: Initial stylesheet served at /styles.css
        db: Todo store
        dev_mode: Embed the live reload client in the page
        build_identity: Build tag; the process-wide one when omitted
        render_mode: "stream" or "buffer" page render
    """

    client: str
    styles: str
    db: Database
    dev_mode: bool = False
    build_identity: BuildIdentity | None = None
    render_mode: RenderMode = "stream"


@dataclass
class RouterInfo:
    router: APIRouter
    update_styles: Callable[[str], Awaitable[int]]
    context: ServerContext


# Track registered modules to prevent duplicate logging
_registered_http_modules: set[str] = set()
_registered_ws_modules: set[str] = set()


def collect_subrouters() -> APIRouter:
    """
    Collect the routers of every HTTP and WebSocket endpoint module.

    Modules under `api/http` and `api/ws` each expose a module-level
    `router`; they are discovered with pkgutil and included into one
    `APIRouter`.
    """
    main_router: APIRouter = APIRouter()

    app_dir = os.path.dirname(__file__)
    app_name = os.path.basename(app_dir)

    for _, module, _ in pkgutil.iter_modules([f"{app_dir}/api/http"]):
        api = import_module(f".{module}", package=f"{app_name}.api.http")
        main_router.include_router(api.router)

        if module not in _registered_http_modules:
            logger.info(f'Register "{module}" api')
            _registered_http_modules.add(module)

    for _, module, _ in pkgutil.iter_modules([f"{app_dir}/api/ws"]):
        consumer = import_module(f".{module}", package=f"{app_name}.api.ws")
        main_router.include_router(consumer.router)

        if module not in _registered_ws_modules:
            logger.info(f'Register "{module}" websocket consumer')
            _registered_ws_modules.add(module)

    return main_router


def create_router(config: RouterConfig) -> RouterInfo:
    """
    Build the server context and the router serving it.

    Returns:
        The router, the coroutine that publishes a new stylesheet to every
        connected client, and the context the endpoints read from
        `app.state.context`.
    """
    registry = ConnectionRegistry()
    broadcaster = StyleBroadcaster(
        registry, styles=config.styles, client=config.client
    )
    context = ServerContext(
        db=config.db,
        registry=registry,
        broadcaster=broadcaster,
        build_identity=config.build_identity or build_identity,
        orchestrator=StreamingRenderOrchestrator(config.render_mode),
        dev_mode=config.dev_mode,
    )

    return RouterInfo(
        router=collect_subrouters(),
        update_styles=broadcaster.update_styles,
        context=context,
    )


def _read_asset(path: str | None) -> str:
    if not path:
        return ""
    with open(path, encoding="utf-8") as f:
        return f.read()


def default_router_config() -> RouterConfig:
    """Router config from `app_settings`."""
    return RouterConfig(
        client=_read_asset(app_settings.CLIENT_BUNDLE_PATH),
        styles=_read_asset(app_settings.STYLES_PATH),
        db=Database.from_url(app_settings.DATABASE_URL),
        dev_mode=app_settings.DEV_MODE,
        render_mode=app_settings.RENDER_MODE,
    )
