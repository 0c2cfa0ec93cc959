# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
from contextlib import asynccontextmanager

from fastapi import FastAPI

from todo_app.livereload.watcher import AssetWatcher
from todo_app.logging import logger
from todo_app.middlewares.correlation_id import CorrelationIDMiddleware
from todo_app.middlewares.logging_context import LoggingContextMiddleware
from todo_app.routing import RouterConfig, create_router, default_router_config
from todo_app.settings import app_settings
from todo_app.utils.error_handler import register_exception_handlers


def lifespan(watch_assets: bool):
    """
    Application lifespan handler.

    Startup initializes the todo store and, when enabled, starts watching
    the built assets. Shutdown stops the watcher and releases the store.
    """

    @asynccontextmanager
    async def wrapper(app: FastAPI):
        context = app.state.context
        watcher: AssetWatcher | None = None

        logger.info("Application startup initiated")
        context.db.init()
        logger.info("Initialized database and tables")

        if watch_assets:
            watcher = AssetWatcher(
                context.broadcaster,
                styles_path=app_settings.STYLES_PATH,
                client_path=app_settings.CLIENT_BUNDLE_PATH,
            )
            watcher.start()

        try:
            yield
        finally:
            logger.info("Application shutdown initiated")
            if watcher is not None:
                await watcher.stop()
            context.db.dispose()
            logger.info("Application shutdown complete")

    return wrapper


def application(config: RouterConfig | None = None) -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    Without a config, assets, store and render settings come from
    `app_settings`, and the asset watcher runs when `WATCH_ASSETS` is set.

    The server context built by `create_router` is attached to
    `app.state.context`, where endpoints and the live reload consumer find
    it.

    Args:
        config: Explicit server inputs, mainly for tests and embedding.
    """
    watch_assets = config is None and app_settings.WATCH_ASSETS
    if config is None:
        config = default_router_config()

    info = create_router(config)

    app = FastAPI(
        title="Todos",
        description="Todo list with streaming server render and live reload",
        version="1.0.0",
        lifespan=lifespan(watch_assets),
    )
    app.state.context = info.context

    app.include_router(info.router)
    register_exception_handlers(app)

    # Middlewares (execute in REVERSE order of registration)
    # Execution flow: CorrelationIDMiddleware -> LoggingContextMiddleware
    app.add_middleware(LoggingContextMiddleware)
    app.add_middleware(CorrelationIDMiddleware)

    return app
