"""Tests for router construction and the application factory."""

import pytest

from todo_app import application
from todo_app.livereload.build_identity import build_identity
from todo_app.routing import (
    RouterConfig,
    collect_subrouters,
    create_router,
    default_router_config,
)


def route_paths(router):
    return {route.path for route in router.routes}


class TestCreateRouter:
    """Tests for create_router."""

    def test_includes_every_endpoint(self, router_config):
        info = create_router(router_config)

        assert route_paths(info.router) >= {
            "/",
            "/client.js",
            "/styles.css",
            "/todos",
            "/todos/{todo_id}",
            "/health",
            "/metrics",
            "/livereload/{build_id}",
        }

    def test_context(self, router_config, identity, db):
        context = create_router(router_config).context

        assert context.db is db
        assert context.build_identity is identity
        assert context.dev_mode is True
        assert context.broadcaster.styles == "body { color: red; }"
        assert len(context.registry) == 0

    def test_process_identity_by_default(self, db):
        info = create_router(RouterConfig(client="", styles="", db=db))

        assert info.context.build_identity is build_identity

    @pytest.mark.asyncio
    async def test_update_styles(self, router_config):
        info = create_router(router_config)

        assert await info.update_styles("new") == 0
        assert info.context.broadcaster.styles == "new"

    def test_each_router_has_own_registry(self, router_config):
        first = create_router(router_config).context
        second = create_router(router_config).context

        assert first.registry is not second.registry

    def test_render_mode(self, db):
        info = create_router(
            RouterConfig(client="", styles="", db=db, render_mode="buffer")
        )

        assert info.context.orchestrator.mode == "buffer"


def test_collect_subrouters_is_repeatable():
    assert route_paths(collect_subrouters()) == route_paths(collect_subrouters())


def test_default_config_reads_assets(tmp_path, monkeypatch):
    from todo_app.settings import app_settings

    styles = tmp_path / "styles.css"
    styles.write_text("h1 {}", encoding="utf-8")
    monkeypatch.setattr(app_settings, "STYLES_PATH", str(styles))
    monkeypatch.setattr(app_settings, "CLIENT_BUNDLE_PATH", None)

    config = default_router_config()

    assert config.styles == "h1 {}"
    assert config.client == ""


def test_application_attaches_context(router_config):
    app = application(router_config)

    assert app.state.context.db is router_config.db
