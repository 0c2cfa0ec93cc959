"""Tests for the server-rendered page at /."""

import json
import re
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from todo_app import application
from todo_app.constants import FALLBACK_BODY, RENDER_FAILURE_MARKER
from todo_app.routing import RouterConfig


def initial_state(html: str):
    match = re.search(r"globalThis.__INITIAL_STATE__ = (.*?);</script>", html)
    return json.loads(match.group(1))


class TestPage:
    """Tests for GET / on a fully wired application."""

    def test_renders_todos(self, client):
        client.post("/todos", json={"label": "Ship it"})

        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert initial_state(response.text)["todos"][0]["label"] == "Ship it"
        assert response.text.endswith("</body></html>")

    def test_dev_mode_embeds_build_tag(self, client, identity):
        response = client.get("/")

        assert f'var tag = "{identity.tag}";' in response.text

    def test_production_has_no_livereload(self, db):
        from fastapi.testclient import TestClient

        app = application(RouterConfig(client="", styles="", db=db))

        response = TestClient(app).get("/")

        assert "WebSocket" not in response.text

    def test_store_failure_while_streaming(self, client, db):
        """Test a store failure after the head was sent is reported in-band."""
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(db, "get_todos", side_effect=error):
            response = client.get("/")

        assert response.status_code == 200
        assert initial_state(response.text) is None
        assert response.text.endswith(RENDER_FAILURE_MARKER)

    def test_store_failure_buffered(self, db):
        """Test buffer mode reports the same failure with a 500 status."""
        from fastapi.testclient import TestClient

        app = application(
            RouterConfig(client="", styles="", db=db, render_mode="buffer")
        )
        error = OperationalError("SELECT", {}, Exception("database is locked"))
        with patch.object(db, "get_todos", side_effect=error):
            response = TestClient(app).get("/")

        assert response.status_code == 500
        assert RENDER_FAILURE_MARKER not in response.text

    def test_render_that_cannot_start(self, app, client):
        """Test the fallback document is served when rendering fails at once."""

        def broken_document(signal, on_error):
            raise RuntimeError("template missing")

        with patch.object(
            app.state.context, "document", return_value=broken_document
        ):
            response = client.get("/")

        assert response.status_code == 500
        assert response.text == FALLBACK_BODY

    def test_correlation_id_header(self, client):
        response = client.get("/", headers={"X-Correlation-ID": "abcdef12"})

        assert response.headers["X-Correlation-ID"] == "abcdef12"
