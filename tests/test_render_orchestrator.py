"""
Tests for the streaming render orchestrator.

Covers the fallback document when a render cannot start, late failures in
both stream and buffer mode, and cancellation on client disconnect.
"""

import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from todo_app.constants import FALLBACK_BODY, RENDER_FAILURE_MARKER
from todo_app.render.orchestrator import StreamingRenderOrchestrator
from todo_app.render.page import RenderState
from todo_app.render.response import RenderStreamResponse


async def complete_document(signal, on_error):
    yield "<!doctype html><html><body>"
    yield "<p>ok</p>"
    yield "</body></html>"


async def failing_document(signal, on_error):
    raise RuntimeError("cannot render")
    yield


async def raising_mid_stream(signal, on_error):
    yield "<!doctype html><html><body>"
    raise RuntimeError("store down")


async def reporting_mid_stream(signal, on_error):
    yield "<!doctype html><html><body>"
    on_error(RuntimeError("todos unavailable"))
    yield "</body></html>"


def client_for(mode, document):
    """
    Create a test client serving one document at /.

    Returns:
        TestClient: Client for a minimal app using the orchestrator.
    """
    orchestrator = StreamingRenderOrchestrator(mode)
    app = FastAPI()

    @app.get("/")
    async def index():
        return await orchestrator.render(document)

    return TestClient(app)


class TestFallback:
    """Tests for renders that fail before the first chunk."""

    @pytest.mark.parametrize("mode", ["stream", "buffer"])
    def test_start_failure_serves_fallback(self, mode):
        response = client_for(mode, failing_document).get("/")

        assert response.status_code == 500
        assert response.text == FALLBACK_BODY
        assert response.headers["content-type"].startswith("text/html")


class TestStreamMode:
    """Tests for the default streaming mode."""

    def test_complete_render(self):
        response = client_for("stream", complete_document).get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.text == "<!doctype html><html><body><p>ok</p></body></html>"
        assert RENDER_FAILURE_MARKER not in response.text

    def test_document_error_appends_marker(self):
        """Test a failure after headers were sent is reported in-band."""
        response = client_for("stream", raising_mid_stream).get("/")

        assert response.status_code == 200
        assert response.text.startswith("<!doctype html><html><body>")
        assert response.text.endswith(RENDER_FAILURE_MARKER)

    def test_reported_error_appends_marker(self):
        response = client_for("stream", reporting_mid_stream).get("/")

        assert response.text == (
            "<!doctype html><html><body></body></html>" + RENDER_FAILURE_MARKER
        )

    @pytest.mark.asyncio
    async def test_error_before_headers_sets_status(self):
        """Test an error recorded with the first chunk still yields 500."""

        async def document(signal, on_error):
            on_error(RuntimeError("early"))
            yield "<p>partial</p>"

        response = await StreamingRenderOrchestrator("stream").render(document)

        assert isinstance(response, RenderStreamResponse)
        assert response.status_code == 500


class TestBufferMode:
    """Tests for the buffered mode."""

    def test_complete_render(self):
        response = client_for("buffer", complete_document).get("/")

        assert response.status_code == 200
        assert response.text == "<!doctype html><html><body><p>ok</p></body></html>"

    def test_document_error_sets_status(self):
        """Test a late failure is reported through the status line."""
        response = client_for("buffer", raising_mid_stream).get("/")

        assert response.status_code == 500
        assert response.text == "<!doctype html><html><body>"

    def test_reported_error_sets_status(self):
        response = client_for("buffer", reporting_mid_stream).get("/")

        assert response.status_code == 500
        assert RENDER_FAILURE_MARKER not in response.text


class TestCancellation:
    """Tests for client disconnects during a streamed render."""

    @pytest.mark.asyncio
    async def test_disconnect_stops_render(self):
        closed = []

        async def document(signal, on_error):
            try:
                yield "<p>1</p>"
                await asyncio.sleep(0.05)
                yield "<p>2</p>"
                await asyncio.sleep(0.05)
                yield "<p>3</p>"
            finally:
                closed.append(True)

        async def receive():
            return {"type": "http.disconnect"}

        sent = []

        async def send(message):
            sent.append(message)

        response = await StreamingRenderOrchestrator("stream").render(document)
        await response({"type": "http"}, receive, send)

        body = b"".join(m.get("body", b"") for m in sent)
        assert b"<p>1</p>" in body
        assert b"<p>3</p>" not in body
        assert closed == [True]
        assert response.signal.cancelled
        assert response.page.cancelled
        assert response.page.state is RenderState.COMPLETE

    @pytest.mark.asyncio
    async def test_broken_transport_cancels(self):
        """Test a send failure is treated as a disconnect."""

        async def receive():
            await asyncio.Event().wait()

        async def send(message):
            if message["type"] == "http.response.body":
                raise OSError("connection reset")

        response = await StreamingRenderOrchestrator("stream").render(
            complete_document
        )
        await response({"type": "http"}, receive, send)

        assert response.signal.cancelled
        assert response.page.finished


def test_unknown_mode():
    with pytest.raises(ValueError):
        StreamingRenderOrchestrator("eager")
