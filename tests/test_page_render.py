"""Tests for the per-request render state machine."""

import warnings
from pathlib import Path

import pytest

import todo_app.render.page as page_module
from todo_app.render.page import PageRender, RenderState


class TestPageRender:
    """Tests for PageRender class."""

    def test_initial_state(self):
        page = PageRender()

        assert page.state is RenderState.START
        assert page.status_code == 200
        assert not page.finished

    def test_start_failed(self):
        page = PageRender()

        page.start_failed(RuntimeError("boom"))

        assert page.state is RenderState.START_FAILED
        assert page.status_code == 500
        assert page.finished

    def test_complete(self):
        page = PageRender()
        page.start_streaming()

        page.finish()

        assert page.state is RenderState.COMPLETE
        assert page.status_code == 200

    def test_stream_error(self):
        """Test an error recorded while streaming resolves to 500."""
        page = PageRender()
        page.start_streaming()

        page.record_error(RuntimeError("store down"))
        assert page.status_code == 500

        page.finish()

        assert page.state is RenderState.STREAM_ERROR
        assert page.status_code == 500
        assert page.did_error

    def test_cancelled_finish(self):
        page = PageRender()
        page.start_streaming()

        page.finish(cancelled=True)

        assert page.cancelled
        assert page.state is RenderState.COMPLETE

    def test_every_error_is_kept(self):
        page = PageRender()
        page.start_streaming()

        page.record_error(ValueError("a"))
        page.record_error(ValueError("b"))

        assert [str(e) for e in page.errors] == ["a", "b"]

    def test_invalid_transition(self):
        page = PageRender()

        with pytest.raises(RuntimeError):
            page.finish()

    def test_cannot_start_twice(self):
        page = PageRender()
        page.start_streaming()

        with pytest.raises(RuntimeError):
            page.start_failed(RuntimeError("late"))


def test_module_source_compiles_without_warnings():
    """Test the module has no invalid escape sequences."""
    source = Path(page_module.__file__).read_text()

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, page_module.__file__, "exec")
