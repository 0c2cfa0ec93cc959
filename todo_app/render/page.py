"""
Per-request render state.

    START --(first chunk)--> STREAMING --(end, no error)--> COMPLETE
      |                          |
      |                          +--(end, error recorded)--> STREAM_ERROR
      |
      +--(raised before first chunk)--> START_FAILED

Every recorded error is logged, whatever the state, and any recorded
error resolves the response status to 500.
"""

from enum import Enum

from starlette import status

from todo_app.logging import logger
from todo_app.utils.metrics import page_renders_total


class RenderState(str, Enum):
    START = "start"
    STREAMING = "streaming"
    COMPLETE = "complete"
    STREAM_ERROR = "stream_error"
    START_FAILED = "start_failed"


class PageRender:
    """State machine for one page-view render."""

    def __init__(self) -> None:
        self.state = RenderState.START
        self.errors: list[BaseException] = []
        self.cancelled = False

    @property
    def did_error(self) -> bool:
        return bool(self.errors)

    @property
    def finished(self) -> bool:
        return self.state in (
            RenderState.COMPLETE,
            RenderState.STREAM_ERROR,
            RenderState.START_FAILED,
        )

    @property
    def status_code(self) -> int:
        """
        HTTP status for the render.

        Final once the render has finished; before that it reflects the
        errors recorded so far.
        """
        if self.state in (RenderState.START_FAILED, RenderState.STREAM_ERROR):
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        if self.did_error:
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        return status.HTTP_200_OK

    def record_error(self, exc: BaseException) -> None:
        """Error callback handed to the renderer."""
        self.errors.append(exc)
        logger.error(
            f"Render error ({self.state.value}): {exc}",
            exc_info=exc,
        )

    def start_failed(self, exc: BaseException) -> None:
        self._transition(RenderState.START, RenderState.START_FAILED)
        self.record_error(exc)
        page_renders_total.labels(state=self.state.value).inc()

    def start_streaming(self) -> None:
        self._transition(RenderState.START, RenderState.STREAMING)

    def finish(self, *, cancelled: bool = False) -> None:
        """Resolve the final state once the stream has ended."""
        next_state = (
            RenderState.STREAM_ERROR if self.did_error else RenderState.COMPLETE
        )
        self._transition(RenderState.STREAMING, next_state)
        self.cancelled = cancelled

        label = "cancelled" if cancelled else self.state.value
        page_renders_total.labels(state=label).inc()

    def _transition(self, expected: RenderState, target: RenderState) -> None:
        if self.state is not expected:
            raise RuntimeError(
                f"Invalid render transition {self.state.value} -> {target.value}"
            )
        self.state = target
