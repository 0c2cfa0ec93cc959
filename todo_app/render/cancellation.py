from todo_app.exceptions import RenderCancelled


class CancellationToken:
    """
    Cooperative cancellation signal handed to a render.

    The response cancels the token when the client disconnects; the render
    checks it between chunks and stops producing output.
    """

    __slots__ = ("_cancelled", "reason")

    def __init__(self) -> None:
        self._cancelled = False
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str = "cancelled") -> None:
        """Cancel the render. Later calls keep the first reason."""
        if self._cancelled:
            return
        self._cancelled = True
        self.reason = reason

    def raise_if_cancelled(self) -> None:
        """
        Raises:
            RenderCancelled: If the token has been cancelled.
        """
        if self._cancelled:
            raise RenderCancelled(self.reason)
