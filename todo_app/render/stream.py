"""
Incremental rendering of a document into a byte stream.

A document is produced by a factory that receives the render's
cancellation token and error callback and returns an async iterable of
HTML chunks. `render_to_stream` builds the document and waits for its
first chunk: anything that goes wrong up to that point is raised to the
caller, because nothing has been sent yet. Once the first chunk exists,
failures are reported through the error callback instead and simply end
the stream.
"""

from typing import AsyncIterable, AsyncIterator, Callable, Protocol

from todo_app.exceptions import RenderCancelled
from todo_app.logging import logger
from todo_app.render.cancellation import CancellationToken

ErrorCallback = Callable[[BaseException], None]


class DocumentFactory(Protocol):
    def __call__(
        self, signal: CancellationToken, on_error: ErrorCallback
    ) -> AsyncIterable[str]: ...


class RenderStream:
    """
    Single-use async iterable of encoded chunks for one render.

    Args:
        first_chunk: The chunk produced while starting the render.
        chunks: Iterator over the remaining chunks.
        signal: Cancellation token checked before every further chunk.
        on_error: Receives errors raised after the first chunk.
    """

    def __init__(
        self,
        first_chunk: str,
        chunks: AsyncIterator[str],
        *,
        signal: CancellationToken,
        on_error: ErrorCallback,
    ) -> None:
        self._first_chunk = first_chunk
        self._chunks = chunks
        self._signal = signal
        self._on_error = on_error
        self.cancelled = False

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            yield self._first_chunk.encode("utf-8")

            while True:
                if self._signal.cancelled:
                    self._mark_cancelled()
                    return

                try:
                    chunk = await anext(self._chunks)
                except StopAsyncIteration:
                    return
                except RenderCancelled:
                    self._mark_cancelled()
                    return
                except Exception as exc:
                    self._on_error(exc)
                    return

                yield chunk.encode("utf-8")
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Stop the underlying document so it can release its resources."""
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is not None:
            await aclose()

    def _mark_cancelled(self) -> None:
        self.cancelled = True
        logger.debug(f"Render cancelled: {self._signal.reason}")


async def render_to_stream(
    document: DocumentFactory,
    *,
    signal: CancellationToken,
    on_error: ErrorCallback,
) -> RenderStream:
    """
    Start rendering a document and return its stream.

    Args:
        document: Factory producing the document's chunks.
        signal: Cancellation token for this render.
        on_error: Receives errors that happen once streaming has begun.

    Returns:
        The stream, already holding the first chunk.

    Raises:
        Exception: Whatever the document raised before its first chunk.
    """
    signal.raise_if_cancelled()

    chunks = aiter(document(signal, on_error))
    try:
        first_chunk = await anext(chunks)
    except StopAsyncIteration:
        first_chunk = ""

    return RenderStream(first_chunk, chunks, signal=signal, on_error=on_error)
