import json
from typing import Any, AsyncIterator, Callable, Sequence

from starlette.concurrency import run_in_threadpool

from todo_app.constants import LIVERELOAD_PATH, LOAD_STYLES_MESSAGE, RELOAD_MESSAGE
from todo_app.render.cancellation import CancellationToken
from todo_app.render.stream import ErrorCallback

TodosLoader = Callable[[], Sequence[Any]]

HEAD = (
    "<!doctype html>"
    '<html lang="en">'
    "<head>"
    '<meta charset="utf-8" />'
    '<meta name="viewport" content="width=device-width, initial-scale=1" />'
    "<title>Todos</title>"
    '<link rel="stylesheet" href="/styles.css" />'
    '<script type="module" async src="/client.js"></script>'
    "</head>"
)

BODY_OPEN = '<body><div id="root"></div>'

BODY_CLOSE = "</body></html>"

# __BUILD_TAG__ is replaced with the JSON-encoded build tag
LIVERELOAD_SCRIPT = """<script>
(function () {
  var tag = __BUILD_TAG__;
  var path = "%(path)s".replace("{build_id}", encodeURIComponent(tag));
  var retryDelay = 1000;

  function reloadStyles() {
    var link = document.querySelector('link[rel="stylesheet"][href^="/styles.css"]');
    if (!link) return;
    link.href = "/styles.css?t=" + Date.now();
  }

  function connect() {
    var scheme = location.protocol === "https:" ? "wss://" : "ws://";
    var socket = new WebSocket(scheme + location.host + path);
    socket.onmessage = function (event) {
      if (event.data === "%(reload)s") {
        location.reload();
      } else if (event.data === "%(load_styles)s") {
        reloadStyles();
      }
    };
    socket.onclose = function () {
      setTimeout(connect, retryDelay);
    };
  }

  connect();
})();
</script>""" % {
    "path": LIVERELOAD_PATH,
    "reload": RELOAD_MESSAGE,
    "load_styles": LOAD_STYLES_MESSAGE,
}


def safe_json(value: Any) -> str:
    """JSON for embedding inside a <script> element."""
    return (
        json.dumps(value, default=str)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def initial_state_script(state: Any) -> str:
    return f"<script>globalThis.__INITIAL_STATE__ = {safe_json(state)};</script>"


def livereload_script(build_tag: str) -> str:
    return LIVERELOAD_SCRIPT.replace("__BUILD_TAG__", safe_json(build_tag))


def _serialize(todo: Any) -> Any:
    if hasattr(todo, "model_dump"):
        return todo.model_dump()
    return todo


class TodoDocument:
    """
    The todo page, rendered in chunks.

    The head goes out before the todo list is loaded, so a failing store
    surfaces as an error reported through the render's error callback. The
    document still closes properly in that case, with a null initial state
    that makes the client fetch the list itself.

    Args:
        load_todos: Blocking callable returning the current todos.
        build_tag: Build identity tag embedded in the live reload script.
        dev_mode: Include the live reload script.
    """

    def __init__(
        self,
        load_todos: TodosLoader,
        *,
        build_tag: str,
        dev_mode: bool = False,
    ) -> None:
        self.load_todos = load_todos
        self.build_tag = build_tag
        self.dev_mode = dev_mode

    def __call__(
        self, signal: CancellationToken, on_error: ErrorCallback
    ) -> AsyncIterator[str]:
        return self._render(signal, on_error)

    async def _render(
        self, signal: CancellationToken, on_error: ErrorCallback
    ) -> AsyncIterator[str]:
        yield HEAD

        signal.raise_if_cancelled()
        yield BODY_OPEN

        signal.raise_if_cancelled()
        try:
            todos = await run_in_threadpool(self.load_todos)
        except Exception as exc:
            on_error(exc)
            state = None
        else:
            state = {"todos": [_serialize(todo) for todo in todos]}
        yield initial_state_script(state)

        if self.dev_mode:
            signal.raise_if_cancelled()
            yield livereload_script(self.build_tag)

        yield BODY_CLOSE
