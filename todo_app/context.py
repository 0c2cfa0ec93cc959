"""Per-application state shared by every endpoint."""

from dataclasses import dataclass, field

from todo_app.livereload.broadcaster import StyleBroadcaster
from todo_app.livereload.build_identity import BuildIdentity
from todo_app.livereload.registry import ConnectionRegistry
from todo_app.render.document import TodoDocument
from todo_app.render.orchestrator import StreamingRenderOrchestrator
from todo_app.storage.database import Database


@dataclass
class ServerContext:
    """
    Everything one server instance owns.

    Built once by `create_router` and attached to `app.state.context`.
    Two applications never share a registry, so connections and broadcasts
    stay scoped to the server that accepted them.
    """

    db: Database
    registry: ConnectionRegistry
    broadcaster: StyleBroadcaster
    build_identity: BuildIdentity
    orchestrator: StreamingRenderOrchestrator = field(
        default_factory=StreamingRenderOrchestrator
    )
    dev_mode: bool = False

    def document(self) -> TodoDocument:
        """The page document for a single render."""
        return TodoDocument(
            self.db.get_todos,
            build_tag=self.build_identity.tag,
            dev_mode=self.dev_mode,
        )
