"""
Synchronous todo store over a SQLModel engine.

Calls block, so async callers (the HTTP handlers and the page render) run
them in a worker thread.
"""

from sqlalchemy import Engine, text
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from todo_app.exceptions import TodoNotFoundError
from todo_app.logging import logger
from todo_app.models.todo import Todo
from todo_app.schemas.todo import TodoFields, TodoUpdate


class Database:
    """
    Todo persistence.

    Args:
        engine: SQLAlchemy engine the store runs on.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, url: str) -> "Database":
        if url in ("sqlite://", "sqlite:///:memory:"):
            return cls.in_memory()
        return cls(create_engine(url))

    @classmethod
    def in_memory(cls) -> "Database":
        """
        Shared in-memory SQLite store, ready to use.

        Every connection reuses the same underlying SQLite connection so the
        data is visible across threads.
        """
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        db = cls(engine)
        db.init()
        return db

    def init(self) -> None:
        SQLModel.metadata.create_all(self.engine)
        logger.debug(f"Database initialized at {self.engine.url}")

    def dispose(self) -> None:
        self.engine.dispose()

    def ping(self) -> None:
        """Run a trivial query, raising if the store is unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def get_todos(self) -> list[Todo]:
        with Session(self.engine) as session:
            return list(session.exec(select(Todo).order_by(Todo.id)).all())

    def add_todo(self, fields: TodoFields) -> Todo:
        todo = Todo(label=fields.label, complete=fields.complete)
        with Session(self.engine) as session:
            session.add(todo)
            session.commit()
            session.refresh(todo)
        return todo

    def update_todo(self, fields: TodoUpdate) -> Todo:
        """
        Replace the label and completion of an existing todo.

        Raises:
            TodoNotFoundError: No todo has the given id.
        """
        with Session(self.engine) as session:
            todo = session.get(Todo, fields.id)
            if todo is None:
                raise TodoNotFoundError(fields.id)

            todo.label = fields.label
            todo.complete = fields.complete
            session.add(todo)
            session.commit()
            session.refresh(todo)
        return todo

    def remove_todo(self, todo_id: int) -> None:
        """Delete a todo; unknown ids are ignored."""
        with Session(self.engine) as session:
            todo = session.get(Todo, todo_id)
            if todo is None:
                return
            session.delete(todo)
            session.commit()
