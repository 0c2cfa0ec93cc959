"""
Dependency injection for the endpoints.

The server context lives on `app.state.context`; endpoints receive it (or
the pieces they need) through the annotated dependencies below, so tests
can build an application around any context they like.

Example:
    ```python
    from todo_app.dependencies import DatabaseDep

    @router.get("/todos")
    async def get_todos(db: DatabaseDep) -> list[Todo]:
        return db.get_todos()
    ```
"""

from typing import Annotated

from fastapi import Depends, Request
from pydantic import ValidationError

from todo_app.context import ServerContext
from todo_app.exceptions import InvalidBodyError, MissingBodyError
from todo_app.schemas.todo import TodoFields
from todo_app.storage.database import Database
from todo_app.utils.error_handler import jsonable_errors


def get_context(request: Request) -> ServerContext:
    return request.app.state.context


ContextDep = Annotated[ServerContext, Depends(get_context)]


def get_database(context: ContextDep) -> Database:
    return context.db


DatabaseDep = Annotated[Database, Depends(get_database)]


async def get_todo_fields(request: Request) -> TodoFields:
    """
    Parse the todo body by hand.

    FastAPI would answer a missing body with a generic 422; clients of the
    todo endpoints expect 400 `Missing request body` instead.

    Raises:
        MissingBodyError: The body is empty or JSON null.
        InvalidBodyError: The body does not describe a todo.
    """
    raw = (await request.body()).strip()
    if not raw or raw == b"null":
        raise MissingBodyError()

    try:
        return TodoFields.model_validate_json(raw)
    except ValidationError as ex:
        raise InvalidBodyError(
            "Invalid request body", details=jsonable_errors(ex.errors())
        ) from ex


TodoFieldsDep = Annotated[TodoFields, Depends(get_todo_fields)]
