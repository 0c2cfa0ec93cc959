"""
Todo CRUD endpoints.

Bodies are parsed by `TodoFieldsDep` so a missing body is reported as 400;
errors from the store other than an unknown id propagate to the generic
exception handler. Store calls block, so they run in the threadpool like
the page render's.
"""

from fastapi import APIRouter, Response, status
from starlette.concurrency import run_in_threadpool

from todo_app.dependencies import DatabaseDep, TodoFieldsDep
from todo_app.models.todo import Todo
from todo_app.schemas.todo import TodoUpdate

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=list[Todo], summary="Get all todos")
async def get_todos(db: DatabaseDep) -> list[Todo]:
    return await run_in_threadpool(db.get_todos)


@router.post("", response_model=Todo, summary="Create new todo")
async def create_todo(db: DatabaseDep, fields: TodoFieldsDep) -> Todo:
    """
    Create a todo.

    Example:
        POST /todos {"label": "Write tests", "complete": false}
    """
    return await run_in_threadpool(db.add_todo, fields)


@router.patch("/{todo_id}", response_model=Todo, summary="Update todo")
async def update_todo(
    todo_id: int, db: DatabaseDep, fields: TodoFieldsDep
) -> Todo:
    """
    Replace a todo's label and completion.

    Raises:
        TodoNotFoundError: No todo with this id (answered with 404).
    """
    return await run_in_threadpool(
        db.update_todo, TodoUpdate(id=todo_id, **fields.model_dump())
    )


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete todo",
)
async def delete_todo(todo_id: str, db: DatabaseDep) -> Response:
    """
    Delete a todo.

    Always answers 204: unknown and non-numeric ids match no todo.
    """
    try:
        parsed_id = int(todo_id)
    except ValueError:
        parsed_id = None

    if parsed_id is not None:
        await run_in_threadpool(db.remove_todo, parsed_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
