from pydantic import BaseModel


class TodoFields(BaseModel):
    """Request body accepted when creating or updating a todo."""

    label: str
    complete: bool = False


class TodoUpdate(TodoFields):
    id: int
