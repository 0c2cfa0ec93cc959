from sqlmodel import Field, SQLModel


class Todo(SQLModel, table=True):
    """
    A single todo item.

    Attributes:
        id: Primary key, assigned by the store
        label: What needs doing
        complete: Whether it has been done
    """

    id: int | None = Field(default=None, primary_key=True)
    label: str
    complete: bool = False
