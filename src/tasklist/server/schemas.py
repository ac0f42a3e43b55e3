"""Request bodies for the /tasks routes.

Fields are deliberately untyped: the task store validates every value, so
the HTTP layer only records which fields the client sent.
"""

from typing import Any

from pydantic import BaseModel


class CreateTaskRequest(BaseModel):
    title: Any = None


class UpdateTaskRequest(BaseModel):
    title: Any = None
    is_done: Any = None

    def to_patch(self) -> dict[str, Any]:
        """Only the fields the client actually sent (explicit nulls included)."""
        return {name: getattr(self, name) for name in self.model_fields_set}
