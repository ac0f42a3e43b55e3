# src/tasklist/core/errors.py

"""
Domain errors raised by the task store.

The HTTP layer maps them to responses:
- ValidationError -> 422 with field-level messages
- NotFoundError   -> 404
"""

from __future__ import annotations


class TasklistError(Exception):
    """Base class for errors raised by tasklist domain code."""


class ValidationError(TasklistError):
    """Input failed validation. `errors` maps field name -> list of messages."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = {k: list(v) for k, v in errors.items()}
        super().__init__(self.message)

    @property
    def message(self) -> str:
        for msgs in self.errors.values():
            if msgs:
                return msgs[0]
        return "The given data was invalid."

    @classmethod
    def single(cls, field: str, message: str) -> ValidationError:
        return cls({field: [message]})


class NotFoundError(TasklistError):
    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: id={entity_id}")
