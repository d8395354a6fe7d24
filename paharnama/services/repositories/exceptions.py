"""Errors raised by the repository layer.

Services translate these into ServiceError subclasses; they never reach
the HTTP layer directly.
"""


class RepositoryError(Exception):
    """Base class for data access failures."""


class DuplicateError(RepositoryError):
    """A unique column already holds the value being written."""

    def __init__(self, entity_type: str, field: str, value: str):
        super().__init__(f"{entity_type}.{field} '{value}' is already taken")
        self.entity_type = entity_type
        self.field = field
        self.value = value
