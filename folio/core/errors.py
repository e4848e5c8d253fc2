"""
Error types raised by the folio core.

Every boundary that calls a store mutator (a form, an HTTP handler, a CLI)
is expected to show `ValidationError.errors` to the author verbatim.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


class FolioError(Exception):
    """Base class for all folio errors."""
    pass


class ValidationError(FolioError):
    """One or more validation rules were violated."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class NotFoundError(FolioError):
    """No project exists with the given ID."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class TemplateNotFoundError(FolioError):
    """No template exists with the given ID."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class ConflictError(FolioError):
    """The stored project changed since the caller last read it."""

    def __init__(self, project_id: str, expected: object, actual: object):
        self.project_id = project_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Project {project_id} was modified (expected updated_at {expected}, found {actual})"
        )


class StorageError(FolioError):
    """The persistence backend failed to load or save."""
    pass


def pydantic_messages(error: PydanticValidationError) -> list[str]:
    """Flatten a pydantic error into "field.path: message" lines."""
    messages = []
    for err in error.errors():
        location = ".".join(str(part) for part in err["loc"])
        messages.append(f"{location}: {err['msg']}" if location else err["msg"])
    return messages
