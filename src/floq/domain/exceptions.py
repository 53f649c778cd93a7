"""Exception classes for the floq core.

Validation failures are raised while a command is being built, never from
``execute()``/``undo()``. Store failures surface from the store collaborator
and propagate through the history manager unchanged.

Example usage:
    try:
        await service.move_task(task_id, "waiting")
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
"""


class FloqError(Exception):
    """Base exception for floq errors."""


class ValidationError(FloqError):
    """Raised when a requested change is malformed.

    Attributes:
        message: Human readable reason.
        field: Name of the offending field, when there is one.

    Example:
        >>> raise ValidationError("A waiting task needs someone to wait for", field="waiting_for")
    """

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class NotFoundError(ValidationError):
    """Raised when a task, project or comment cannot be found.

    Example:
        >>> raise NotFoundError("Task", "3f2a")
        >>> # str(error) -> "Task '3f2a' not found"
    """

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} '{identifier}' not found")


class AmbiguousIdError(ValidationError):
    """Raised when an id prefix matches more than one row.

    Attributes:
        matches: ``(id, title)`` pairs of every candidate.
    """

    def __init__(self, resource: str, prefix: str, matches: list[tuple[str, str]]):
        self.resource = resource
        self.prefix = prefix
        self.matches = matches
        super().__init__(f"Multiple {resource.lower()}s match '{prefix}'")


class StoreError(FloqError):
    """Raised when the store cannot complete a read or write.

    Attributes:
        operation: The store operation that failed ("insert", "update", ...).
        table: Table the operation targeted.
        message: Detailed error message.

    Example:
        >>> raise StoreError("insert", "tasks", "UNIQUE constraint failed: tasks.id")
        >>> # str(error) -> "Failed to insert tasks: UNIQUE constraint failed: tasks.id"
    """

    def __init__(self, operation: str, table: str, message: str):
        self.operation = operation
        self.table = table
        self.message = message
        super().__init__(f"Failed to {operation} {table}: {message}")
