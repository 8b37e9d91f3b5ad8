"""
Domain exceptions shared by the project and procurement services.

Every workflow validation failure is a PreconditionFailedError carrying a
human-readable message; an id that does not resolve is a NotFoundError.
Views convert these to HTTP responses.

Exception Hierarchy:
    WorkflowError (base)
    ├── NotFoundError
    │   └── ProjectNotFoundError
    └── PreconditionFailedError
"""


class WorkflowError(Exception):
    """Base exception for all workflow service errors."""
    pass


class NotFoundError(WorkflowError):
    """Raised when a referenced record does not exist."""
    pass


class ProjectNotFoundError(NotFoundError):
    """Raised when a project does not exist."""
    pass


class PreconditionFailedError(WorkflowError):
    """
    Raised when the caller, the project or a predecessor record is not in
    the state an operation requires.

    Example:
        raise PreconditionFailedError("MR must be OWNER_APPROVED")
    """
    pass
