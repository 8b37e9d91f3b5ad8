"""
Projects app services layer.

The access guard is the single entry point every workflow operation uses
to resolve the caller's role and project membership.
"""

from .exceptions import (
    WorkflowError,
    NotFoundError,
    ProjectNotFoundError,
    PreconditionFailedError,
)
from .access_guard import (
    ScopeContext,
    check_scope,
    REQUESTER_ROLES,
    ENGINEER_ROLES,
    OWNER_ROLES,
    PURCHASER_ROLES,
    BILL_VIEWER_ROLES,
)

__all__ = [
    # Exceptions
    'WorkflowError',
    'NotFoundError',
    'ProjectNotFoundError',
    'PreconditionFailedError',

    # Access guard
    'ScopeContext',
    'check_scope',
    'REQUESTER_ROLES',
    'ENGINEER_ROLES',
    'OWNER_ROLES',
    'PURCHASER_ROLES',
    'BILL_VIEWER_ROLES',
]
