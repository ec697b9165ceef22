"""
Error taxonomy shared by the store, the resolvers and the GraphQL layer.

Resolvers raise these; the GraphQL error formatter copies ``code`` and the
details into the ``extensions`` of the response error so clients do not have
to parse message text.

Usage:
    from errors import NotFoundError

    if project is None:
        raise NotFoundError("Project not found")
"""

import json
from typing import Any, Dict, Optional


class TaskBoardError(Exception):
    """Base exception for all task board errors"""

    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def as_extensions(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"code": self.code}
        data.update(self.details)
        return data

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class NotFoundError(TaskBoardError):
    """Lookup by id found nothing"""

    code = "NOT_FOUND"


class ConflictError(TaskBoardError):
    """Uniqueness constraint violated on create or update"""

    code = "CONFLICT"


class ValidationError(TaskBoardError):
    """Input failed validation.

    ``field_errors`` maps GraphQL field names to messages. When present the
    JSON form is embedded in the message too, since older clients scrape it
    from there.
    """

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str = "Validation error",
        field_errors: Optional[Dict[str, str]] = None,
        field: Optional[str] = None,
    ):
        field_errors = dict(field_errors or {})
        if field and field not in field_errors:
            field_errors[field] = message
        if field_errors and message in ("Validation error", "Reference validation error"):
            message = f"{message}: {json.dumps(field_errors)}"
        self.field_errors = field_errors
        details = {"fieldErrors": field_errors} if field_errors else {}
        super().__init__(message, details)


class AuthenticationError(TaskBoardError):
    """Missing, expired or invalid session"""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Authentication required. Please log in."):
        super().__init__(message)


class AuthorizationError(TaskBoardError):
    """Authenticated user may not perform this action"""

    code = "FORBIDDEN"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class QueryError(TaskBoardError):
    """The document store failed for infrastructure reasons"""

    code = "QUERY_FAILED"
