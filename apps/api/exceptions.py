"""
Custom exceptions for the Social Graph API
"""
from typing import Optional, Dict, Any

from libs.social_graph import errors as graph_errors


class GraphAPIException(Exception):
    """Base exception for Social Graph API"""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(GraphAPIException):
    """Validation error"""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=400, details=details or {})
        if field:
            self.details["field"] = field


class NotFoundError(GraphAPIException):
    """Resource not found error"""

    def __init__(self, resource: str, resource_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        message = f"{resource} not found"
        if resource_id:
            message += f": {resource_id}"
        super().__init__(message, status_code=404, details=details or {})


class DatabaseError(GraphAPIException):
    """Database error"""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=500, details=details or {})
        if operation:
            self.details["operation"] = operation


def from_graph_error(exc: graph_errors.SocialGraphError) -> GraphAPIException:
    """Map a library-side error onto its API counterpart"""
    if isinstance(exc, graph_errors.NotFoundError):
        return NotFoundError(exc.resource, exc.resource_id, details=exc.details)
    if isinstance(exc, graph_errors.ValidationError):
        return ValidationError(exc.message, details=exc.details)
    return GraphAPIException(exc.message, status_code=500, details=exc.details)


def error_payload(exc: GraphAPIException) -> Dict[str, Any]:
    """JSON body for an error response"""
    return {
        "success": False,
        "error": exc.__class__.__name__,
        "message": exc.message,
        "details": exc.details,
    }
