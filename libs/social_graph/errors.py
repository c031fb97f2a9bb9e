"""
Exceptions raised by the social graph service layer.

The graph algorithms themselves never raise for business conditions; these
are used at the boundary where identifiers are looked up in the repository.
"""

from typing import Any, Dict, Optional


class SocialGraphError(Exception):
    """Base exception for social graph operations"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(SocialGraphError):
    """Invalid input reaching the service or repository"""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details=details)
        if field:
            self.details["field"] = field


class NotFoundError(SocialGraphError):
    """Referenced user or relationship does not exist"""

    def __init__(self, resource: str, resource_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        message = f"{resource} not found"
        if resource_id:
            message += f": {resource_id}"
        super().__init__(message, details=details)
        self.resource = resource
        self.resource_id = resource_id
