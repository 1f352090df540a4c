"""
Custom Exceptions for the Count App API
=======================================

Every error the API reports to a client is one of these. The application
exception handler renders them as ``{"message": ...}`` with the class's
HTTP status; no machine-readable code or internal detail leaves the process.

Usage:
    from countapp.core.exceptions import ValidationError, InstanceNotFoundError

    if not payload.instance_id:
        raise ValidationError("Instance ID is required.", field="instanceId")
"""

from typing import Optional, Any, Dict


class CountAppError(Exception):
    """Base exception for all Count App errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


# ============================================
# Validation Errors (400)
# ============================================

class ValidationError(CountAppError):
    """Missing or empty required field"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, details=details)


# ============================================
# Authentication & Authorization Errors (401 / 403)
# ============================================

class AuthenticationError(CountAppError):
    """Caller could not be authenticated"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed."):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Bearer token is malformed or its signature does not validate"""

    def __init__(self, message: str = "Authentication failed. The token is invalid."):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Bearer token is past its expiry"""

    def __init__(self):
        super().__init__("Authentication failed. The token has expired.")


class AuthorizationError(CountAppError):
    """Authenticated, but not allowed to perform this operation"""

    status_code = 403

    def __init__(self, message: str = "You do not have permission to perform this operation."):
        super().__init__(message)


# ============================================
# Resource Errors (404)
# ============================================

class ResourceNotFoundError(CountAppError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} '{resource_id}' was not found.",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class InstanceNotFoundError(ResourceNotFoundError):
    def __init__(self, instance_id: str):
        super().__init__("Survey instance", instance_id)


class TemplateNotFoundError(ResourceNotFoundError):
    def __init__(self, template_id: str):
        super().__init__("Survey template", template_id)


class PresetNotFoundError(ResourceNotFoundError):
    def __init__(self, preset_id: str):
        super().__init__("Preset", preset_id)


class UserNotFoundError(ResourceNotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


# ============================================
# Conflict Errors (409)
# ============================================

class ConflictError(CountAppError):
    """Write lost against the current state of the target"""

    status_code = 409


class InstanceStateConflictError(ConflictError):
    """Instance has already left the in-progress state"""

    def __init__(self, instance_id: str, status: Optional[str] = None):
        super().__init__(
            "This survey has already been completed or discarded.",
            details={"instance_id": instance_id, "status": status}
        )


# ============================================
# Storage Errors (500)
# ============================================

class StorageError(CountAppError):
    """Storage operation failed"""

    status_code = 500

    def __init__(self, message: str = "A storage error occurred."):
        super().__init__(message)


def error_response(error: CountAppError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return error.to_dict()
