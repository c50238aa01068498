"""
Domain exceptions for the Traffic Offence Desk.

Services raise these; a single exception handler in ``trafficdesk.main`` turns
them into ``{"message", "code", "details"}`` responses with the matching HTTP
status, so callers can tell the categories apart.
"""
from typing import Any, Dict, Optional


class TrafficDeskError(Exception):
    """Base exception for all domain errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(TrafficDeskError):
    """No credentials, or credentials that cannot be verified"""

    status_code = 401

    def __init__(self, message: str = "Not authenticated", code: str = "NOT_AUTHENTICATED"):
        super().__init__(message, code=code)


class InvalidTokenError(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid or expired token", code="INVALID_TOKEN")


class ForbiddenError(TrafficDeskError):
    """Authenticated, but the role or ownership check failed"""

    status_code = 403

    def __init__(self, message: str = "Not authorized to perform this action"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(TrafficDeskError):
    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class OffenseNotFoundError(ResourceNotFoundError):
    def __init__(self, offense_id: Any):
        super().__init__("Offense", offense_id)


class DeletionRequestNotFoundError(ResourceNotFoundError):
    def __init__(self, request_id: Any):
        super().__init__("Deletion request", request_id)


class DriverNotFoundError(ResourceNotFoundError):
    def __init__(self, lookup: Any):
        super().__init__("Driver", lookup)


# ============================================
# Conflict Errors (409-type)
# ============================================

class ConflictError(TrafficDeskError):
    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code=code, details=details)


class DuplicateDeletionRequestError(ConflictError):
    def __init__(self, offense_id: Any):
        super().__init__(
            "A deletion request is already pending for this offense",
            code="DELETION_ALREADY_REQUESTED",
            details={"offense_id": str(offense_id)}
        )


class RequestAlreadyResolvedError(ConflictError):
    def __init__(self, request_id: Any, status: Optional[str] = None):
        super().__init__(
            "Request has already been processed",
            code="REQUEST_ALREADY_RESOLVED",
            details={"request_id": str(request_id), "status": status}
        )


class OffenseAlreadyPaidError(ConflictError):
    def __init__(self, offense_id: Any):
        super().__init__(
            "Offense has already been paid",
            code="OFFENSE_ALREADY_PAID",
            details={"offense_id": str(offense_id)}
        )


class DuplicateVehicleError(ConflictError):
    def __init__(self, vehicle_number: str):
        super().__init__(
            "A driver with this vehicle number already exists",
            code="DUPLICATE_VEHICLE",
            details={"vehicle_number": vehicle_number}
        )


# ============================================
# Validation Errors
# ============================================

class ValidationError(TrafficDeskError):
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            code="VALIDATION_ERROR",
            details={"field": field} if field else None
        )


# ============================================
# Write Failures (500-type)
# ============================================

class WriteFailure(TrafficDeskError):
    """Storage could not persist the change; nothing was committed"""

    status_code = 500

    def __init__(self, message: str = "Failed to save changes"):
        super().__init__(message, code="WRITE_FAILURE")


class StorageWriteError(WriteFailure):
    pass


class AuditWriteError(WriteFailure):
    def __init__(self, action: str):
        super().__init__(f"Audit log creation failed for {action}")
        self.details = {"action": action}
