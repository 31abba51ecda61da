"""
Custom exceptions for the package forwarding module.
"""

from typing import Dict, Any


class BusinessException(Exception):
    """Base exception for business logic errors."""

    def __init__(self, message: str, code: str = "BUSINESS_ERROR", details: Dict[str, Any] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundException(BusinessException):
    """Raised when a package, shipment or actor cannot be found."""

    def __init__(self, entity_type: str, reference: Any):
        message = f"{entity_type} not found: {reference}"
        super().__init__(message, "NOT_FOUND", {
            "entity_type": entity_type,
            "reference": str(reference),
        })


class InvalidTransitionException(BusinessException):
    """Raised when attempting an invalid workflow transition."""

    def __init__(self, current_status: str, attempted_status: str, entity_type: str = "Package"):
        message = f"Invalid transition for {entity_type}: cannot move from {current_status} to {attempted_status}"
        super().__init__(message, "INVALID_TRANSITION", {
            "current_status": current_status,
            "attempted_status": attempted_status,
            "entity_type": entity_type
        })


class AlreadyLinkedException(BusinessException):
    """Raised when a package is already consolidated into another shipment."""

    def __init__(self, package_id: str, shipment_tracking: str):
        message = f"Package {package_id} is already linked to shipment {shipment_tracking}"
        super().__init__(message, "ALREADY_LINKED", {
            "package_id": package_id,
            "shipment_tracking_number": shipment_tracking,
        })


class AlreadyExistsException(BusinessException):
    """Raised when a uniqueness rule rejects a new record."""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "ALREADY_EXISTS", details)


class ValidationException(BusinessException):
    """Raised when data validation fails."""

    def __init__(self, message: str, field_errors: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", field_errors or {})


class ExhaustedSequenceException(BusinessException):
    """Raised when an identifier sequence reached its ceiling."""

    def __init__(self, identifier_type: str, ceiling: int):
        message = f"Unable to generate unique {identifier_type} - reached maximum limit of {ceiling}"
        super().__init__(message, "EXHAUSTED_SEQUENCE", {
            "identifier_type": identifier_type,
            "ceiling": ceiling,
        })


class StorageException(BusinessException):
    """Wraps a failure of the underlying transactional store."""

    def __init__(self, message: str, original: Exception = None):
        self.original = original
        details = {"error": str(original)} if original is not None else {}
        super().__init__(message, "STORAGE_ERROR", details)
