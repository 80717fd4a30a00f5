"""
Service-layer error taxonomy.

Every business-rule failure raised from a service is an APIException subclass,
so views never translate errors by hand. The project handler renders them as
{"error": <message>, "code": <code>}.
"""

import logging

from django.db import IntegrityError
from rest_framework import exceptions, status
from rest_framework.views import exception_handler

logger = logging.getLogger("kvl.errors")


class ServiceError(exceptions.APIException):
    status_code    = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be processed."
    default_code   = "error"


class ValidationError(ServiceError):
    """Malformed or missing input, or a failed invariant."""
    default_detail = "Invalid input."
    default_code   = "validation_error"


class InvalidTransition(ServiceError):
    """Requested status is not reachable from the current one."""
    default_code = "invalid_transition"

    def __init__(self, current, requested, detail=None):
        self.current   = current
        self.requested = requested
        super().__init__(detail or f"Cannot change status from {current} to {requested}")


class InvalidState(ServiceError):
    default_detail = "Operation not allowed in the current state."
    default_code   = "invalid_state"


class NotAvailable(ServiceError):
    default_detail = "Resource is not available."
    default_code   = "not_available"


class NotFound(ServiceError):
    status_code    = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code   = "not_found"


class Conflict(ServiceError):
    status_code    = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists."
    default_code   = "conflict"


class Internal(ServiceError):
    status_code    = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error."
    default_code   = "internal"


def api_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER: uniform error body for every API failure."""
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error in %s: %s", context.get("view").__class__.__name__, exc)
        exc = Conflict("Duplicate value violates a unique constraint")

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError) and not isinstance(exc, ServiceError):
        response.data = {"error": response.data, "code": "validation_error"}
        return response

    detail = response.data.get("detail", response.data) if isinstance(response.data, dict) else response.data
    response.data = {
        "error": str(detail),
        "code":  getattr(exc, "default_code", "not_found" if response.status_code == 404 else "error"),
    }
    return response
