from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework import status
import logging

logger = logging.getLogger("compete")


class DomainError(APIException):
    """
    Base for team-formation failures.

    Each subclass carries a machine-readable code (``default_code``) that the
    exception handler surfaces next to the human-readable detail.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be completed."
    default_code = "domain_error"


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class UnauthorizedError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to do this."
    default_code = "unauthorized"


class InvariantViolation(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "An internal server error occurred."
    default_code = "invariant_violation"


class CapacityExceeded(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This team is full."
    default_code = "capacity_exceeded"


class InvalidTransition(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This change is not allowed."
    default_code = "invalid_transition"


def custom_exception_handler(exc, context):
    """
    Wrap DRF + Django exceptions into a consistent response format.

    Success responses (2xx) are not touched.
    Only errors come through here.
    """
    response = drf_exception_handler(exc, context)

    # If DRF handled it, wrap it
    if response is not None:
        errors = response.data
        if isinstance(exc, APIException) and isinstance(errors, dict) and "detail" in errors:
            errors = {"detail": errors["detail"], "code": exc.get_codes()}

        if isinstance(exc, InvariantViolation):
            logger.error("Invariant violated: %s", exc.detail)

        return Response(
            {
                "success": False,
                "status_code": response.status_code,
                "errors": errors,
            },
            status=response.status_code,
        )

    # Unhandled exceptions -> 500
    logger.exception("Unhandled API exception", exc_info=exc)

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "errors": {"detail": "Internal server error.", "code": "error"},
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
