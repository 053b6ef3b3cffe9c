"""
Response envelope, exception handling and base views shared by all apps
"""
import logging
from typing import Any, Dict, List, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import APIView, exception_handler

from project.exceptions import MarketplaceError

logger = logging.getLogger(__name__)


def create_standardized_response(
    success: bool,
    data: Optional[Any] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    errors: Optional[Dict[str, List[str]]] = None,
    status_code: int = status.HTTP_200_OK
) -> Response:
    """
    Create a standardized API response format.

    Args:
        success: Boolean indicating if the request was successful
        data: Response data (optional)
        message: Success or info message (optional)
        error: Error message for failed requests (optional)
        errors: Field-specific validation errors (optional)
        status_code: HTTP status code

    Returns:
        Response object with standardized format
    """
    response_data = {"success": success}

    if data is not None:
        response_data["data"] = data

    if message:
        response_data["message"] = message

    if error:
        response_data["error"] = error

    if errors:
        response_data["errors"] = errors

    return Response(response_data, status=status_code)


def success_response(
    data: Optional[Any] = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK
) -> Response:
    """Create a successful response."""
    return create_standardized_response(
        success=True,
        data=data,
        message=message,
        status_code=status_code
    )


def error_response(
    error: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
    errors: Optional[Dict[str, List[str]]] = None
) -> Response:
    """Create an error response."""
    return create_standardized_response(
        success=False,
        error=error,
        errors=errors,
        status_code=status_code
    )


def validation_error_response(
    errors: Dict[str, List[str]],
    status_code: int = status.HTTP_400_BAD_REQUEST
) -> Response:
    """Create a validation error response."""
    return create_standardized_response(
        success=False,
        error="Validation failed",
        errors=errors,
        status_code=status_code
    )


def marketplace_exception_handler(exc, context):
    """
    DRF exception handler rendering every failure with the standardized envelope.

    Domain errors from project.exceptions keep their own status code and message;
    DRF errors keep DRF's status code. Anything else is left to Django (500).
    """
    if isinstance(exc, MarketplaceError):
        view = context.get('view')
        logger.warning(
            "%s in %s: %s", type(exc).__name__, type(view).__name__ if view else 'view', exc.message
        )
        return error_response(exc.message, exc.status_code, errors=exc.errors)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, DRFValidationError):
        errors = exc.detail if isinstance(exc.detail, dict) else {'non_field_errors': exc.detail}
        return validation_error_response(errors, status_code=response.status_code)

    if isinstance(exc, Http404):
        message = 'Not found'
    elif isinstance(exc, APIException):
        message = str(exc.detail)
    else:
        message = str(exc)
    return error_response(message, response.status_code)


class StandardizedAPIView(APIView):
    """
    Base APIView class that provides standardized response methods.

    This class provides convenience methods for creating standardized responses
    and can be used as a base class for custom APIView implementations.
    """

    def success_response(
        self,
        data: Optional[Any] = None,
        message: Optional[str] = None,
        status_code: int = status.HTTP_200_OK
    ) -> Response:
        """Create a successful response."""
        return success_response(data=data, message=message, status_code=status_code)

    def error_response(
        self,
        error: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        errors: Optional[Dict[str, List[str]]] = None
    ) -> Response:
        """Create an error response."""
        return error_response(error=error, status_code=status_code, errors=errors)

    def validation_error_response(
        self,
        errors: Dict[str, List[str]],
        status_code: int = status.HTTP_400_BAD_REQUEST
    ) -> Response:
        """Create a validation error response."""
        return validation_error_response(errors=errors, status_code=status_code)


class StandardizedResponseMixin:
    """Mixin to standardize responses for DRF generic views."""

    def list(self, request, *args, **kwargs):
        """Override list to use standardized response format."""
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return success_response(
            data=serializer.data,
            message=f"Retrieved {len(serializer.data)} items"
        )

