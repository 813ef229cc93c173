from fastapi import status
from typing import Any, Dict, Optional, Union

from catalog_service.domain.schemas.responses import error_response


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class. Every subclass is
    rendered as the same ``{"status": "ERROR", "data": {...}}`` envelope.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return error_response(self.detail)


class InvalidInputError(APIException):
    """Raised when a request is malformed. No mutation has been attempted."""

    def __init__(
        self,
        detail: str = "Invalid input",
        code: str = "invalid_input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"field": field} if field else {}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=merged_context
        )


class NotFoundError(APIException):
    """Exception raised when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Union[str, int],
        detail: Optional[str] = None,
        code: str = "not_found_error",
        context: Optional[Dict[str, Any]] = None
    ):
        if detail is None:
            detail = f"The requested {resource_type} {resource_id} was not found."

        merged_context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id)
        }
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            code=code,
            context=merged_context
        )


class DuplicateEntityError(APIException):
    """Exception raised when a unique field collides with an existing record."""

    def __init__(
        self,
        detail: str = "Entity already exists",
        code: str = "duplicate_entity",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            code=code,
            context=context
        )


class NoFulfillmentError(APIException):
    """Raised when no item of an order could be applied. No order is persisted."""

    def __init__(
        self,
        unfulfilled: Optional[list] = None,
        detail: str = "None of the requested items could be fulfilled.",
        code: str = "no_fulfillment"
    ):
        self.unfulfilled = list(unfulfilled or [])
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            code=code,
            context={"unfulfilled": self.unfulfilled}
        )


class RepositoryError(APIException):
    """Exception raised when a storage operation fails."""

    def __init__(
        self,
        detail: str = "Storage operation failed",
        code: str = "repository_error",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code=code,
            context=context
        )
        self.original_exception = original_exception

        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)


class StoreUnavailableError(RepositoryError):
    """Exception raised when the database is unreachable or a call times out."""

    def __init__(
        self,
        detail: str = "Error connecting to the database.",
        code: str = "store_unavailable",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            detail=detail,
            code=code,
            context=context,
            original_exception=original_exception
        )
        self.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
