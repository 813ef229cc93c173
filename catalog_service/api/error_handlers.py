from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog_service.core.exceptions import (
    APIException,
    InvalidInputError,
    NoFulfillmentError,
    NotFoundError,
    StoreUnavailableError,
)
from catalog_service.core.logging import get_logger, log_data
from catalog_service.domain.schemas.responses import error_response

logger = get_logger(__name__)


async def handle_api_exception(request: Request, exc: APIException) -> JSONResponse:
    """
    Handle APIException instances.

    Args:
        request: FastAPI request object
        exc: APIException instance

    Returns:
        JSONResponse: Formatted error response
    """
    logger.error(
        f"API Exception: {exc.detail}",
        extra=log_data(
            status_code=exc.status_code,
            error_code=exc.code,
            context=exc.context,
            path=request.url.path
        )
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_client_error(request: Request, exc: APIException) -> JSONResponse:
    """Handle invalid input, not found and no-fulfillment outcomes."""
    logger.info(
        f"Request rejected: {exc.detail}",
        extra=log_data(error_code=exc.code, context=exc.context, path=request.url.path)
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_store_unavailable(request: Request, exc: StoreUnavailableError) -> JSONResponse:
    """Handle database connectivity failures without leaking driver details."""
    logger.error(
        f"Store unavailable: {exc.detail}",
        extra=log_data(
            original_error=exc.context.get("original_error"),
            path=request.url.path
        )
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation errors as an invalid-input envelope."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])

    exc_out = InvalidInputError("Invalid input: " + "; ".join(messages))
    return await handle_client_error(request, exc_out)


async def handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("An unexpected error occurred")
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Configure global exception handlers for the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(InvalidInputError, handle_client_error)
    app.add_exception_handler(NotFoundError, handle_client_error)
    app.add_exception_handler(NoFulfillmentError, handle_client_error)
    app.add_exception_handler(StoreUnavailableError, handle_store_unavailable)
    app.add_exception_handler(APIException, handle_api_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unhandled_exception)
