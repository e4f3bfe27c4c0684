"""Error handlers for the application."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_api.services.validation import ValidationFailed, collect_errors


def validation_response(exc: ValidationFailed) -> JSONResponse:
    """Render a validation failure as a 422 response."""
    return JSONResponse(
        status_code=422,
        content={"message": exc.message, "errors": exc.errors},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register error handlers with the FastAPI app."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP errors with a message body."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(ValidationFailed)
    async def validation_failed(request: Request, exc: ValidationFailed) -> JSONResponse:
        """Handle field validation failures."""
        return validation_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI's own request validation (path and query parameters)."""
        return validation_response(ValidationFailed(collect_errors(exc.errors(), skip=1)))
