"""
API Error Handling

Maps pool exceptions and request errors onto the standard ErrorResponse.
"""

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from api.models.responses import ErrorDetail, ErrorResponse
from core.schemas.errors import ErrorCodes, PoolException


NOT_FOUND_CODES = frozenset({
    ErrorCodes.UNKNOWN_TREE,
    ErrorCodes.UNKNOWN_EDGE,
    ErrorCodes.UNKNOWN_POOL,
})


class APIError(Exception):
    """Base API error with structured response."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=self.code,
                message=self.message,
                details=self.details,
            ),
        )


def status_for_code(code: str) -> int:
    return 404 if code in NOT_FOUND_CODES else 400


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(),
    )


async def pool_error_handler(request: Request, exc: PoolException) -> JSONResponse:
    """Handle exceptions raised by the pool core."""
    model = exc.to_error_model()
    return JSONResponse(
        status_code=status_for_code(exc.code),
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code=model.code,
                message=model.message,
                details=model.details,
                retryable=model.retryable,
            ),
        ).model_dump(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            ok=False,
            error=ErrorDetail(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred",
                details={"type": type(exc).__name__},
            ),
        ).model_dump(),
    )
