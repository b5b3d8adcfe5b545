"""Structured error response models for consistent API error handling."""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from rulestudio.core.errors import (
    BaselineConfigInvalidError,
    CatalogUnavailableError,
    ExternalToolError,
    HTTPStatusError,
    InsecureSchemeError,
    InvalidConfigContentError,
    InvalidURLError,
    InvocationOutputMalformedError,
    NetworkError,
    RuleStudioError,
    ToolTimeoutError,
    UnsupportedSchemeError,
)


class ErrorResponse(BaseModel):
    """Standardized error response schema."""

    error: bool = True
    code: str
    message: str
    details: dict[str, Any] | None = None


def create_error_response(code: str, message: str, details: dict[str, Any] | None = None) -> ErrorResponse:
    """Create standardized error response."""
    return ErrorResponse(code=code, message=message, details=details)


# Most specific classes first
_ERROR_MAP: list[tuple[type[RuleStudioError], int, str]] = [
    (InsecureSchemeError, status.HTTP_400_BAD_REQUEST, "insecure_scheme"),
    (UnsupportedSchemeError, status.HTTP_400_BAD_REQUEST, "unsupported_scheme"),
    (InvalidURLError, status.HTTP_400_BAD_REQUEST, "invalid_url"),
    (BaselineConfigInvalidError, 422, "baseline_config_invalid"),
    (InvalidConfigContentError, 422, "invalid_config_content"),
    (HTTPStatusError, status.HTTP_502_BAD_GATEWAY, "remote_http_error"),
    (NetworkError, status.HTTP_502_BAD_GATEWAY, "remote_network_error"),
    (ToolTimeoutError, status.HTTP_504_GATEWAY_TIMEOUT, "tool_timeout"),
    (InvocationOutputMalformedError, status.HTTP_502_BAD_GATEWAY, "tool_output_malformed"),
    (ExternalToolError, status.HTTP_502_BAD_GATEWAY, "tool_failure"),
    (CatalogUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "catalog_unavailable"),
]


def _details_for(exc: RuleStudioError) -> dict[str, Any] | None:
    details = {
        key: getattr(exc, key)
        for key in ("url", "path", "status_code", "exit_code")
        if getattr(exc, key, None) is not None
    }
    return details or None


async def rule_studio_error_handler(request: Request, exc: RuleStudioError) -> JSONResponse:
    status_code, code = status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"
    for error_cls, mapped_status, mapped_code in _ERROR_MAP:
        if isinstance(exc, error_cls):
            status_code, code = mapped_status, mapped_code
            break
    body = create_error_response(code=code, message=str(exc), details=_details_for(exc))
    return JSONResponse(status_code=status_code, content=body.model_dump())
