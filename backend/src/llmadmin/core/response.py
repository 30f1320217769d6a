"""Response helpers for the LLM admin API.

Every endpoint answers with a flat envelope: ``{"success": true, ...fields}``
on success and ``{"success": false, "error": "..."}`` on failure.
"""

from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from .logging import get_logger

logger = get_logger(__name__)


def to_serializable(obj: Any) -> Any:
    """Recursively convert Pydantic models, lists, and dicts to serializable types.

    Pydantic models are dumped by alias so camelCase wire names are kept.
    """
    if hasattr(obj, "model_dump"):
        return obj.model_dump(by_alias=True)
    if isinstance(obj, (list, tuple)):
        return [to_serializable(item) for item in obj]
    if isinstance(obj, dict):
        return {k: to_serializable(v) for k, v in obj.items()}
    return obj


class ApiResponse:
    """Response factory for the flat success/error envelope."""

    @staticmethod
    def success(
        status_code: int = status.HTTP_200_OK,
        headers: dict[str, str] | None = None,
        **fields: Any,
    ) -> JSONResponse:
        """Create a successful response.

        Args:
            status_code: HTTP status code (default: 200)
            headers: Optional response headers
            **fields: Payload fields placed next to ``success``

        """
        content = {"success": True}
        content.update(to_serializable(fields))
        content = jsonable_encoder(content)

        logger.debug(
            "Creating success response",
            extra={"status_code": status_code, "fields": ",".join(sorted(fields))},
        )

        return JSONResponse(content=content, status_code=status_code, headers=headers)

    @staticmethod
    def failure(
        error: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: dict[str, str] | None = None,
        **fields: Any,
    ) -> JSONResponse:
        """Create a failure response.

        Args:
            error: Human readable error message
            status_code: HTTP status code (default: 400)
            headers: Optional response headers
            **fields: Extra payload fields (e.g. errorId)

        """
        content: dict[str, Any] = {"success": False, "error": error}
        content.update(to_serializable(fields))
        content = jsonable_encoder(content)

        logger.debug(
            "Creating error response",
            extra={"status_code": status_code, "error_message": error},
        )

        return JSONResponse(content=content, status_code=status_code, headers=headers)

    @staticmethod
    def created(headers: dict[str, str] | None = None, **fields: Any) -> JSONResponse:
        """Create a 201 Created response."""
        return ApiResponse.success(status.HTTP_201_CREATED, headers, **fields)

    @staticmethod
    def no_content(headers: dict[str, str] | None = None) -> Response:
        """Create a 204 No Content response."""
        return Response(content=b"", status_code=status.HTTP_204_NO_CONTENT, headers=headers)
