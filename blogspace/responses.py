from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(
    status_code: int = status.HTTP_200_OK,
    message: str | None = None,
    data: dict[str, Any] | None = None,
    error: str | None = None,
) -> dict:
    """Build the uniform response body, leaving out empty members."""
    body: dict[str, Any] = {"status_code": status_code, "success": status_code < 400}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if error:
        body["error"] = error
    return body


def respond(
    status_code: int = status.HTTP_200_OK,
    message: str | None = None,
    data: dict[str, Any] | None = None,
    error: str | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(envelope(status_code, message, data, error)),
        headers=headers,
    )
