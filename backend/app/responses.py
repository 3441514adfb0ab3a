"""Response envelope helpers shared by the controllers.

Every `/api` endpoint answers with an `ApiResponse` envelope; the HTTP
status of the response always matches the envelope's `statusCode`.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .schemas import ApiResponse, PaginationMeta


class Status:
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class Message:
    ADD_SUCCESS = "Record created successfully"
    UPDATE_SUCCESS = "Record updated successfully"
    DELETE_SUCCESS = "Record deleted successfully"
    NOT_FOUND = "Record not found"
    SOMETHING_WENT_WRONG = "Something went wrong"


def envelope(status_code: int, data: Any = None, message: Optional[str] = None,
             pagination: Optional[PaginationMeta] = None) -> JSONResponse:
    """Wrap `data` in an `ApiResponse` and serialise it with camelCase keys."""
    ok = 200 <= status_code < 300
    body = ApiResponse(
        status=Status.SUCCEEDED if ok else Status.FAILED,
        is_success=ok,
        status_code=status_code,
        message=message,
        data=jsonable_encoder(data, by_alias=True),
        pagination=pagination,
    )
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body, by_alias=True))


def succeeded(data: Any = None, message: Optional[str] = None,
              pagination: Optional[PaginationMeta] = None) -> JSONResponse:
    return envelope(200, data=data, message=message, pagination=pagination)


def not_found(message: str = Message.NOT_FOUND, data: Any = None) -> JSONResponse:
    return envelope(404, data=data, message=message)


def bad_request(message: str) -> JSONResponse:
    return envelope(400, message=message)


def failed() -> JSONResponse:
    """500 envelope with a stable message; details belong in the server log."""
    return envelope(500, message=Message.SOMETHING_WENT_WRONG)
