"""Uniform ``{body, message, status}`` envelope for every response."""

from enum import Enum
from typing import Any, Generic, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel

T = TypeVar("T")


class ResponseStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class ApiResponse(BaseModel, Generic[T]):
    body: T | None = None
    message: str = "Operation successful"
    status: ResponseStatus = ResponseStatus.SUCCESS


def success(body: T, message: str = "Operation successful") -> ApiResponse[T]:
    return ApiResponse(body=body, message=message)


def failure(status_code: int, message: str, body: Any = None) -> JSONResponse:
    envelope = ApiResponse[Any](body=body, message=message, status=ResponseStatus.FAILURE)
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))
