"""공통 응답 봉투(envelope) 스키마입니다."""

from typing import Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel, Generic[T]):
    type: Literal["OK", "ERROR"] = "OK"
    message: str
    data: Optional[T] = None


def ok(message: str, data=None) -> ApiResponse:
    return ApiResponse(type="OK", message=message, data=data)


def error(message: str, data=None) -> ApiResponse:
    return ApiResponse(type="ERROR", message=message, data=data)
