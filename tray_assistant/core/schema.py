from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from tray_assistant.core.utill import to_camel


class SchemaBase(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )


T = TypeVar("T")


class ApiResponse(SchemaBase, Generic[T]):
    """기본 API 응답 스키마"""

    data: T | None = None
    message: str | None = None


# 헬퍼 함수들
def create_success_response(data: T, message: str = "성공") -> ApiResponse[T]:
    """성공 응답 생성"""
    return ApiResponse(data=data, message=message)
