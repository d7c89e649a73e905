from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from inflection import pluralize
from sqlalchemy.orm import declared_attr
from sqlmodel import DateTime, Field, SQLModel, func

from tray_assistant.core.utill import camel_to_snake_case


def new_id() -> str:
    return str(uuid4())


class Base(SQLModel):
    """
    모든 모델의 베이스 클래스

    공통 필드:
    - id: UUID 문자열 기본 키
    - created_at: 생성 시간 (자동 설정)
    - updated_at: 수정 시간 (자동 업데이트)
    - deleted_at: 삭제 시간 (Soft Delete 지원)
    """

    id: str = Field(
        default_factory=new_id,
        primary_key=True,
        max_length=36,
        description="기본 키 (UUID)",
    )
    created_at: datetime | None = Field(
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={
            "server_default": func.now(),
            "index": True,
        },
        default_factory=lambda: datetime.now(timezone.utc),
        description="생성 시간",
    )
    updated_at: datetime | None = Field(
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"server_default": func.now()},
        default_factory=lambda: datetime.now(timezone.utc),
        description="수정 시간",
    )
    deleted_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"index": True},
        description="삭제 시간 (Soft Delete)",
    )

    @declared_attr.directive
    def __tablename__(cls) -> str:
        """테이블명을 자동으로 생성 (복수형, snake_case)"""
        return pluralize(camel_to_snake_case(cls.__name__))
