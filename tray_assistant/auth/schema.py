"""
🔐 인증 사용자 스키마

토큰에서 추출한 사용자 정보와, 검색 범위 계산이 끝난 사용자 컨텍스트
"""

from typing import FrozenSet, Optional

from pydantic import ConfigDict, Field

from tray_assistant.core.schema import SchemaBase


class CurrentUser(SchemaBase):
    """토큰에서 추출한 사용자 정보"""

    user_id: str = Field(..., description="사용자 ID")
    email: Optional[str] = Field(None, description="이메일")
    name: Optional[str] = Field(None, description="이름")
    role: Optional[str] = Field(None, description="권한 (admin/team)")
    department_id: Optional[str] = Field(None, description="소속 부서 ID")
    company_id: Optional[str] = Field(None, description="회사(테넌트) ID")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class UserContext(SchemaBase):
    """
    질의 엔진에 전달되는 사용자 범위

    accessible_department_ids 는 외부(권한 모듈)에서 이미 계산된 값이며,
    검색 인덱스는 이 집합을 그대로 신뢰합니다.
    """

    model_config = ConfigDict(frozen=True)

    user_id: Optional[str] = Field(None, description="사용자 ID")
    company_id: Optional[str] = Field(None, description="회사(테넌트) ID")
    department_id: Optional[str] = Field(None, description="소속 부서 ID")
    role: Optional[str] = Field(None, description="권한")
    accessible_department_ids: FrozenSet[str] = Field(
        default_factory=frozenset, description="접근 가능한 부서 ID 집합"
    )

    @property
    def has_tenant(self) -> bool:
        return bool(self.company_id)

    def can_access(self, department_id: Optional[str]) -> bool:
        return department_id is not None and department_id in self.accessible_department_ids
