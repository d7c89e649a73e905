from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Text

from tray_assistant.core.model import Base


class Company(Base, table=True):
    """회사(테넌트)"""

    name: str = Field(max_length=200)
    code: Optional[str] = Field(default=None, max_length=50, unique=True)


class Department(Base, table=True):
    """부서"""

    company_id: str = Field(foreign_key="companies.id", index=True)
    code: str = Field(max_length=50)
    name: str = Field(max_length=100)


class User(Base, table=True):
    """사용자 정보"""

    company_id: str = Field(foreign_key="companies.id", index=True)
    department_id: Optional[str] = Field(default=None, foreign_key="departments.id")
    email: str = Field(max_length=255, unique=True, index=True)
    name: str = Field(max_length=100)
    role: str = Field(default="team", max_length=20, description="권한(admin/team)")


class UserPermission(Base, table=True):
    """소속 외 부서에 대한 사용자 권한"""

    user_id: str = Field(foreign_key="users.id", index=True)
    department_id: str = Field(foreign_key="departments.id", index=True)
    role: str = Field(
        default="none", max_length=20, description="none/viewer/editor/manager"
    )


class Category(Base, table=True):
    """대분류 카테고리"""

    company_id: str = Field(foreign_key="companies.id", index=True)
    department_id: str = Field(foreign_key="departments.id", index=True)
    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)


class Subcategory(Base, table=True):
    """세부 카테고리 (실물 보관 위치, NFC 태그, 보존 기한 단위)"""

    company_id: str = Field(foreign_key="companies.id", index=True)
    department_id: str = Field(foreign_key="departments.id", index=True)
    parent_category_id: str = Field(foreign_key="categories.id", index=True)
    name: str = Field(max_length=200)
    description: Optional[str] = Field(default=None)
    storage_location: Optional[str] = Field(default=None, max_length=255)
    expiry_date: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"index": True},
        description="보존 기한",
    )
    nfc_uid: Optional[str] = Field(default=None, max_length=100)
    nfc_registered: bool = Field(default=False)


class Document(Base, table=True):
    """업로드된 문서"""

    company_id: str = Field(foreign_key="companies.id", index=True)
    department_id: str = Field(foreign_key="departments.id", index=True)
    parent_category_id: Optional[str] = Field(
        default=None, foreign_key="categories.id"
    )
    subcategory_id: str = Field(foreign_key="subcategories.id", index=True)
    title: str = Field(max_length=255)
    file_path: Optional[str] = Field(default=None, max_length=500)
    file_size: Optional[int] = Field(default=None)
    ocr_text: Optional[str] = Field(default=None, sa_column=Column(Text))
    uploaded_by: Optional[str] = Field(default=None, foreign_key="users.id")
    uploaded_at: datetime = Field(
        sa_type=DateTime(timezone=True),  # type: ignore
        sa_column_kwargs={"index": True},
        description="업로드 시간",
    )
    is_classified: bool = Field(default=False)


class SharedDocument(Base, table=True):
    """사용자 간 문서 공유"""

    document_id: str = Field(foreign_key="documents.id", index=True)
    shared_by_user_id: str = Field(foreign_key="users.id", index=True)
    shared_to_user_id: str = Field(foreign_key="users.id", index=True)
    permission: str = Field(default="view", max_length=20, description="view/download")
    message: Optional[str] = Field(default=None)
    shared_at: datetime = Field(
        sa_type=DateTime(timezone=True),  # type: ignore
        description="공유 시간",
    )
    is_active: bool = Field(default=True)


class NfcMapping(Base, table=True):
    """NFC 태그와 세부 카테고리 연결"""

    tag_id: str = Field(max_length=100, index=True)
    subcategory_id: str = Field(foreign_key="subcategories.id", index=True)
    registered_by: Optional[str] = Field(default=None, foreign_key="users.id")
    registered_at: datetime = Field(
        sa_type=DateTime(timezone=True),  # type: ignore
        description="등록 시간",
    )
    last_accessed_at: Optional[datetime] = Field(
        default=None,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    access_count: int = Field(default=0)
