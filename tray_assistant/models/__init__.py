"""
📊 데이터베이스 모델 정의

SQLModel을 사용한 데이터베이스 엔티티 모델들
"""

from .entities import (
    Category,
    Company,
    Department,
    Document,
    NfcMapping,
    SharedDocument,
    Subcategory,
    User,
    UserPermission,
)

__all__ = [
    "Company",
    "Department",
    "User",
    "UserPermission",
    "Category",
    "Subcategory",
    "Document",
    "SharedDocument",
    "NfcMapping",
]
