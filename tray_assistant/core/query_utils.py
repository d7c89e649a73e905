"""
🔍 쿼리 유틸리티

Soft Delete, 테넌트(회사) 범위 필터링을 위한 쿼리 헬퍼 함수들
"""

from typing import Iterable, Type, TypeVar

from sqlmodel import SQLModel, select

T = TypeVar("T", bound=SQLModel)


def filter_not_deleted(model_class: Type[T]):
    """삭제되지 않은 레코드만 필터링하는 조건"""
    return model_class.deleted_at.is_(None)


def create_soft_delete_query(
    model_class: Type[T], include_deleted_records: bool = False
):
    """
    Soft Delete를 고려한 기본 쿼리 생성

    Args:
        model_class: 모델 클래스
        include_deleted_records: 삭제된 레코드 포함 여부

    Returns:
        SQLModel select 쿼리
    """
    stmt = select(model_class)

    if not include_deleted_records:
        stmt = stmt.where(filter_not_deleted(model_class))

    return stmt


def create_scoped_query(
    model_class: Type[T],
    company_id: str,
    department_ids: Iterable[str],
    include_deleted_records: bool = False,
):
    """
    회사 + 접근 가능한 부서 범위로 제한된 쿼리 생성

    department_id 컬럼이 없는 모델은 회사 조건만 적용합니다.
    부서 목록이 비어 있으면 어떤 행도 반환하지 않습니다.
    """
    stmt = create_soft_delete_query(
        model_class, include_deleted_records=include_deleted_records
    ).where(model_class.company_id == company_id)

    if hasattr(model_class, "department_id"):
        stmt = stmt.where(model_class.department_id.in_(list(department_ids)))

    return stmt
