"""
📄 문서 저장소 리포지토리 (읽기 전용)

어시스턴트가 사용하는 부서/카테고리/문서/공유/NFC 조회 쿼리
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlmodel import desc, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from tray_assistant.core.query_utils import (
    create_scoped_query,
    create_soft_delete_query,
    filter_not_deleted,
)
from tray_assistant.models import (
    Category,
    Department,
    Document,
    NfcMapping,
    SharedDocument,
    Subcategory,
    User,
    UserPermission,
)


class DocumentRepository:
    """
    문서 저장소 조회 리포지토리

    모든 조회는 회사 + 접근 가능한 부서 범위로 제한됩니다.
    """

    # ═══════════════════════════════════════════════════════════════════════════════
    # 🏢 부서 / 카테고리
    # ═══════════════════════════════════════════════════════════════════════════════

    async def get_departments(
        self, company_id: str, department_ids: Iterable[str], session: AsyncSession
    ) -> List[Department]:
        """접근 가능한 부서 목록"""
        query = (
            create_soft_delete_query(Department)
            .where(Department.company_id == company_id)
            .where(Department.id.in_(list(department_ids)))
            .order_by(Department.name)
        )
        result = await session.exec(query)
        return list(result.all())

    async def get_company_department_ids(
        self, company_id: str, session: AsyncSession
    ) -> List[str]:
        """회사의 전체 부서 ID (관리자용)"""
        query = select(Department.id).where(
            Department.company_id == company_id, filter_not_deleted(Department)
        )
        result = await session.exec(query)
        return list(result.all())

    async def get_user_permissions(
        self, user_id: str, company_id: str, session: AsyncSession
    ) -> List[UserPermission]:
        """다른 부서에 대해 부여받은 권한 (같은 회사 부서만)"""
        query = (
            select(UserPermission)
            .join(Department, UserPermission.department_id == Department.id)
            .where(UserPermission.user_id == user_id)
            .where(Department.company_id == company_id)
            .where(filter_not_deleted(UserPermission), filter_not_deleted(Department))
        )
        result = await session.exec(query)
        return list(result.all())

    async def get_parent_categories(
        self, company_id: str, department_ids: Iterable[str], session: AsyncSession
    ) -> List[Category]:
        query = create_scoped_query(Category, company_id, department_ids)
        result = await session.exec(query)
        return list(result.all())

    async def get_subcategories(
        self, company_id: str, department_ids: Iterable[str], session: AsyncSession
    ) -> List[Subcategory]:
        query = create_scoped_query(Subcategory, company_id, department_ids).order_by(
            Subcategory.name
        )
        result = await session.exec(query)
        return list(result.all())

    async def get_expiring_subcategories(
        self,
        company_id: str,
        department_ids: Iterable[str],
        until: datetime,
        session: AsyncSession,
    ) -> List[Subcategory]:
        """보존 기한이 until 이전인 세부 카테고리 (이미 만료된 것 포함)"""
        query = (
            create_scoped_query(Subcategory, company_id, department_ids)
            .where(Subcategory.expiry_date.is_not(None))
            .where(Subcategory.expiry_date <= until)
            .order_by(Subcategory.expiry_date)
        )
        result = await session.exec(query)
        return list(result.all())

    # ═══════════════════════════════════════════════════════════════════════════════
    # 📚 문서
    # ═══════════════════════════════════════════════════════════════════════════════

    async def get_documents(
        self, company_id: str, department_ids: Iterable[str], session: AsyncSession
    ) -> List[Document]:
        """접근 가능한 문서 목록 (최신 업로드 순)"""
        query = create_scoped_query(Document, company_id, department_ids).order_by(
            desc(Document.uploaded_at)
        )
        result = await session.exec(query)
        return list(result.all())

    async def count_documents_by_subcategory(
        self, subcategory_ids: Iterable[str], session: AsyncSession
    ) -> Dict[str, int]:
        ids = list(subcategory_ids)
        if not ids:
            return {}
        query = (
            select(Document.subcategory_id, func.count(Document.id))
            .where(Document.subcategory_id.in_(ids), filter_not_deleted(Document))
            .group_by(Document.subcategory_id)
        )
        result = await session.exec(query)
        return {subcategory_id: count for subcategory_id, count in result.all()}

    # ═══════════════════════════════════════════════════════════════════════════════
    # 🤝 공유 문서
    # ═══════════════════════════════════════════════════════════════════════════════

    async def get_shared_documents(
        self, user_id: str, company_id: str, received: bool, session: AsyncSession
    ) -> List[
        Tuple[SharedDocument, Document, Optional[User], Optional[Department], Optional[Subcategory]]
    ]:
        """
        활성 공유 목록

        received=True 면 나에게 공유된 문서(상대: 공유한 사람),
        False 면 내가 공유한 문서(상대: 공유받은 사람)
        """
        if received:
            user_column = SharedDocument.shared_to_user_id
            counterpart_column = SharedDocument.shared_by_user_id
        else:
            user_column = SharedDocument.shared_by_user_id
            counterpart_column = SharedDocument.shared_to_user_id

        query = (
            select(SharedDocument, Document, User, Department, Subcategory)
            .join(Document, SharedDocument.document_id == Document.id)
            .join(User, counterpart_column == User.id, isouter=True)
            .join(Department, Document.department_id == Department.id, isouter=True)
            .join(Subcategory, Document.subcategory_id == Subcategory.id, isouter=True)
            .where(user_column == user_id)
            .where(SharedDocument.is_active == True)  # noqa: E712
            .where(Document.company_id == company_id)
            .where(filter_not_deleted(SharedDocument), filter_not_deleted(Document))
            .order_by(desc(SharedDocument.shared_at))
        )
        result = await session.exec(query)
        return list(result.all())

    # ═══════════════════════════════════════════════════════════════════════════════
    # 📡 NFC
    # ═══════════════════════════════════════════════════════════════════════════════

    async def get_nfc_mappings(
        self, subcategory_ids: Iterable[str], session: AsyncSession
    ) -> Dict[str, NfcMapping]:
        """세부 카테고리별 최신 NFC 매핑"""
        ids = list(subcategory_ids)
        if not ids:
            return {}
        query = (
            create_soft_delete_query(NfcMapping)
            .where(NfcMapping.subcategory_id.in_(ids))
            .order_by(NfcMapping.registered_at)
        )
        result = await session.exec(query)
        # 등록 순으로 덮어써서 최신 매핑만 남김
        return {mapping.subcategory_id: mapping for mapping in result.all()}


# 리포지토리 인스턴스
document_repository = DocumentRepository()
