"""
🗄️ 어시스턴트 저장소 인터페이스

질의 엔진이 외부 문서 저장소에서 읽는 연산만 정의합니다. (쓰기 없음)
"""

import logging
from collections import Counter
from datetime import datetime
from typing import List, Protocol, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from tray_assistant.auth.schema import UserContext
from tray_assistant.documents.repository import DocumentRepository, document_repository
from tray_assistant.search.schema import (
    CategoryRecord,
    DepartmentRecord,
    DocumentRecord,
    StoreSnapshot,
)

from .schema import ExpiringCategoryRecord, NfcCategoryRecord, SharedDocumentRecord

logger = logging.getLogger(__name__)


class AssistantStore(Protocol):
    async def load_snapshot(self, user: UserContext) -> StoreSnapshot: ...

    async def list_expiring_categories(
        self, user: UserContext, until: datetime
    ) -> List[ExpiringCategoryRecord]: ...

    async def list_shared_documents(
        self, user: UserContext
    ) -> List[SharedDocumentRecord]: ...

    async def list_nfc_categories(self, user: UserContext) -> List[NfcCategoryRecord]: ...


class DatabaseAssistantStore:
    """SQLModel 세션 기반 저장소 구현 (요청 단위로 생성)"""

    def __init__(
        self, session: AsyncSession, repository: DocumentRepository = document_repository
    ):
        self.session = session
        self.repository = repository

    @staticmethod
    def _scope(user: UserContext) -> Tuple[str, List[str]]:
        return user.company_id or "", sorted(user.accessible_department_ids)

    async def load_snapshot(self, user: UserContext) -> StoreSnapshot:
        """회사 + 접근 가능 부서 범위의 스냅샷 조회"""
        if not user.has_tenant or not user.accessible_department_ids:
            return StoreSnapshot()

        company_id, department_ids = self._scope(user)
        departments = await self.repository.get_departments(
            company_id, department_ids, self.session
        )
        subcategories = await self.repository.get_subcategories(
            company_id, department_ids, self.session
        )
        documents = await self.repository.get_documents(
            company_id, department_ids, self.session
        )

        by_department = Counter(doc.department_id for doc in documents)
        by_subcategory = Counter(doc.subcategory_id for doc in documents)
        logger.info(
            f"📦 스냅샷 조회 완료: 부서 {len(departments)}개, "
            f"카테고리 {len(subcategories)}개, 문서 {len(documents)}개"
        )

        return StoreSnapshot(
            departments=tuple(
                DepartmentRecord(
                    id=d.id,
                    name=d.name,
                    code=d.code,
                    document_count=by_department.get(d.id, 0),
                )
                for d in departments
            ),
            categories=tuple(
                CategoryRecord(
                    id=s.id,
                    name=s.name,
                    department_id=s.department_id,
                    parent_category_id=s.parent_category_id,
                    storage_location=s.storage_location,
                    document_count=by_subcategory.get(s.id, 0),
                    nfc_registered=s.nfc_registered,
                )
                for s in subcategories
            ),
            documents=tuple(
                DocumentRecord(
                    id=doc.id,
                    name=doc.title,
                    department_id=doc.department_id,
                    category_id=doc.subcategory_id,
                    parent_category_id=doc.parent_category_id,
                    uploaded_at=doc.uploaded_at,
                    ocr_text=doc.ocr_text,
                )
                for doc in documents
            ),
        )

    async def list_expiring_categories(
        self, user: UserContext, until: datetime
    ) -> List[ExpiringCategoryRecord]:
        if not user.has_tenant or not user.accessible_department_ids:
            return []

        company_id, department_ids = self._scope(user)
        subcategories = await self.repository.get_expiring_subcategories(
            company_id, department_ids, until, self.session
        )
        if not subcategories:
            return []

        department_names, parent_names = await self._names(company_id, department_ids)
        counts = await self.repository.count_documents_by_subcategory(
            [s.id for s in subcategories], self.session
        )
        return [
            ExpiringCategoryRecord(
                id=s.id,
                name=s.name,
                department_name=department_names.get(s.department_id, ""),
                parent_category_name=parent_names.get(s.parent_category_id, ""),
                storage_location=s.storage_location,
                expiry_date=s.expiry_date,
                document_count=counts.get(s.id, 0),
            )
            for s in subcategories
        ]

    async def list_shared_documents(self, user: UserContext) -> List[SharedDocumentRecord]:
        if not user.user_id or not user.has_tenant:
            return []

        records: List[SharedDocumentRecord] = []
        for received in (True, False):
            rows = await self.repository.get_shared_documents(
                user.user_id, user.company_id, received, self.session
            )
            for share, document, counterpart, department, subcategory in rows:
                records.append(
                    SharedDocumentRecord(
                        document_id=document.id,
                        document_name=document.title,
                        direction="received" if received else "sent",
                        counterpart_name=counterpart.name if counterpart else "",
                        department_name=department.name if department else "",
                        category_name=subcategory.name if subcategory else "",
                        permission=share.permission,
                        message=share.message,
                        shared_at=share.shared_at,
                    )
                )
        return records

    async def list_nfc_categories(self, user: UserContext) -> List[NfcCategoryRecord]:
        if not user.has_tenant or not user.accessible_department_ids:
            return []

        company_id, department_ids = self._scope(user)
        subcategories = await self.repository.get_subcategories(
            company_id, department_ids, self.session
        )
        if not subcategories:
            return []

        department_names, parent_names = await self._names(company_id, department_ids)
        mappings = await self.repository.get_nfc_mappings(
            [s.id for s in subcategories], self.session
        )

        records = []
        for s in subcategories:
            mapping = mappings.get(s.id)
            records.append(
                NfcCategoryRecord(
                    id=s.id,
                    name=s.name,
                    department_name=department_names.get(s.department_id, ""),
                    parent_category_name=parent_names.get(s.parent_category_id, ""),
                    storage_location=s.storage_location,
                    nfc_registered=s.nfc_registered or mapping is not None,
                    tag_id=mapping.tag_id if mapping else s.nfc_uid,
                    access_count=mapping.access_count if mapping else 0,
                    last_accessed_at=mapping.last_accessed_at if mapping else None,
                )
            )
        return records

    async def _names(self, company_id: str, department_ids: List[str]):
        departments = await self.repository.get_departments(
            company_id, department_ids, self.session
        )
        parents = await self.repository.get_parent_categories(
            company_id, department_ids, self.session
        )
        return {d.id: d.name for d in departments}, {c.id: c.name for c in parents}
