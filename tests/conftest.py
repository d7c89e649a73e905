from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo

import pytest

from tray_assistant.auth.schema import UserContext
from tray_assistant.chat.schema import (
    ConversationTurn,
    ExpiringCategoryRecord,
    NfcCategoryRecord,
    SharedDocumentRecord,
)
from tray_assistant.external_services.ai_chat.client import RemoteChannelError
from tray_assistant.search.schema import (
    CategoryRecord,
    DepartmentRecord,
    DocumentRecord,
    StoreSnapshot,
)

KST = ZoneInfo("Asia/Seoul")

# 2024-05-15 (수) 14:30 KST
NOW = datetime(2024, 5, 15, 14, 30, tzinfo=KST)


async def agen(items):
    for item in items:
        yield item


async def collect(aiter) -> list:
    return [item async for item in aiter]


def make_snapshot(extra_documents: Sequence[DocumentRecord] = ()) -> StoreSnapshot:
    """
    인사팀 / 개발팀은 접근 가능, 재무팀은 접근 불가인 기본 스냅샷
    """
    departments = (
        DepartmentRecord(id="d-hr", name="인사팀", code="HR", document_count=2),
        DepartmentRecord(id="d-dev", name="개발팀", code="DEV", document_count=2),
        DepartmentRecord(id="d-fin", name="재무팀", code="FIN", document_count=1),
    )
    categories = (
        CategoryRecord(
            id="cat-pay",
            name="급여 명세",
            department_id="d-hr",
            parent_category_id="p-hr",
            storage_location="A동 2층 캐비닛 3",
            document_count=2,
        ),
        CategoryRecord(
            id="cat-plan",
            name="프로젝트 계획",
            department_id="d-dev",
            parent_category_id="p-dev",
            storage_location="B동 1층 서랍 2",
            document_count=2,
            nfc_registered=True,
        ),
        CategoryRecord(
            id="cat-fin",
            name="회계 장부",
            department_id="d-fin",
            parent_category_id="p-fin",
            storage_location="재무팀 금고",
            document_count=1,
        ),
    )
    documents = (
        DocumentRecord(
            id="doc-1",
            name="2024년 5월 급여 명세서.pdf",
            department_id="d-hr",
            category_id="cat-pay",
            uploaded_at=NOW - timedelta(hours=2),
            ocr_text="급여 지급 내역",
        ),
        DocumentRecord(
            id="doc-2",
            name="신규 프로젝트 계획서.docx",
            department_id="d-dev",
            category_id="cat-plan",
            uploaded_at=datetime(2024, 5, 14, 10, 0, tzinfo=KST),
        ),
        DocumentRecord(
            id="doc-3",
            name="채용 공고.pdf",
            department_id="d-hr",
            category_id="cat-pay",
            uploaded_at=datetime(2024, 5, 15, 9, 0, tzinfo=KST),
            storage_location="인사팀 서류함",
        ),
        DocumentRecord(
            id="doc-4",
            name="재무제표 급여 총괄.xlsx",
            department_id="d-fin",
            category_id="cat-fin",
            uploaded_at=datetime(2024, 5, 15, 11, 0, tzinfo=KST),
            ocr_text="급여 총액",
        ),
        DocumentRecord(
            id="doc-5",
            name="연간 보고서.pdf",
            department_id="d-dev",
            category_id="cat-plan",
            uploaded_at=datetime(2024, 4, 10, 16, 0, tzinfo=KST),
            ocr_text="Annual Report 2023",
        ),
    )
    return StoreSnapshot(
        departments=departments,
        categories=categories,
        documents=documents + tuple(extra_documents),
    )


class FakeStore:
    """메모리 저장소 (호출 기록 포함)"""

    def __init__(
        self,
        snapshot: Optional[StoreSnapshot] = None,
        expiring: Optional[List[ExpiringCategoryRecord]] = None,
        shared: Optional[List[SharedDocumentRecord]] = None,
        nfc: Optional[List[NfcCategoryRecord]] = None,
        error: Optional[Exception] = None,
    ):
        self.snapshot = snapshot or StoreSnapshot()
        self.expiring = expiring or []
        self.shared = shared or []
        self.nfc = nfc or []
        self.error = error
        self.snapshot_calls = 0
        self.expiring_until: Optional[datetime] = None

    async def load_snapshot(self, user):
        self.snapshot_calls += 1
        if self.error is not None:
            raise self.error
        return self.snapshot

    async def list_expiring_categories(self, user, until):
        self.expiring_until = until
        return list(self.expiring)

    async def list_shared_documents(self, user):
        return list(self.shared)

    async def list_nfc_categories(self, user):
        return list(self.nfc)


class FakeChannel:
    """원격 채널 대역 (바이트 조각을 그대로 흘려보냄)"""

    def __init__(
        self,
        chunks: Sequence[bytes] = (),
        error: Optional[Exception] = None,
        error_after: int = 0,
        configured: bool = True,
    ):
        self.chunks = list(chunks)
        self.error = error
        self.error_after = error_after
        self.configured = configured
        self.calls: List[tuple] = []
        self.closed = False

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def stream_answer(
        self, message: str, user_id: str, history: Sequence[ConversationTurn]
    ):
        self.calls.append((message, user_id, list(history)))
        try:
            for index, chunk in enumerate(self.chunks):
                if self.error is not None and index == self.error_after:
                    raise self.error
                yield chunk
            if self.error is not None and self.error_after >= len(self.chunks):
                raise self.error
        finally:
            self.closed = True


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def user() -> UserContext:
    return UserContext(
        user_id="u-1",
        company_id="c-1",
        department_id="d-hr",
        role="team",
        accessible_department_ids=frozenset({"d-hr", "d-dev"}),
    )


@pytest.fixture
def snapshot() -> StoreSnapshot:
    return make_snapshot()


@pytest.fixture
def network_error() -> RemoteChannelError:
    return RemoteChannelError("connection refused")
