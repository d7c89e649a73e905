"""
🔍 로컬 검색 인덱스

메모리 스냅샷 위에서 부서 가시성, 키워드, 날짜 범위 검색을 수행합니다.
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from tray_assistant.auth.schema import UserContext
from tray_assistant.core.utill import ensure_aware

from .schema import (
    CategoryRecord,
    DateRange,
    DepartmentRecord,
    DocumentRecord,
    SearchResult,
    StoreSnapshot,
)

logger = logging.getLogger(__name__)

# 조사 (긴 것부터 검사)
_PARTICLES = (
    "에서는",
    "으로는",
    "에서",
    "으로",
    "에게",
    "까지",
    "부터",
    "이랑",
    "은",
    "는",
    "이",
    "가",
    "을",
    "를",
    "에",
    "의",
    "도",
    "로",
    "와",
    "과",
    "랑",
    "만",
)

_STOPWORDS = {
    "어디",
    "어딨어",
    "어디야",
    "있어",
    "있어요",
    "있나요",
    "있니",
    "있는",
    "있는지",
    "문서",
    "파일",
    "자료",
    "알려줘",
    "알려주세요",
    "찾아줘",
    "찾아주세요",
    "보여줘",
    "보여주세요",
    "해줘",
    "주세요",
    "관련",
    "관련된",
    "위치",
    "보관",
    "뭐야",
    "무엇",
    "어떤",
    "좀",
}

_PUNCTUATION = re.compile(r"[^\w\s]")


def _strip_particle(token: str) -> str:
    for particle in _PARTICLES:
        if token.endswith(particle) and len(token) - len(particle) >= 2:
            return token[: -len(particle)]
    return token


def extract_search_terms(text: str) -> List[str]:
    """
    질문 문장에서 검색어 후보 추출

    예: "급여 명세 문서는 어디에 있어?" -> ["급여", "명세"]
    """
    terms: List[str] = []
    for raw in _PUNCTUATION.sub(" ", text).split():
        token = _strip_particle(raw.lower())
        if token in _STOPWORDS or raw.lower() in _STOPWORDS:
            continue
        if len(token) < 2 or token in terms:
            continue
        terms.append(token)
    return terms


class LocalSearchIndex:
    """스냅샷 기반 로컬 검색 인덱스"""

    def __init__(self, snapshot: StoreSnapshot, user: Optional[UserContext]):
        self.snapshot = snapshot
        self.user = user
        self._categories: Dict[str, CategoryRecord] = {
            c.id: c for c in snapshot.categories
        }
        self._departments: Dict[str, DepartmentRecord] = {
            d.id: d for d in snapshot.departments
        }

    # ═══════════════════════════════════════════════════════════════════════════
    # 👀 가시성
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def has_tenant(self) -> bool:
        return self.user is not None and self.user.has_tenant

    def visible_documents(self) -> List[DocumentRecord]:
        """접근 가능한 부서의 문서만 반환 (테넌트가 없으면 빈 목록)"""
        if not self.has_tenant:
            return []
        return [
            doc for doc in self.snapshot.documents if self.user.can_access(doc.department_id)
        ]

    def visible_departments(self) -> List[DepartmentRecord]:
        if not self.has_tenant:
            return []
        return [d for d in self.snapshot.departments if self.user.can_access(d.id)]

    def visible_categories(self) -> List[CategoryRecord]:
        if not self.has_tenant:
            return []
        return [
            c for c in self.snapshot.categories if self.user.can_access(c.department_id)
        ]

    # ═══════════════════════════════════════════════════════════════════════════
    # 🔎 검색
    # ═══════════════════════════════════════════════════════════════════════════

    def search_by_keyword(self, query: str) -> List[SearchResult]:
        """제목 또는 OCR 텍스트 부분 일치 (대소문자 무시, 스냅샷 순서 유지)"""
        keyword = query.strip().lower()
        if not keyword:
            return []

        return [
            self.to_result(doc)
            for doc in self.visible_documents()
            if self._matches(doc, keyword)
        ]

    def search_by_terms(self, terms: Iterable[str]) -> List[SearchResult]:
        """여러 검색어 중 하나라도 일치하는 문서 (스냅샷 순서, 중복 없음)"""
        keywords = [t.strip().lower() for t in terms if t and t.strip()]
        if not keywords:
            return []

        return [
            self.to_result(doc)
            for doc in self.visible_documents()
            if any(self._matches(doc, keyword) for keyword in keywords)
        ]

    def search_by_date_range(self, date_range: DateRange) -> List[SearchResult]:
        """업로드 시각이 범위 안에 있는 문서 (최신순 정렬)"""
        tz = date_range.start.tzinfo
        matched = [
            doc
            for doc in self.visible_documents()
            if date_range.contains(ensure_aware(doc.uploaded_at, tz))
        ]
        matched.sort(key=lambda doc: ensure_aware(doc.uploaded_at, tz), reverse=True)
        logger.debug(f"📅 날짜 범위 검색 ({date_range.label}): {len(matched)}건")
        return [self.to_result(doc) for doc in matched]

    # ═══════════════════════════════════════════════════════════════════════════
    # 🧩 결과 변환
    # ═══════════════════════════════════════════════════════════════════════════

    def category_for(self, doc: DocumentRecord) -> Optional[CategoryRecord]:
        return self._categories.get(doc.category_id) if doc.category_id else None

    def department_for(self, doc: DocumentRecord) -> Optional[DepartmentRecord]:
        return self._departments.get(doc.department_id)

    def to_result(self, doc: DocumentRecord) -> SearchResult:
        category = self.category_for(doc)
        department = self.department_for(doc)
        return SearchResult(
            id=doc.id,
            title=doc.name,
            category_name=category.name if category else "",
            department_name=department.name if department else "",
            storage_location=doc.storage_location
            or (category.storage_location if category else None),
            upload_date=doc.uploaded_at.isoformat(),
            subcategory_id=doc.category_id,
            parent_category_id=doc.parent_category_id
            or (category.parent_category_id if category else None),
        )

    @staticmethod
    def _matches(doc: DocumentRecord, keyword: str) -> bool:
        if keyword in doc.name.lower():
            return True
        return keyword in (doc.ocr_text or "").lower()
