"""
🛟 로컬 폴백 응답기

원격 채널을 쓸 수 없거나 실패했을 때 스냅샷만으로 답변합니다.
입력과 스냅샷이 같으면 항상 같은 문장을 돌려줍니다.
"""

import logging
from typing import List

from tray_assistant.core.config import settings
from tray_assistant.search.schema import SearchResult
from tray_assistant.search.service import LocalSearchIndex, extract_search_terms

logger = logging.getLogger(__name__)

EMPTY_INPUT_MESSAGE = (
    '질문을 입력해 주세요. 예: "급여 명세 문서는 어디에 있어?", "전체 문서 수 알려줘"'
)

GENERIC_ERROR_MESSAGE = "죄송합니다. 일시적인 오류로 답변을 만들지 못했어요. 잠시 후 다시 시도해 주세요."

NOT_FOUND_MESSAGE = "해당 키워드와 관련된 문서를 찾지 못했어요. 다른 키워드로 다시 검색해 주세요."

HELP_MESSAGE = "\n".join(
    [
        "해당 키워드와 관련된 문서를 찾지 못했어요.",
        "다음과 같이 질문해 보세요:",
        '- "급여 명세 문서는 어디에 있어?"',
        '- "전체 문서 수 알려줘"',
        '- "부서별 문서 수 알려줘"',
        '- "카테고리 목록 보여줘"',
    ]
)

# 원격 호출 없이 바로 답하는 질문 (완전 일치)
FAST_REPLY_QUESTIONS = (
    "카테고리 목록 보여줘",
    "전체 문서 수는?",
    "부서별 문서 수 알려줘",
)


class LocalFallbackResponder:
    """규칙 기반 응답기 (위치 → 문서 수 → 부서 → 카테고리 → 키워드 순)"""

    def __init__(self, index: LocalSearchIndex, limit: int = settings.KEYWORD_RESULT_LIMIT):
        self.index = index
        self.limit = limit

    def respond(self, message: str) -> str:
        text = message.strip()
        if not text:
            return EMPTY_INPUT_MESSAGE

        if "어디" in text:
            return self._location_answer(text)

        if "문서 수" in text or "몇 개" in text:
            total = len(self.index.visible_documents())
            return f"현재 시스템에 등록된 문서는 총 {total}개입니다."

        if "부서" in text:
            return self._department_answer()

        if "카테고리" in text:
            return self._category_answer()

        return self._keyword_answer(text)

    def search(self, text: str) -> List[SearchResult]:
        """문장 전체로 먼저 찾고, 없으면 추출한 검색어로 다시 찾음"""
        results = self.index.search_by_keyword(text)
        if results:
            return results

        terms = extract_search_terms(text)
        if not terms:
            return []
        logger.debug(f"🔎 검색어 추출: {terms}")
        return self.index.search_by_terms(terms)

    # ═══════════════════════════════════════════════════════════════════════════
    # 답변 유형별 포맷
    # ═══════════════════════════════════════════════════════════════════════════

    def _location_answer(self, text: str) -> str:
        results = self.search(text)
        if not results:
            return NOT_FOUND_MESSAGE

        lines = ["검색된 문서의 보관 위치입니다:"]
        for doc in results[: self.limit]:
            lines.append(
                f"- 문서: {doc.title}\n"
                f"  · 부서: {doc.department_name or '부서 정보 없음'}\n"
                f"  · 카테고리: {doc.category_name or '카테고리 정보 없음'}\n"
                f"  · 보관 위치: {doc.storage_location or '위치 정보가 등록되지 않았습니다.'}"
            )
        return "\n".join(lines)

    def _department_answer(self) -> str:
        departments = self.index.visible_departments()
        if not departments:
            return "부서 정보가 없습니다."

        lines = ["부서별 문서 보관 현황입니다:"]
        lines.extend(f"- {d.name}: {d.document_count}건" for d in departments)
        return "\n".join(lines)

    def _category_answer(self) -> str:
        categories = self.index.visible_categories()
        if not categories:
            return "카테고리 정보가 없습니다."

        lines = ["등록된 카테고리 목록입니다:"]
        lines.extend(
            f"- {c.name} ({c.document_count}건) - 보관 위치: {c.storage_location or '위치 정보 없음'}"
            for c in categories
        )
        return "\n".join(lines)

    def _keyword_answer(self, text: str) -> str:
        results = self.search(text)
        if not results:
            return HELP_MESSAGE

        lines = ["다음 문서를 찾았습니다:"]
        lines.extend(
            f"- 문서: {doc.title} (부서: {doc.department_name or '부서 정보 없음'}, "
            f"카테고리: {doc.category_name or '카테고리 정보 없음'})"
            for doc in results[: self.limit]
        )
        return "\n".join(lines)
