import pytest

from tray_assistant.chat.fallback import (
    EMPTY_INPUT_MESSAGE,
    HELP_MESSAGE,
    NOT_FOUND_MESSAGE,
    LocalFallbackResponder,
)
from tray_assistant.search.schema import StoreSnapshot
from tray_assistant.search.service import LocalSearchIndex


@pytest.fixture
def responder(snapshot, user) -> LocalFallbackResponder:
    return LocalFallbackResponder(LocalSearchIndex(snapshot, user))


class TestLocalFallbackResponder:
    def test_empty_input(self, responder):
        assert responder.respond("  ") == EMPTY_INPUT_MESSAGE

    def test_location_question_uses_extracted_terms(self, responder):
        answer = responder.respond("급여 명세 문서는 어디에 있어?")
        assert answer.startswith("검색된 문서의 보관 위치입니다:")
        assert "- 문서: 2024년 5월 급여 명세서.pdf" in answer
        assert "· 보관 위치: A동 2층 캐비닛 3" in answer
        assert "재무제표" not in answer

    def test_location_question_without_match(self, responder):
        assert responder.respond("우주선 설계도 어디 있어?") == NOT_FOUND_MESSAGE

    @pytest.mark.parametrize("text", ["전체 문서 수는?", "문서가 몇 개야?"])
    def test_document_count_only_counts_visible_documents(self, responder, text):
        assert responder.respond(text) == "현재 시스템에 등록된 문서는 총 4개입니다."

    def test_department_counts(self, responder):
        answer = responder.respond("부서 현황 알려줘")
        assert answer.splitlines() == [
            "부서별 문서 보관 현황입니다:",
            "- 인사팀: 2건",
            "- 개발팀: 2건",
        ]

    def test_category_listing(self, responder):
        answer = responder.respond("카테고리 목록 보여줘")
        assert answer.splitlines() == [
            "등록된 카테고리 목록입니다:",
            "- 급여 명세 (2건) - 보관 위치: A동 2층 캐비닛 3",
            "- 프로젝트 계획 (2건) - 보관 위치: B동 1층 서랍 2",
        ]

    def test_keyword_results(self, responder):
        answer = responder.respond("계획서")
        assert answer.splitlines() == [
            "다음 문서를 찾았습니다:",
            "- 문서: 신규 프로젝트 계획서.docx (부서: 개발팀, 카테고리: 프로젝트 계획)",
        ]

    def test_help_text_when_nothing_matches(self, responder):
        assert responder.respond("날씨 어때") == HELP_MESSAGE

    def test_empty_snapshot(self, user):
        responder = LocalFallbackResponder(LocalSearchIndex(StoreSnapshot(), user))
        assert responder.respond("부서 현황") == "부서 정보가 없습니다."
        assert responder.respond("카테고리 보여줘") == "카테고리 정보가 없습니다."
