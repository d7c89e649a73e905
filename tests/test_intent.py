import pytest

from tray_assistant.chat.intent import INTENT_RULES, Intent, classify


class TestClassify:
    @pytest.mark.parametrize(
        "text",
        ["만료 임박한 문서 알려줘", "보존 기한이 다가오는 카테고리", "폐기 예정 문서"],
    )
    def test_expiry(self, text):
        assert classify(text) is Intent.EXPIRY

    def test_expiry_beats_nfc(self):
        assert classify("NFC 태그 등록된 카테고리 중 만료 임박한 것") is Intent.EXPIRY

    @pytest.mark.parametrize("text", ["나한테 공유받은 문서", "내가 공유한 파일 보여줘"])
    def test_shared(self, text):
        assert classify(text) is Intent.SHARED_DOCUMENTS

    @pytest.mark.parametrize("text", ["NFC 현황 알려줘", "nfc 등록 안 된 곳", "태그 등록 현황"])
    def test_nfc(self, text):
        assert classify(text) is Intent.NFC_STATUS

    @pytest.mark.parametrize(
        "text",
        ["오늘 문서", "어제 업로드한 파일", "3일 전에 올린 것", "5월 3일에 등록된 자료"],
    )
    def test_date_search(self, text):
        assert classify(text) is Intent.DATE_SEARCH

    def test_date_without_document_action_is_unclassified(self):
        assert classify("오늘 날씨 어때?") is Intent.UNCLASSIFIED

    @pytest.mark.parametrize("text", ["급여 명세 문서는 어디에 있어?", "전체 문서 수는?", ""])
    def test_unclassified(self, text):
        assert classify(text) is Intent.UNCLASSIFIED


class TestRules:
    def test_rules_are_ordered_by_priority(self):
        assert [intent for _, intent in INTENT_RULES] == [
            Intent.EXPIRY,
            Intent.SHARED_DOCUMENTS,
            Intent.NFC_STATUS,
            Intent.DATE_SEARCH,
        ]
