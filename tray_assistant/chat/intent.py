"""
🧭 질문 의도 분류기

언어 모델 없이, 고정된 우선순위의 키워드/패턴 규칙으로 의도를 하나만 선택합니다.
"""

from enum import Enum
from typing import Callable, List, Tuple

from .dates import matches_date_expression


class Intent(str, Enum):
    EXPIRY = "expiry"
    SHARED_DOCUMENTS = "shared_documents"
    NFC_STATUS = "nfc_status"
    DATE_SEARCH = "date_search"
    UNCLASSIFIED = "unclassified"


EXPIRY_KEYWORDS = ("만기", "만료", "임박", "보존기한", "보존 기한", "폐기 예정")

SHARED_KEYWORDS = (
    "공유받은",
    "공유 받은",
    "공유한",
    "공유된",
    "공유 문서",
    "공유문서",
    "공유해준",
)

NFC_KEYWORDS = ("엔에프씨", "태그 등록", "태그 현황", "태그가 등록")

DATE_KEYWORDS = (
    "오늘",
    "어제",
    "그제",
    "그저께",
    "이번 주",
    "이번주",
    "지난주",
    "지난 주",
    "이번 달",
    "이번달",
    "지난달",
    "지난 달",
    "올해",
    "작년",
    "최근",
    "날짜",
)

DOCUMENT_ACTION_KEYWORDS = ("문서", "올린", "업로드", "등록")


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def is_expiry_question(text: str) -> bool:
    return _contains_any(text, EXPIRY_KEYWORDS)


def is_shared_question(text: str) -> bool:
    return _contains_any(text, SHARED_KEYWORDS)


def is_nfc_question(text: str) -> bool:
    return "nfc" in text.lower() or _contains_any(text, NFC_KEYWORDS)


def is_date_search_question(text: str) -> bool:
    """날짜 표현과 문서 관련 동작어가 함께 있어야 함"""
    has_date = _contains_any(text, DATE_KEYWORDS) or matches_date_expression(text)
    return has_date and _contains_any(text, DOCUMENT_ACTION_KEYWORDS)


# (조건, 의도) 순서대로 평가, 처음 일치한 규칙만 사용
INTENT_RULES: List[Tuple[Callable[[str], bool], Intent]] = [
    (is_expiry_question, Intent.EXPIRY),
    (is_shared_question, Intent.SHARED_DOCUMENTS),
    (is_nfc_question, Intent.NFC_STATUS),
    (is_date_search_question, Intent.DATE_SEARCH),
]


def classify(text: str) -> Intent:
    for predicate, intent in INTENT_RULES:
        if predicate(text):
            return intent
    return Intent.UNCLASSIFIED
