"""
🤖 채팅 스키마

AI 어시스턴트 질의/응답 관련 스키마를 정의합니다.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import ConfigDict, Field

from tray_assistant.core.schema import SchemaBase
from tray_assistant.search.schema import SearchResult

# ═══════════════════════════════════════════════════════════════════════════════
# 💬 대화
# ═══════════════════════════════════════════════════════════════════════════════


class ConversationTurn(SchemaBase):
    """이전 대화 한 턴 (원격 채널에 그대로 전달)"""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"] = Field(..., description="발화자")
    content: str = Field(..., description="내용")


class ChatRequest(SchemaBase):
    """채팅 요청"""

    message: str = Field(..., description="사용자 질문")
    history: List[ConversationTurn] = Field(
        default_factory=list, description="이전 대화 (오래된 순)"
    )


class ChatResult(SchemaBase):
    """최종 응답"""

    text: str = Field(..., description="답변 본문")
    documents: List[SearchResult] = Field(
        default_factory=list, description="참고 문서 목록"
    )


class StreamingChatResponse(SchemaBase):
    """스트리밍 채팅 응답 (SSE 한 프레임)"""

    chunk: str = Field(..., description="현재까지의 답변 본문")
    documents: List[SearchResult] = Field(
        default_factory=list, description="참고 문서 (완료 시에만)"
    )
    is_complete: bool = Field(..., description="완료 여부")


@dataclass
class StreamedAnswer:
    """한 번의 질의 동안만 사용하는 누적 버퍼"""

    buffer: str = ""
    provisional_text: str = ""
    final_text: str = ""
    documents: List[SearchResult] = field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# 📋 로컬 리포트용 레코드 (저장소 조회 결과)
# ═══════════════════════════════════════════════════════════════════════════════


class ExpiringCategoryRecord(SchemaBase):
    """보존 기한이 있는 세부 카테고리"""

    id: str
    name: str
    department_name: str = ""
    parent_category_name: str = ""
    storage_location: Optional[str] = None
    expiry_date: datetime
    document_count: int = 0


class SharedDocumentRecord(SchemaBase):
    """공유 문서"""

    document_id: str
    document_name: str
    direction: Literal["received", "sent"]
    counterpart_name: str = ""
    department_name: str = ""
    category_name: str = ""
    permission: str = "view"
    message: Optional[str] = None
    shared_at: datetime


class NfcCategoryRecord(SchemaBase):
    """세부 카테고리별 NFC 등록 현황"""

    id: str
    name: str
    department_name: str = ""
    parent_category_name: str = ""
    storage_location: Optional[str] = None
    nfc_registered: bool = False
    tag_id: Optional[str] = None
    access_count: int = 0
    last_accessed_at: Optional[datetime] = None
