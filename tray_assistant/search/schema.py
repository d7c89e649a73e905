"""
🔍 검색 스키마

질의 엔진이 읽는 스냅샷 레코드와 검색 결과 스키마를 정의합니다.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import ConfigDict, Field

from tray_assistant.core.schema import SchemaBase

# ═══════════════════════════════════════════════════════════════════════════════
# 📦 스냅샷 레코드 (외부 저장소가 제공, 읽기 전용)
# ═══════════════════════════════════════════════════════════════════════════════


class DocumentRecord(SchemaBase):
    """문서 스냅샷"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="문서 ID")
    name: str = Field(..., description="문서 제목")
    department_id: str = Field(..., description="소속 부서 ID")
    category_id: Optional[str] = Field(None, description="세부 카테고리 ID")
    parent_category_id: Optional[str] = Field(None, description="대분류 카테고리 ID")
    uploaded_at: datetime = Field(..., description="업로드 시간")
    ocr_text: Optional[str] = Field(None, description="OCR 추출 텍스트")
    storage_location: Optional[str] = Field(None, description="문서별 보관 위치")


class CategoryRecord(SchemaBase):
    """세부 카테고리 스냅샷"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="카테고리 ID")
    name: str = Field(..., description="카테고리 이름")
    department_id: Optional[str] = Field(None, description="소속 부서 ID")
    parent_category_id: Optional[str] = Field(None, description="대분류 카테고리 ID")
    storage_location: Optional[str] = Field(None, description="보관 위치")
    document_count: int = Field(default=0, description="문서 수")
    nfc_registered: bool = Field(default=False, description="NFC 등록 여부")


class DepartmentRecord(SchemaBase):
    """부서 스냅샷"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="부서 ID")
    name: str = Field(..., description="부서 이름")
    code: Optional[str] = Field(None, description="부서 코드")
    document_count: int = Field(default=0, description="문서 수")


class StoreSnapshot(SchemaBase):
    """한 번의 질의 동안 사용하는 읽기 전용 스냅샷"""

    model_config = ConfigDict(frozen=True)

    documents: Tuple[DocumentRecord, ...] = ()
    categories: Tuple[CategoryRecord, ...] = ()
    departments: Tuple[DepartmentRecord, ...] = ()


class DateRange(SchemaBase):
    """
    날짜 범위 (start <= x <= end, 양 끝 포함)

    날짜 표현 해석기만 생성하며 저장되지 않습니다.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(..., description="시작 시각")
    end: datetime = Field(..., description="종료 시각")
    label: str = Field(..., description="표시용 표현 (예: 오늘, 3일 전)")

    def contains(self, value: datetime) -> bool:
        return self.start <= value <= self.end


# ═══════════════════════════════════════════════════════════════════════════════
# 🎯 검색 결과
# ═══════════════════════════════════════════════════════════════════════════════


class SearchResult(SchemaBase):
    """
    검색 결과

    원격 응답 끝에 붙는 문서 목록(JSON)과 같은 형태이므로,
    알 수 없는 키는 무시하고 id/title 외에는 모두 선택 항목입니다.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="문서 ID")
    title: str = Field(..., description="문서 제목")
    category_name: Optional[str] = Field(default="", description="카테고리 이름")
    department_name: Optional[str] = Field(default="", description="부서 이름")
    storage_location: Optional[str] = Field(None, description="보관 위치")
    upload_date: Optional[str] = Field(None, description="업로드 일시 (ISO-8601)")
    subcategory_id: Optional[str] = Field(None, description="세부 카테고리 ID")
    parent_category_id: Optional[str] = Field(None, description="대분류 카테고리 ID")


class DocumentSearchRequest(SchemaBase):
    """키워드 문서 검색 요청"""

    query: str = Field(..., description="검색 키워드")
    top_k: int = Field(default=20, ge=1, le=100, description="검색 결과 수")


class DocumentSearchResponse(SchemaBase):
    """키워드 문서 검색 응답"""

    query: str = Field(..., description="검색 키워드")
    results: List[SearchResult] = Field(..., description="검색 결과")
    total_found: int = Field(..., description="총 검색 결과 수")
