"""
📋 로컬 리포트

만료 임박 / 공유 문서 / NFC 현황 / 날짜별 업로드 문서 질문에
원격 호출 없이 저장소 데이터만으로 답변을 만듭니다.
"""

import logging
import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from tray_assistant.auth.schema import UserContext
from tray_assistant.core.config import settings
from tray_assistant.core.utill import (
    ensure_aware,
    format_date_ko,
    format_datetime_ko,
    now_local,
)
from tray_assistant.search.schema import DateRange, SearchResult

from .schema import ExpiringCategoryRecord, NfcCategoryRecord, SharedDocumentRecord
from .store import AssistantStore

logger = logging.getLogger(__name__)

SECTION_LIMIT = 10

PERMISSION_LABELS = {"view": "보기", "download": "다운로드"}


def _more_line(total: int, shown: int) -> List[str]:
    if total > shown:
        return [f"  … 외 {total - shown}건"]
    return []


def _path(department_name: str, category_name: str) -> str:
    parts = [p for p in (department_name, category_name) if p]
    return " › ".join(parts) if parts else "위치 정보 없음"


def _parse_upload_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# 📅 날짜별 업로드 문서
# ═══════════════════════════════════════════════════════════════════════════════


def format_date_search(
    date_range: DateRange,
    results: List[SearchResult],
    limit: int = settings.DATE_SEARCH_DISPLAY_LIMIT,
) -> str:
    if not results:
        return f"📅 {date_range.label}에 업로드된 문서가 없습니다."

    lines = [f"📅 {date_range.label}에 업로드된 문서 {len(results)}건을 찾았습니다.", ""]
    for index, doc in enumerate(results[:limit], start=1):
        lines.append(f"{index}. {doc.title}")
        lines.append(f"   · 부서: {doc.department_name or '부서 정보 없음'}")
        lines.append(f"   · 카테고리: {doc.category_name or '카테고리 정보 없음'}")
        lines.append(f"   · 업로드: {format_date_ko(_parse_upload_date(doc.upload_date))}")

    if len(results) > limit:
        lines.append("")
        lines.append(f"… 외 {len(results) - limit}건이 더 있습니다.")
    return "\n".join(lines)


class LocalReportService:
    """저장소 조회 기반 리포트 (만료 / 공유 / NFC)"""

    def __init__(
        self,
        store: AssistantStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self._clock = clock or now_local

    # ═══════════════════════════════════════════════════════════════════════════
    # ⏰ 만료 임박
    # ═══════════════════════════════════════════════════════════════════════════

    async def expiry_report(self, user: UserContext) -> str:
        now = ensure_aware(self._clock())
        until = now + timedelta(days=settings.EXPIRY_LATER_DAYS)
        records = await self.store.list_expiring_categories(user, until)
        logger.info(f"⏰ 만료 예정 카테고리 조회: {len(records)}건")

        if not records:
            return (
                f"{settings.EXPIRY_LATER_DAYS}일 이내에 만료 예정이거나 "
                "이미 만료된 카테고리가 없습니다. 👍"
            )

        soon_limit = now + timedelta(days=settings.EXPIRY_SOON_DAYS)
        expired, soon, later = [], [], []
        for record in sorted(records, key=lambda r: ensure_aware(r.expiry_date, now.tzinfo)):
            expiry = ensure_aware(record.expiry_date, now.tzinfo)
            if expiry < now:
                expired.append(record)
            elif expiry <= soon_limit:
                soon.append(record)
            else:
                later.append(record)

        lines = ["⏰ 보존 기한 만료 현황입니다."]
        sections = [
            ("🚨 이미 만료됨", expired),
            (f"⚠️ {settings.EXPIRY_SOON_DAYS}일 이내 만료", soon),
            (f"📌 {settings.EXPIRY_LATER_DAYS}일 이내 만료", later),
        ]
        for title, items in sections:
            if not items:
                continue
            lines.append("")
            lines.append(f"{title} ({len(items)}건)")
            for record in items[:SECTION_LIMIT]:
                lines.append(self._expiry_line(record, now))
            lines.extend(_more_line(len(items), SECTION_LIMIT))

        if expired or soon:
            lines.append("")
            lines.append("만료된 카테고리의 문서는 삭제될 수 있으니 미리 확인해 주세요.")
        return "\n".join(lines)

    @staticmethod
    def _expiry_line(record: ExpiringCategoryRecord, now: datetime) -> str:
        expiry = ensure_aware(record.expiry_date, now.tzinfo)
        days = math.ceil((expiry - now).total_seconds() / 86400)
        d_day = f"D-{days}" if days > 0 else ("D-DAY" if days == 0 else f"D+{-days}")
        path = _path(record.department_name, record.parent_category_name)
        return (
            f"- {record.name} [{path}] 만료일 {format_date_ko(expiry)} ({d_day})"
            f" · 문서 {record.document_count}개"
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # 🤝 공유 문서
    # ═══════════════════════════════════════════════════════════════════════════

    async def shared_report(self, user: UserContext) -> str:
        records = await self.store.list_shared_documents(user)
        logger.info(f"🤝 공유 문서 조회: {len(records)}건")

        received = [r for r in records if r.direction == "received"]
        sent = [r for r in records if r.direction == "sent"]
        if not received and not sent:
            return "공유받거나 공유한 문서가 없습니다."

        lines = ["🤝 공유 문서 현황입니다."]
        for title, label, items in (
            ("📥 공유받은 문서", "보낸 사람", received),
            ("📤 내가 공유한 문서", "받는 사람", sent),
        ):
            lines.append("")
            lines.append(f"{title} ({len(items)}건)")
            if not items:
                lines.append("- 없음")
                continue
            for record in items[:SECTION_LIMIT]:
                lines.extend(self._shared_lines(record, label))
            lines.extend(_more_line(len(items), SECTION_LIMIT))
        return "\n".join(lines)

    @staticmethod
    def _shared_lines(record: SharedDocumentRecord, label: str) -> List[str]:
        permission = PERMISSION_LABELS.get(record.permission, record.permission)
        lines = [
            f"- {record.document_name} ({_path(record.department_name, record.category_name)})"
            f" · {label}: {record.counterpart_name or '알 수 없음'}"
            f" · 권한: {permission} · {format_date_ko(record.shared_at)}"
        ]
        if record.message:
            lines.append(f"  💬 {record.message}")
        return lines

    # ═══════════════════════════════════════════════════════════════════════════
    # 📡 NFC 현황
    # ═══════════════════════════════════════════════════════════════════════════

    async def nfc_report(self, user: UserContext) -> str:
        records = await self.store.list_nfc_categories(user)
        logger.info(f"📡 NFC 현황 조회: 카테고리 {len(records)}개")

        if not records:
            return "등록된 카테고리가 없습니다."

        registered = [r for r in records if r.nfc_registered]
        unregistered = [r for r in records if not r.nfc_registered]

        lines = [
            f"📡 NFC 태그 등록 현황입니다. (등록 {len(registered)} / 전체 {len(records)})"
        ]
        if registered:
            lines.append("")
            lines.append("✅ 등록된 카테고리")
            for department, items in self._group_by_department(registered).items():
                lines.append(f"[{department}]")
                for record in items:
                    location = f" ({record.storage_location})" if record.storage_location else ""
                    lines.append(
                        f"- {record.name}{location} · 접근 {record.access_count}회"
                        f" · 최근 접근 {format_datetime_ko(record.last_accessed_at)}"
                    )
        if unregistered:
            lines.append("")
            lines.append("❌ 미등록 카테고리")
            for department, items in self._group_by_department(unregistered).items():
                lines.append(f"[{department}]")
                for record in items:
                    lines.append(f"- {record.name}")
            lines.append("")
            lines.append("미등록 카테고리는 관리자 권한으로 NFC 태그를 등록할 수 있습니다.")
        return "\n".join(lines)

    @staticmethod
    def _group_by_department(
        records: List[NfcCategoryRecord],
    ) -> Dict[str, List[NfcCategoryRecord]]:
        grouped: Dict[str, List[NfcCategoryRecord]] = OrderedDict()
        for record in records:
            grouped.setdefault(record.department_name or "부서 미지정", []).append(record)
        return grouped
