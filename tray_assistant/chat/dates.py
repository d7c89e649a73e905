"""
📅 날짜 표현 해석기

"오늘", "지난주", "3개월 전", "5월 3일" 같은 한국어 날짜 표현을
구체적인 [start, end] 범위로 변환합니다.
"""

import logging
import re
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional, Pattern, Tuple

from tray_assistant.core.utill import ensure_aware, now_local
from tray_assistant.search.schema import DateRange

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# 범위 끝: 23:59:59.999999
_END_OF_DAY = time.max

TODAY = re.compile(r"오늘", re.IGNORECASE)
YESTERDAY = re.compile(r"어제", re.IGNORECASE)
DAY_BEFORE_YESTERDAY = re.compile(r"그저께|엊그제|그제", re.IGNORECASE)
DAYS_AGO = re.compile(r"(\d+)\s*일\s*전", re.IGNORECASE)
THIS_WEEK = re.compile(r"이번\s*주|금주", re.IGNORECASE)
LAST_WEEK = re.compile(r"지난\s*주|저번\s*주", re.IGNORECASE)
WEEKS_AGO = re.compile(r"(\d+)\s*주\s*전", re.IGNORECASE)
THIS_MONTH = re.compile(r"이번\s*달|금월", re.IGNORECASE)
LAST_MONTH = re.compile(r"지난\s*달|저번\s*달", re.IGNORECASE)
MONTHS_AGO = re.compile(r"(\d+)\s*(?:개월|달)\s*전", re.IGNORECASE)
THIS_YEAR = re.compile(r"올해|금년", re.IGNORECASE)
LAST_YEAR = re.compile(r"작년|지난\s*해", re.IGNORECASE)
YEARS_AGO = re.compile(r"(\d+)\s*년\s*전", re.IGNORECASE)
MONTH_DAY = re.compile(r"(\d{1,2})\s*월\s*(\d{1,2})\s*일", re.IGNORECASE)

# 의도 분류기에서도 쓰는 날짜 패턴 (우선순위 순)
DATE_PATTERNS: Tuple[Pattern[str], ...] = (
    TODAY,
    YESTERDAY,
    DAY_BEFORE_YESTERDAY,
    DAYS_AGO,
    THIS_WEEK,
    LAST_WEEK,
    WEEKS_AGO,
    THIS_MONTH,
    LAST_MONTH,
    MONTHS_AGO,
    THIS_YEAR,
    LAST_YEAR,
    YEARS_AGO,
    MONTH_DAY,
)


def matches_date_expression(text: str) -> bool:
    return any(pattern.search(text) for pattern in DATE_PATTERNS)


def _start_of_day(value: datetime) -> datetime:
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def _end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), _END_OF_DAY, tzinfo=value.tzinfo)


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _month_span(now: datetime, year: int, month: int) -> Tuple[datetime, datetime]:
    start = now.replace(
        year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0
    )
    next_year, next_month = _shift_month(year, month, 1)
    end = start.replace(year=next_year, month=next_month) - timedelta(microseconds=1)
    return start, end


def _year_span(now: datetime, year: int) -> Tuple[datetime, datetime]:
    start = now.replace(
        year=year, month=1, day=1, hour=0, minute=0, second=0, microsecond=0
    )
    end = _end_of_day(start.replace(month=12, day=31))
    return start, end


class DateExpressionResolver:
    """한국어 날짜 표현 → DateRange"""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or now_local

    def now(self) -> datetime:
        return ensure_aware(self._clock())

    def resolve(self, text: str) -> Optional[DateRange]:
        """
        문장 안의 날짜 표현을 범위로 변환

        위에서부터 처음 일치하는 표현 하나만 사용하며,
        일치하는 표현이 없으면 None 을 반환합니다.
        """
        now = self.now()
        today = _start_of_day(now)

        for resolver in self._resolvers():
            try:
                date_range = resolver(text, now, today)
            except (ValueError, OverflowError):
                # 표현은 일치했지만 N 이 달력 범위를 벗어남
                logger.debug(f"📅 날짜 범위 계산 불가: {text!r}")
                return None
            if date_range is not None:
                return date_range
        return None

    def _resolvers(self) -> List[Callable[[str, datetime, datetime], Optional[DateRange]]]:
        return [
            self._today,
            self._yesterday,
            self._day_before_yesterday,
            self._days_ago,
            self._this_week,
            self._last_week,
            self._weeks_ago,
            self._this_month,
            self._last_month,
            self._months_ago,
            self._this_year,
            self._last_year,
            self._years_ago,
            self._month_day,
        ]

    # ── 일 단위 ───────────────────────────────────────────────────────────────

    @staticmethod
    def _today(text, now, today):
        if TODAY.search(text):
            return DateRange(start=today, end=now, label="오늘")
        return None

    @staticmethod
    def _yesterday(text, now, today):
        if YESTERDAY.search(text):
            day = today - timedelta(days=1)
            return DateRange(start=day, end=_end_of_day(day), label="어제")
        return None

    @staticmethod
    def _day_before_yesterday(text, now, today):
        if DAY_BEFORE_YESTERDAY.search(text):
            day = today - timedelta(days=2)
            return DateRange(start=day, end=_end_of_day(day), label="그제")
        return None

    @staticmethod
    def _days_ago(text, now, today):
        match = DAYS_AGO.search(text)
        if not match:
            return None
        days = int(match.group(1))
        day = today - timedelta(days=days)
        return DateRange(start=day, end=_end_of_day(day), label=f"{days}일 전")

    # ── 주 단위 (월요일 시작) ─────────────────────────────────────────────────

    @staticmethod
    def _this_week(text, now, today):
        if THIS_WEEK.search(text):
            monday = today - timedelta(days=today.weekday())
            return DateRange(start=monday, end=now, label="이번 주")
        return None

    @staticmethod
    def _last_week(text, now, today):
        if LAST_WEEK.search(text):
            monday = today - timedelta(days=today.weekday() + 7)
            sunday = monday + timedelta(days=6)
            return DateRange(start=monday, end=_end_of_day(sunday), label="지난주")
        return None

    @staticmethod
    def _weeks_ago(text, now, today):
        match = WEEKS_AGO.search(text)
        if not match:
            return None
        weeks = int(match.group(1))
        monday = today - timedelta(days=today.weekday() + 7 * weeks)
        sunday = monday + timedelta(days=6)
        return DateRange(start=monday, end=_end_of_day(sunday), label=f"{weeks}주 전")

    # ── 월 단위 ───────────────────────────────────────────────────────────────

    @staticmethod
    def _this_month(text, now, today):
        if THIS_MONTH.search(text):
            return DateRange(start=today.replace(day=1), end=now, label="이번 달")
        return None

    @staticmethod
    def _last_month(text, now, today):
        if LAST_MONTH.search(text):
            year, month = _shift_month(now.year, now.month, -1)
            start, end = _month_span(now, year, month)
            return DateRange(start=start, end=end, label="지난달")
        return None

    @staticmethod
    def _months_ago(text, now, today):
        match = MONTHS_AGO.search(text)
        if not match:
            return None
        months = int(match.group(1))
        year, month = _shift_month(now.year, now.month, -months)
        start, end = _month_span(now, year, month)
        return DateRange(start=start, end=end, label=f"{months}개월 전")

    # ── 연 단위 ───────────────────────────────────────────────────────────────

    @staticmethod
    def _this_year(text, now, today):
        if THIS_YEAR.search(text):
            start = today.replace(month=1, day=1)
            return DateRange(start=start, end=now, label="올해")
        return None

    @staticmethod
    def _last_year(text, now, today):
        if LAST_YEAR.search(text):
            start, end = _year_span(now, now.year - 1)
            return DateRange(start=start, end=end, label="작년")
        return None

    @staticmethod
    def _years_ago(text, now, today):
        match = YEARS_AGO.search(text)
        if not match:
            return None
        years = int(match.group(1))
        start, end = _year_span(now, now.year - years)
        return DateRange(start=start, end=end, label=f"{years}년 전")

    # ── 특정 날짜 (M월 D일) ───────────────────────────────────────────────────

    @staticmethod
    def _month_day(text, now, today):
        match = MONTH_DAY.search(text)
        if not match:
            return None
        month, day = int(match.group(1)), int(match.group(2))
        # 연도가 없으므로 올해 날짜가 없거나 미래면 작년으로 해석
        for year in (today.year, today.year - 1):
            try:
                start = today.replace(year=year, month=month, day=day)
            except ValueError:
                continue
            if start <= now:
                return DateRange(
                    start=start, end=_end_of_day(start), label=f"{month}월 {day}일"
                )
        return None
