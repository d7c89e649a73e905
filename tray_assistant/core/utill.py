import re
from datetime import datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from inflection import camelize

from tray_assistant.core.config import settings

_WEEKDAYS_KO = ["월", "화", "수", "목", "금", "토", "일"]


def camel_to_snake_case(name: str) -> str:
    name = re.sub("([a-z0-9])([A-Z])", r"\1_\2", name)
    return name.lower()


def to_camel(string: str) -> str:
    return camelize(string, False)


def default_timezone() -> tzinfo:
    return ZoneInfo(settings.TIMEZONE)


def now_local() -> datetime:
    """설정된 시간대 기준 현재 시각"""
    return datetime.now(default_timezone())


def ensure_aware(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """시간대 정보가 없는 datetime 은 기본 시간대로 간주"""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz or default_timezone())
    return value


def format_date_ko(value: Optional[datetime]) -> str:
    """2024-05-03 (금) 형식"""
    if value is None:
        return "날짜 정보 없음"
    return f"{value:%Y-%m-%d} ({_WEEKDAYS_KO[value.weekday()]})"


def format_datetime_ko(value: Optional[datetime]) -> str:
    if value is None:
        return "기록 없음"
    return f"{value:%Y-%m-%d %H:%M}"
