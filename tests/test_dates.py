"""
날짜 표현 해석기 테스트

기준 시각: 2024-05-15 (수) 14:30 KST
"""

from datetime import datetime, time, timedelta

import pytest

from conftest import KST, NOW
from tray_assistant.chat.dates import DateExpressionResolver, matches_date_expression


def day(year, month, date, end=False) -> datetime:
    if end:
        return datetime.combine(datetime(year, month, date).date(), time.max, tzinfo=KST)
    return datetime(year, month, date, tzinfo=KST)


@pytest.fixture
def resolver(clock) -> DateExpressionResolver:
    return DateExpressionResolver(clock)


class TestDayExpressions:
    def test_today_runs_until_now(self, resolver):
        result = resolver.resolve("오늘 올린 문서")
        assert result.label == "오늘"
        assert result.start == day(2024, 5, 15)
        assert result.end == NOW

    def test_yesterday_is_full_day(self, resolver):
        result = resolver.resolve("어제 업로드한 파일")
        assert result.label == "어제"
        assert result.start == day(2024, 5, 14)
        assert result.end == day(2024, 5, 14, end=True)

    @pytest.mark.parametrize("phrase", ["그제", "그저께", "엊그제"])
    def test_day_before_yesterday(self, resolver, phrase):
        result = resolver.resolve(f"{phrase} 등록된 문서")
        assert result.label == "그제"
        assert result.start == day(2024, 5, 13)
        assert result.end == day(2024, 5, 13, end=True)

    def test_days_ago(self, resolver):
        result = resolver.resolve("3일 전에 올린 문서")
        assert result.label == "3일 전"
        assert result.start == day(2024, 5, 12)
        assert result.end == day(2024, 5, 12, end=True)


class TestWeekExpressions:
    def test_this_week_starts_monday(self, resolver):
        result = resolver.resolve("이번주 문서")
        assert result.label == "이번 주"
        assert result.start == day(2024, 5, 13)
        assert result.start.weekday() == 0
        assert result.end == NOW

    def test_last_week_is_monday_to_sunday(self, resolver):
        result = resolver.resolve("지난 주에 올린 문서")
        assert result.label == "지난주"
        assert result.start == day(2024, 5, 6)
        assert result.end == day(2024, 5, 12, end=True)

    def test_weeks_ago(self, resolver):
        result = resolver.resolve("2주 전 문서")
        assert result.label == "2주 전"
        assert result.start == day(2024, 4, 29)
        assert result.end == day(2024, 5, 5, end=True)


class TestMonthAndYearExpressions:
    def test_this_month(self, resolver):
        result = resolver.resolve("이번 달 업로드")
        assert result.start == day(2024, 5, 1)
        assert result.end == NOW

    def test_last_month_is_full_month(self, resolver):
        result = resolver.resolve("지난달 문서")
        assert result.label == "지난달"
        assert result.start == day(2024, 4, 1)
        assert result.end == day(2024, 4, 30, end=True)

    def test_months_ago_handles_leap_february(self, resolver):
        result = resolver.resolve("3개월 전 문서")
        assert result.label == "3개월 전"
        assert result.start == day(2024, 2, 1)
        assert result.end == day(2024, 2, 29, end=True)

    def test_months_ago_crosses_year(self, resolver):
        result = resolver.resolve("6달 전 문서")
        assert result.start == day(2023, 11, 1)
        assert result.end == day(2023, 11, 30, end=True)

    def test_this_year(self, resolver):
        result = resolver.resolve("올해 등록된 문서")
        assert result.start == day(2024, 1, 1)
        assert result.end == NOW

    def test_last_year(self, resolver):
        result = resolver.resolve("작년 문서")
        assert result.label == "작년"
        assert result.start == day(2023, 1, 1)
        assert result.end == day(2023, 12, 31, end=True)

    def test_years_ago(self, resolver):
        result = resolver.resolve("2년 전 문서")
        assert result.start == day(2022, 1, 1)
        assert result.end == day(2022, 12, 31, end=True)


class TestMonthDay:
    def test_past_date_in_current_year(self, resolver):
        result = resolver.resolve("5월 3일에 올린 문서")
        assert result.label == "5월 3일"
        assert result.start == day(2024, 5, 3)
        assert result.end == day(2024, 5, 3, end=True)

    def test_future_date_rolls_back_one_year(self, resolver):
        result = resolver.resolve("12월 25일 문서")
        assert result.start == day(2023, 12, 25)

    def test_invalid_calendar_date_returns_none(self, resolver):
        assert resolver.resolve("2월 30일 문서") is None

    def test_leap_day_rolls_back_to_last_leap_year(self):
        resolver = DateExpressionResolver(lambda: datetime(2025, 1, 10, 9, 0, tzinfo=KST))
        result = resolver.resolve("2월 29일 문서")
        assert result.label == "2월 29일"
        assert result.start == day(2024, 2, 29)
        assert result.end == day(2024, 2, 29, end=True)

    def test_leap_day_without_past_leap_year_returns_none(self):
        resolver = DateExpressionResolver(lambda: datetime(2026, 3, 1, 9, 0, tzinfo=KST))
        assert resolver.resolve("2월 29일 문서") is None


class TestResolverProperties:
    def test_no_expression_returns_none(self, resolver):
        assert resolver.resolve("급여 명세서는 어디에 있어?") is None

    def test_first_rule_wins(self, resolver):
        assert resolver.resolve("오늘이나 어제 올린 문서").label == "오늘"

    @pytest.mark.parametrize(
        "phrase",
        [
            "3000년 전 문서",
            "99999999999개월 전 문서",
            "999999999일 전 문서",
            "99999999주 전 문서",
        ],
    )
    def test_out_of_range_amount_returns_none(self, resolver, phrase):
        assert resolver.resolve(phrase) is None

    @pytest.mark.parametrize(
        "phrase",
        [
            "오늘",
            "어제",
            "그제",
            "10일 전",
            "이번 주",
            "지난주",
            "3주 전",
            "이번 달",
            "지난달",
            "1개월 전",
            "올해",
            "작년",
            "5년 전",
            "1월 1일",
        ],
    )
    def test_end_is_not_before_start(self, resolver, phrase):
        result = resolver.resolve(phrase)
        assert result is not None
        assert result.end >= result.start
        assert result.end - result.start < timedelta(days=367)

    def test_naive_clock_uses_default_timezone(self):
        resolver = DateExpressionResolver(lambda: datetime(2024, 5, 15, 14, 30))
        result = resolver.resolve("오늘")
        assert result.start.utcoffset() == timedelta(hours=9)

    def test_matches_date_expression(self):
        assert matches_date_expression("3일 전")
        assert matches_date_expression("5월 3일")
        assert not matches_date_expression("급여 명세서")
