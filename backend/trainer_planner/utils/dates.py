"""날짜/시간 계산과 청구서 번호 생성을 위한 순수 함수 모음입니다."""

from __future__ import annotations

import re
from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple

from trainer_planner.config import settings

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")
_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

MONTH_NAMES_DE = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]
WEEKDAYS_DE = ["Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"]


class InvalidDurationError(ValueError):
    """시작/종료 시각으로 유효한 시간 길이를 만들 수 없을 때 발생합니다."""


def parse_time_minutes(value: str) -> int:
    match = _TIME_RE.match(str(value or "").strip())
    if not match:
        raise InvalidDurationError(f"시간 형식이 올바르지 않습니다: {value!r} (HH:MM)")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidDurationError(f"시간 범위를 벗어났습니다: {value!r}")
    return hours * 60 + minutes


def duration_minutes(start: str, end: str) -> int:
    minutes = parse_time_minutes(end) - parse_time_minutes(start)
    if minutes <= 0:
        # 자정을 넘기는 세션은 지원하지 않는다.
        raise InvalidDurationError(f"종료 시각({end})은 시작 시각({start})보다 늦어야 합니다.")
    return minutes


def duration_hours(start: str, end: str) -> float:
    return duration_minutes(start, end) / 60


def format_time(value: str) -> str:
    return str(value or "")[:5]


def add_minutes(value: str, minutes: int) -> str:
    total = parse_time_minutes(value) + minutes
    if total >= 24 * 60:
        raise InvalidDurationError(f"{value} + {minutes}분은 자정을 넘습니다.")
    return f"{total // 60:02d}:{total % 60:02d}"


def week_dates(anchor: date) -> List[date]:
    """anchor가 속한 주의 월요일~일요일 날짜 7개를 반환합니다."""
    if isinstance(anchor, datetime):
        anchor = anchor.date()
    # date.weekday()는 월요일=0, 일요일=6 이므로 일요일은 6일 전 월요일로 이동한다.
    monday = anchor - timedelta(days=anchor.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def parse_month(key: str) -> Tuple[int, int]:
    match = _MONTH_RE.match(str(key or "").strip())
    if not match:
        raise ValueError(f"월 형식이 올바르지 않습니다: {key!r} (YYYY-MM)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"월 범위를 벗어났습니다: {key!r}")
    return year, month


def month_bounds(key: str) -> Tuple[date, date]:
    year, month = parse_month(key)
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def quarter_of(key: str) -> int:
    _year, month = parse_month(key)
    return (month - 1) // 3 + 1


def invoice_number(now: Optional[datetime] = None, prefix: Optional[str] = None) -> str:
    """초 단위 타임스탬프 기반 청구서 번호를 만듭니다.

    같은 초에 여러 번 호출하면 같은 번호가 나올 수 있습니다. 고유성이 필요하면
    호출 측에서 트레이너 단위로 직렬화해야 합니다.
    """
    now = now or datetime.now()
    prefix = settings.INVOICE_NUMBER_PREFIX if prefix is None else prefix
    return f"{prefix}-{now:%Y%m%d}-{now:%H%M%S}"


def format_date_german(value: date) -> str:
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def format_month_german(key: str) -> str:
    year, month = parse_month(key)
    return f"{MONTH_NAMES_DE[month - 1]} {year}"
