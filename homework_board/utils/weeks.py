"""주차/분류 라벨 정의입니다. 내부에서는 닫힌 Enum으로 다루고 DB와 API 경계에서는 라벨 문자열을 씁니다."""

from enum import Enum


class Week(str, Enum):
    WEEK_1 = "1주차 과제"
    WEEK_2 = "2주차 과제"
    WEEK_3 = "3주차 과제"
    WEEK_4 = "4주차 과제"
    WEEK_5 = "5주차 과제"
    WEEK_6 = "6주차 과제"
    NOTICE = "공지"


HOMEWORK_WEEKS = (
    Week.WEEK_1,
    Week.WEEK_2,
    Week.WEEK_3,
    Week.WEEK_4,
    Week.WEEK_5,
    Week.WEEK_6,
)

ALL_LABELS = tuple(Week)


def short_label(week: Week) -> str:
    # 엑셀/CSV 컬럼명에서는 "1주차"처럼 줄여 쓴다.
    return week.value.replace(" 과제", "")


def is_homework_week(label: str | Week) -> bool:
    try:
        return Week(label) in HOMEWORK_WEEKS
    except ValueError:
        return False
