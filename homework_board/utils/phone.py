"""전화번호 정규화/표시 형식 변환과 본인 확인 입력 정리 헬퍼입니다.

저장과 비교는 항상 숫자만 남긴 정규화 값으로 하고, 하이픈 형식은 화면 표시에만 씁니다.
"""

import re

from homework_board.exceptions import InvalidFormat

INVALID_PHONE_MESSAGE = "올바른 전화번호 형식이 아닙니다. 10-11자리 숫자를 입력해주세요."
KOREAN_MOBILE_PREFIXES = ("010", "011", "016", "017", "018", "019")

_NON_DIGIT = re.compile(r"\D")


def digits_only(value: str | None) -> str:
    return _NON_DIGIT.sub("", str(value or ""))


def normalize_phone(raw: str | None) -> str:
    """숫자 이외 문자를 제거하고 10~11자리인지 검증한다."""
    digits = digits_only(raw)
    if len(digits) < 10 or len(digits) > 11:
        raise InvalidFormat(INVALID_PHONE_MESSAGE)
    return digits


def is_valid_phone(raw: str | None) -> bool:
    try:
        normalize_phone(raw)
    except InvalidFormat:
        return False
    return True


def format_phone(phone: str | None) -> str:
    digits = digits_only(phone)
    if len(digits) == 10:
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    return phone or ""


def is_korean_mobile(phone: str | None) -> bool:
    return digits_only(phone).startswith(KOREAN_MOBILE_PREFIXES)


def normalize_name(raw: str | None) -> str:
    return str(raw or "").strip()
