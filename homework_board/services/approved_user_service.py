"""Approved User Service 도메인 서비스 레이어입니다. 사전 승인 명단(이름+전화번호)의 조회/등록/일괄 검증을 담당합니다."""

import logging
from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homework_board.config import settings
from homework_board.exceptions import Duplicate, InvalidFormat, NotFound, StoreError
from homework_board.models.approved_user import ApprovedUser
from homework_board.schemas.approved_user import (
    ApprovedUserCreate,
    ApprovedUserUpdate,
    BulkApprovedUserRow,
    BulkInsertResult,
)
from homework_board.utils.phone import digits_only, format_phone, normalize_name, normalize_phone

logger = logging.getLogger(__name__)

NAME_REQUIRED = "이름을 입력해주세요"
PHONE_REQUIRED = "전화번호를 입력해주세요"
ALREADY_REGISTERED = "이미 등록된 사용자입니다"
HEADER_KEYWORDS = ("이름", "name")
VERIFIED_FILTERS = {"all", "true", "false"}


def _get_or_404(db: Session, approved_user_id: int) -> ApprovedUser:
    row = db.query(ApprovedUser).filter(ApprovedUser.id == approved_user_id).first()
    if not row:
        raise NotFound("승인 사용자를 찾을 수 없습니다.")
    return row


def _require_name(raw: str | None) -> str:
    name = normalize_name(raw)
    if not name:
        raise InvalidFormat(NAME_REQUIRED)
    return name


def _require_phone(raw: str | None) -> str:
    if not str(raw or "").strip():
        raise InvalidFormat(PHONE_REQUIRED)
    return normalize_phone(raw)


def _find_duplicate(db: Session, name: str, phone: str, exclude_id: int | None = None) -> ApprovedUser | None:
    query = db.query(ApprovedUser).filter(ApprovedUser.name == name, ApprovedUser.phone == phone)
    if exclude_id is not None:
        query = query.filter(ApprovedUser.id != exclude_id)
    return query.first()


def _commit(db: Session, action: str):
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("[approved_users] %s failed: %s", action, exc)
        raise StoreError(f"승인 사용자 {action} 중 저장소 오류가 발생했습니다.") from exc


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def to_list_item(row: ApprovedUser) -> dict:
    return {
        "id": row.id,
        "name": row.name,
        "phone": row.phone,
        "phone_display": format_phone(row.phone),
        "is_verified": bool(row.is_verified),
        "user_id": row.user_id,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }


def list_approved_users(
    db: Session,
    search: str | None = None,
    is_verified: str = "all",
    page: int = 0,
    page_size: int | None = None,
) -> dict:
    if is_verified not in VERIFIED_FILTERS:
        raise InvalidFormat("인증 상태 필터는 all, true, false 중 하나여야 합니다.")
    size = page_size or settings.APPROVED_USER_PAGE_SIZE
    page = max(0, int(page))

    query = db.query(ApprovedUser)
    keyword = (search or "").strip()
    if keyword:
        like = f"%{_escape_like(keyword)}%"
        conditions = [
            ApprovedUser.name.ilike(like, escape="\\"),
            ApprovedUser.phone.ilike(like, escape="\\"),
        ]
        # "010-1234" 처럼 하이픈이 섞인 검색어도 숫자만 저장된 전화번호와 맞춘다.
        keyword_digits = digits_only(keyword)
        if keyword_digits and keyword_digits != keyword:
            conditions.append(ApprovedUser.phone.ilike(f"%{keyword_digits}%"))
        query = query.filter(or_(*conditions))
    if is_verified == "true":
        query = query.filter(ApprovedUser.is_verified == True)  # noqa: E712
    elif is_verified == "false":
        query = query.filter(ApprovedUser.is_verified == False)  # noqa: E712

    total = query.count()
    rows = (
        query.order_by(ApprovedUser.created_at.desc(), ApprovedUser.id.desc())
        .offset(page * size)
        .limit(size)
        .all()
    )
    return {
        "items": [to_list_item(row) for row in rows],
        "total": total,
        "page": page,
        "page_size": size,
    }


def create_approved_user(db: Session, data: ApprovedUserCreate) -> ApprovedUser:
    name = _require_name(data.name)
    phone = _require_phone(data.phone)
    if _find_duplicate(db, name, phone):
        raise Duplicate(f"{ALREADY_REGISTERED}. ({name}, {format_phone(phone)})")

    row = ApprovedUser(name=name, phone=phone, is_verified=False, user_id=None)
    db.add(row)
    _commit(db, "등록")
    db.refresh(row)
    logger.info("[approved_users] created id=%s", row.id)
    return row


def update_approved_user(db: Session, approved_user_id: int, data: ApprovedUserUpdate) -> ApprovedUser:
    row = _get_or_404(db, approved_user_id)
    payload = data.model_dump(exclude_unset=True)

    next_name = _require_name(payload["name"]) if "name" in payload else row.name
    next_phone = _require_phone(payload["phone"]) if "phone" in payload else row.phone
    # 수정 결과가 다른 승인 사용자와 겹치지 않도록 등록과 같은 중복 검사를 한다.
    if _find_duplicate(db, next_name, next_phone, exclude_id=row.id):
        raise Duplicate(f"{ALREADY_REGISTERED}. ({next_name}, {format_phone(next_phone)})")

    row.name = next_name
    row.phone = next_phone
    _commit(db, "수정")
    db.refresh(row)
    return row


def delete_approved_user(db: Session, approved_user_id: int) -> dict:
    row = _get_or_404(db, approved_user_id)
    was_verified = bool(row.is_verified)
    unlinked_user_id = row.user_id
    db.delete(row)
    _commit(db, "삭제")
    if unlinked_user_id:
        # 연결된 사용자 계정은 유지되고 승인 목록과의 연결만 끊긴다.
        logger.info("[approved_users] deleted id=%s, unlinked user=%s", approved_user_id, unlinked_user_id)
    else:
        logger.info("[approved_users] deleted id=%s", approved_user_id)
    return {"id": approved_user_id, "was_verified": was_verified, "unlinked_user_id": unlinked_user_id}


def get_stats(db: Session) -> dict:
    total = db.query(func.count(ApprovedUser.id)).scalar() or 0
    verified = (
        db.query(func.count(ApprovedUser.id))
        .filter(ApprovedUser.is_verified == True)  # noqa: E712
        .scalar()
        or 0
    )
    return {"total": int(total), "verified": int(verified), "unverified": int(total) - int(verified)}


def _is_blank_row(row: BulkApprovedUserRow) -> bool:
    return not str(row.name or "").strip() and not str(row.phone or "").strip()


def _existing_pairs(db: Session, phones: Iterable[str]) -> set[tuple[str, str]]:
    phone_list = sorted(set(phones))
    if not phone_list:
        return set()
    rows = (
        db.query(ApprovedUser.name, ApprovedUser.phone)
        .filter(ApprovedUser.phone.in_(phone_list))
        .all()
    )
    return {(name, phone) for name, phone in rows}


def validate_bulk_rows(db: Session, rows: list[BulkApprovedUserRow]) -> list[dict]:
    """행마다 독립적으로 검증한다. 같은 배치 안에서는 먼저 나온 행이 유효하고 뒤의 같은 행이 중복 처리된다.

    완전히 비어 있는 행은 결과에서 제외하되, 행 번호는 입력 순서(1부터)를 그대로 쓴다.
    """
    candidates: list[dict] = []
    for index, row in enumerate(rows, start=1):
        if _is_blank_row(row):
            continue
        name = normalize_name(row.name)
        raw_phone = str(row.phone or "").strip()
        item = {"row": index, "name": name, "phone": raw_phone, "normalized_phone": None, "error": None}
        if not name:
            item["error"] = NAME_REQUIRED
        else:
            try:
                item["normalized_phone"] = _require_phone(raw_phone)
            except InvalidFormat as exc:
                item["error"] = exc.detail
        candidates.append(item)

    existing = _existing_pairs(db, [c["normalized_phone"] for c in candidates if c["normalized_phone"]])
    seen: dict[tuple[str, str], int] = {}
    for item in candidates:
        if item["error"]:
            continue
        key = (item["name"], item["normalized_phone"])
        if key in existing:
            item["error"] = ALREADY_REGISTERED
        elif key in seen:
            item["error"] = f"중복 ({seen[key]}번째 행과 동일)"
        seen.setdefault(key, item["row"])
    return candidates


def summarize_validation(results: list[dict]) -> dict:
    invalid = sum(1 for item in results if item["error"])
    return {"rows": results, "valid": len(results) - invalid, "invalid": invalid}


def bulk_insert_approved_users(db: Session, rows: list[BulkApprovedUserRow]) -> BulkInsertResult:
    results = validate_bulk_rows(db, rows)
    errors = [f"{item['row']}행: {item['error']}" for item in results if item["error"]]
    valid = [item for item in results if not item["error"]]

    if valid:
        db.add_all(
            [
                ApprovedUser(name=item["name"], phone=item["normalized_phone"], is_verified=False)
                for item in valid
            ]
        )
        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("[approved_users] bulk insert failed: %s", exc)
            return BulkInsertResult(
                success=0,
                failed=len(results),
                errors=[*errors, f"일괄 등록 실패: {exc.__class__.__name__}: {exc}"],
            )

    logger.info("[approved_users] bulk insert success=%s failed=%s", len(valid), len(errors))
    return BulkInsertResult(success=len(valid), failed=len(errors), errors=errors)


def parse_pasted_rows(text: str) -> list[BulkApprovedUserRow]:
    """스프레드시트에서 복사한 탭 구분 텍스트(이름, 전화번호)를 행 목록으로 바꾼다."""
    parsed: list[BulkApprovedUserRow] = []
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        delimiter = "\t" if "\t" in line else ","
        cells = [cell.strip() for cell in line.split(delimiter)]
        name = cells[0] if cells else ""
        phone = cells[1] if len(cells) > 1 else ""
        parsed.append(BulkApprovedUserRow(name=name, phone=phone))

    if parsed and any(keyword in parsed[0].name.lower() for keyword in HEADER_KEYWORDS):
        parsed.pop(0)
    return parsed
