"""사전 승인 명단을 CSV/TSV 파일에서 일괄 등록합니다.

사용 예:
    python scripts/import_approved_users.py approved.csv
    python scripts/import_approved_users.py approved.tsv --dry-run
"""
import argparse
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from homework_board.database import SessionLocal, engine, Base
import homework_board.models  # noqa: F401 - registers all models
from homework_board.services import approved_user_service


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="사전 승인 명단 일괄 등록")
    parser.add_argument("path", help="이름, 전화번호 두 컬럼으로 된 CSV 또는 탭 구분 파일")
    parser.add_argument("--dry-run", action="store_true", help="검증 결과만 출력하고 저장하지 않음")
    args = parser.parse_args(argv)

    with open(args.path, encoding="utf-8-sig") as f:
        rows = approved_user_service.parse_pasted_rows(f.read())

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.dry_run:
            summary = approved_user_service.summarize_validation(
                approved_user_service.validate_bulk_rows(db, rows)
            )
            for item in summary["rows"]:
                if item["error"]:
                    print(f"{item['row']}행: {item['error']}")
            print(f"valid={summary['valid']} invalid={summary['invalid']}")
            return 0 if summary["invalid"] == 0 else 1

        result = approved_user_service.bulk_insert_approved_users(db, rows)
        for error in result.errors:
            print(error)
        print(f"success={result.success} failed={result.failed}")
        return 0 if result.failed == 0 else 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
