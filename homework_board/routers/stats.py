"""관리자 통계/리포트 API 라우터입니다."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import List

from homework_board.database import get_db
from homework_board.middleware.auth_middleware import require_roles
from homework_board.models.user import User
from homework_board.schemas.post import PostOut
from homework_board.schemas.stats import LabelCount, OverviewStats, UserWeeklyPostStatus
from homework_board.services import stats_service

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/overview", response_model=OverviewStats)
def overview(db: Session = Depends(get_db), _current_user: User = Depends(require_roles("admin"))):
    return stats_service.get_overview(db)


@router.get("/recent-posts", response_model=List[PostOut])
def recent_posts(
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return stats_service.get_recent_posts(db, limit=limit)


@router.get("/daily-posts", response_model=List[LabelCount])
def daily_posts(
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
    _current_user: User = Depends(require_roles("admin")),
):
    return stats_service.get_daily_post_counts(db, days=days)


@router.get("/weeks", response_model=List[LabelCount])
def week_counts(db: Session = Depends(get_db), _current_user: User = Depends(require_roles("admin"))):
    return stats_service.get_week_label_counts(db)


@router.get("/weekly-status", response_model=List[UserWeeklyPostStatus])
def weekly_status(db: Session = Depends(get_db), _current_user: User = Depends(require_roles("admin"))):
    return stats_service.get_user_weekly_post_status(db)


@router.get("/weekly-status/export.csv")
def export_weekly_status(db: Session = Depends(get_db), _current_user: User = Depends(require_roles("admin"))):
    csv_text = stats_service.export_weekly_status_csv(db)
    filename = f"weekly_status_{date.today().strftime('%Y%m%d')}.csv"
    return Response(
        content=csv_text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
