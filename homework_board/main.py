"""FastAPI 애플리케이션 진입점. 로깅, 미들웨어, API 라우터, 업로드 파일 서빙을 등록합니다."""

import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from homework_board.config import settings
from homework_board.database import Base, engine
from homework_board.exceptions import HomeworkBoardError
import homework_board.models  # noqa: F401 - 모델 import로 metadata 등록
from homework_board.routers import (
    auth, approved_users, posts, comments, reviews, stats, users, uploads,
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="과제 인증 게시판",
    description="사전 승인 명단 인증 기반 주차별 과제 제출/평가 게시판",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HomeworkBoardError)
async def homework_board_error_handler(request: Request, exc: HomeworkBoardError):
    if exc.status_code >= 500:
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


# Register all routers
app.include_router(auth.router)
app.include_router(approved_users.router)
app.include_router(posts.router)
app.include_router(comments.router)
app.include_router(reviews.router)
app.include_router(stats.router)
app.include_router(users.router)
app.include_router(uploads.router)


@app.on_event("startup")
def ensure_schema():
    # 누락된 테이블을 자동 생성합니다.
    Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok", "service": "과제 인증 게시판"}


# Static file serving for uploads
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
