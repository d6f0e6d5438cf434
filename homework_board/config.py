"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./homework_board.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # 이 목록의 이메일로 처음 로그인하면 사전 승인 없이 관리자 계정이 생성된다.
    ADMIN_EMAILS: List[str] = []

    # Paging
    APPROVED_USER_PAGE_SIZE: int = 30
    POST_PAGE_SIZE: int = 100
    RECENT_POST_LIMIT: int = 10
    DAILY_STATS_DAYS: int = 30

    # File upload
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10 MB
    ALLOWED_IMAGE_EXTENSIONS: List[str] = ["jpg", "jpeg", "png", "gif", "webp"]
    UPLOAD_DIR: str = "uploads"

    def admin_emails(self) -> set[str]:
        return {str(email or "").strip().lower() for email in self.ADMIN_EMAILS if str(email or "").strip()}

    class Config:
        # 실행 cwd와 무관하게 프로젝트 루트의 .env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
