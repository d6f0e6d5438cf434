"""서비스 레이어 패키지 초기화 모듈입니다."""

from homework_board.services import (
    approved_user_service,
    auth_service,
    post_service,
    review_service,
    stats_service,
    user_service,
    verification_service,
)
