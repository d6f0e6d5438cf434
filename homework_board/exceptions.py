"""도메인 예외 정의입니다.

모든 예외는 FastAPI ``HTTPException``을 상속하므로 서비스 레이어에서 그대로 raise하면
라우터를 거쳐 HTTP 응답으로 변환됩니다. ``code``는 클라이언트가 분기할 때 쓰는 고정 식별자이고,
``detail``은 사용자에게 그대로 보여줄 수 있는 한국어 메시지입니다.
"""

from fastapi import HTTPException, status


class HomeworkBoardError(HTTPException):
    """모든 도메인 예외의 기본 클래스"""

    code = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "요청을 처리하지 못했습니다."

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class InvalidFormat(HomeworkBoardError):
    code = "invalid_format"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "입력 형식이 올바르지 않습니다."


class Duplicate(HomeworkBoardError):
    code = "duplicate"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "이미 등록된 사용자입니다."


class NotFound(HomeworkBoardError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "대상을 찾을 수 없습니다."


class AlreadyVerified(HomeworkBoardError):
    code = "already_verified"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "이미 인증이 완료된 사용자입니다."


class Unauthorized(HomeworkBoardError):
    code = "unauthorized"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "권한이 없습니다."


class UserCreationFailed(HomeworkBoardError):
    code = "user_creation_failed"
    default_detail = "사용자 생성에 실패했습니다."


class RegistrationFailed(HomeworkBoardError):
    """승인 목록 연결 단계 실패. 보상 삭제까지 실패하면 두 메시지를 함께 담는다."""

    code = "registration_failed"
    default_detail = "사용자 등록에 실패했습니다."

    def __init__(self, detail: str | None = None, compensation_error: str | None = None):
        self.compensation_error = compensation_error
        message = detail or self.default_detail
        if compensation_error:
            message = f"{message} (생성된 사용자 정리 실패: {compensation_error})"
        super().__init__(message)


class StoreError(HomeworkBoardError):
    code = "store_error"
    default_detail = "데이터 저장소 오류가 발생했습니다."
