"""Uploads 기능 API 라우터입니다. 게시글/프로필 이미지를 업로드 디렉터리에 저장하고 URL을 돌려줍니다."""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from homework_board.exceptions import InvalidFormat
from homework_board.middleware.auth_middleware import get_current_user
from homework_board.models.user import User
from homework_board.schemas.upload import UploadedFileOut
from homework_board.utils.helpers import save_upload

router = APIRouter(prefix="/api/uploads", tags=["uploads"])

ALLOWED_SCOPES = {"post", "profile"}


@router.post("/images", response_model=UploadedFileOut)
async def upload_image(
    file: UploadFile = File(...),
    scope: str = Form("post"),
    current_user: User = Depends(get_current_user),
):
    if scope not in ALLOWED_SCOPES:
        raise InvalidFormat("유효하지 않은 업로드 scope 입니다.")
    return await save_upload(file, subfolder=f"{scope}/{current_user.id}")
