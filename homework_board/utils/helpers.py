import os
import uuid
from fastapi import UploadFile
from homework_board.config import settings
from homework_board.exceptions import InvalidFormat


def file_extension(filename: str | None) -> str:
    name = filename or ""
    return name.rsplit(".", 1)[-1].lower() if "." in name else ""


def validate_image(file: UploadFile) -> None:
    ext = file_extension(file.filename)
    if ext not in settings.ALLOWED_IMAGE_EXTENSIONS:
        raise InvalidFormat(
            f"이미지 파일({', '.join(settings.ALLOWED_IMAGE_EXTENSIONS)})만 업로드 가능합니다."
        )


async def save_upload(file: UploadFile, subfolder: str = "") -> dict:
    validate_image(file)
    content = await file.read()
    if not content:
        raise InvalidFormat("빈 파일은 업로드할 수 없습니다.")
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise InvalidFormat(f"파일 크기는 {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB를 넘을 수 없습니다.")

    folder = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder, exist_ok=True)

    ext = file_extension(file.filename)
    filename = f"{uuid.uuid4().hex}.{ext}"
    path = os.path.join(folder, filename)

    with open(path, "wb") as f:
        f.write(content)

    return {
        "filename": file.filename,
        "url": f"/uploads/{subfolder}/{filename}".replace("\\", "/"),
        "size": len(content),
    }
