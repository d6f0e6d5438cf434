"""Upload 응답 스키마입니다."""

from pydantic import BaseModel


class UploadedFileOut(BaseModel):
    filename: str
    url: str
    size: int
