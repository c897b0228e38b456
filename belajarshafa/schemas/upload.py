# belajarshafa/schemas/upload.py
from pydantic import BaseModel


class UploadResult(BaseModel):
    url: str
    file_name: str
    file_size: int
    key: str


class UploadResponse(BaseModel):
    success: bool = True
    data: UploadResult
