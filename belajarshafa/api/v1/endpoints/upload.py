# belajarshafa/api/v1/endpoints/upload.py
from fastapi import APIRouter, Depends, File, UploadFile

from belajarshafa.core.config import settings
from belajarshafa.core.security import get_current_manager
from belajarshafa.models.user import User
from belajarshafa.schemas.upload import UploadResponse
from belajarshafa.services import upload_service
from belajarshafa.services.s3_client import get_s3_client

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/document", response_model=UploadResponse)
def upload_document(
    file: UploadFile = File(...),
    current_manager: User = Depends(get_current_manager),
    s3_client=Depends(get_s3_client),
):
    """Course material files (pdf, office documents) up to 10MB."""
    # one byte past the cap is enough to reject the upload
    data = file.file.read(settings.MAX_DOCUMENT_SIZE + 1)
    result = upload_service.upload_document(s3_client, filename=file.filename, data=data)
    return {"success": True, "data": result}


@router.post("/image", response_model=UploadResponse)
def upload_image(
    file: UploadFile = File(...),
    current_manager: User = Depends(get_current_manager),
    s3_client=Depends(get_s3_client),
):
    """Course thumbnails up to 5MB."""
    data = file.file.read(settings.MAX_IMAGE_SIZE + 1)
    result = upload_service.upload_image(s3_client, filename=file.filename, data=data)
    return {"success": True, "data": result}
