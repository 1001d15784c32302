"""Image upload endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_cms.core.database import get_db_session
from hotel_cms.middleware.tenant import require_website_access
from hotel_cms.schemas.base import api_response
from hotel_cms.services.file_storage import FileStorage, get_file_storage
from hotel_cms.services.upload_service import UploadService

router = APIRouter(
    prefix="/upload",
    tags=["Uploads"],
    dependencies=[Depends(require_website_access())],
)


def get_upload_service(
    db: AsyncSession = Depends(get_db_session),
    files: FileStorage = Depends(get_file_storage),
) -> UploadService:
    return UploadService(db, files)


@router.post("/image")
async def upload_image(
    website_id: UUID = Form(..., alias="websiteId"),
    image: UploadFile = File(...),
    service: UploadService = Depends(get_upload_service),
):
    result = await service.upload_image(website_id, image)
    return api_response(result, message="Image uploaded successfully")


@router.post("/multiple")
async def upload_multiple_images(
    website_id: UUID = Form(..., alias="websiteId"),
    images: List[UploadFile] = File(...),
    service: UploadService = Depends(get_upload_service),
):
    files = await service.upload_images(website_id, images)
    return api_response({"files": files}, message=f"{len(files)} images uploaded successfully")


@router.post("/gallery")
async def upload_gallery_images(
    website_id: UUID = Form(..., alias="websiteId"),
    images: List[UploadFile] = File(...),
    service: UploadService = Depends(get_upload_service),
):
    """Each image is stored with large, medium and thumbnail webp variants."""
    files = await service.upload_gallery(website_id, images)
    return api_response({"files": files}, message=f"{len(files)} gallery images uploaded successfully")


@router.delete("/{website_id}/image")
async def delete_image(
    website_id: UUID,
    path: str = Query(..., min_length=1, description="Stored /public/... path"),
    service: UploadService = Depends(get_upload_service),
):
    await service.delete_image(website_id, path)
    return api_response(message="Image deleted successfully")


@router.get("/list/{website_id}")
async def list_website_images(website_id: UUID, service: UploadService = Depends(get_upload_service)):
    images = await service.list_images(website_id)
    return api_response({"images": images}, count=len(images))
