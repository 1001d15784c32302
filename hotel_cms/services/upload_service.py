"""Image uploads into a website's public folder."""

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List

from fastapi import UploadFile
from PIL import UnidentifiedImageError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from hotel_cms.core.exceptions import ValidationError
from hotel_cms.services import image_processor
from hotel_cms.services.file_storage import FileStorage
from hotel_cms.services.website_service import WebsiteService

logger = logging.getLogger(__name__)

OPTIMIZE_QUALITY = 85


class UploadService:
    """
    Validates, stores and post-processes uploaded images.

    Files are written through ``FileStorage`` and then re-encoded with
    ``image_processor``; anything Pillow cannot read is rejected and removed.
    """

    def __init__(self, db_session: AsyncSession, file_storage: FileStorage):
        self.files = file_storage
        self.websites = WebsiteService(db_session, file_storage)

    async def _read(self, upload: UploadFile) -> bytes:
        data = await upload.read()
        error = self.files.validate_upload(upload.content_type, len(data))
        if error:
            raise ValidationError(error)
        return data

    def _check_count(self, uploads: List[UploadFile]) -> None:
        if not uploads:
            raise ValidationError("No files uploaded")
        if len(uploads) > self.files.max_files_per_request:
            raise ValidationError(f"Maximum {self.files.max_files_per_request} files per request")

    async def _store(self, website_name: str, upload: UploadFile, data: bytes) -> Path:
        url = await self.files.save(data, website_name, upload.filename or "")
        return self.files.resolve(url)

    async def _optimize(self, path: Path) -> Path:
        try:
            return await run_in_threadpool(
                image_processor.optimize, path, quality=OPTIMIZE_QUALITY, fmt="webp"
            )
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Rejected unreadable image {path.name}: {e}")
            await self.files.delete(self.files.url_for(path))
            raise ValidationError("Invalid image file")

    async def upload_image(self, website_id: uuid.UUID, upload: UploadFile) -> Dict[str, Any]:
        """Store one image, converted to webp."""
        website = await self.websites.get_website(website_id)
        data = await self._read(upload)

        path = await self._optimize(await self._store(website.name, upload, data))
        url = self.files.url_for(path)
        logger.info(f"Uploaded image {url} for website {website.id}")
        return {
            "url": url,
            "filename": path.name,
            "originalName": upload.filename,
            "size": len(data),
        }

    async def upload_images(self, website_id: uuid.UUID, uploads: List[UploadFile]) -> List[Dict[str, Any]]:
        self._check_count(uploads)
        return [await self.upload_image(website_id, upload) for upload in uploads]

    async def upload_gallery(self, website_id: uuid.UUID, uploads: List[UploadFile]) -> List[Dict[str, Any]]:
        """Store images together with their large, medium and thumbnail variants."""
        self._check_count(uploads)
        website = await self.websites.get_website(website_id)

        results = []
        for upload in uploads:
            data = await self._read(upload)
            path = await self._store(website.name, upload, data)
            try:
                variants = await run_in_threadpool(image_processor.resize_for_gallery, path)
            except (UnidentifiedImageError, OSError) as e:
                logger.warning(f"Rejected unreadable gallery image {path.name}: {e}")
                await self.files.delete(self.files.url_for(path))
                raise ValidationError("Invalid image file")
            results.append({
                "originalName": upload.filename,
                **{name: self.files.url_for(variant) for name, variant in variants.items()},
            })
        return results

    async def delete_image(self, website_id: uuid.UUID, url: str) -> None:
        website = await self.websites.get_website(website_id)
        if not self.files.belongs_to(url, website.name):
            raise ValidationError("Image does not belong to this website")
        await self.files.delete(url)

    async def list_images(self, website_id: uuid.UUID) -> List[Dict[str, Any]]:
        website = await self.websites.get_website(website_id)
        return await self.files.list_website_images(website.name)
