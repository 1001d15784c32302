"""Local file storage for website images.

Images live under ``<public_dir>/<sanitized-website-name>/`` and are referenced
from website documents by their URL path, ``/public/<folder>/<file>``.
"""

import logging
import re
import shutil
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from starlette.concurrency import run_in_threadpool

from hotel_cms.core.settings import Settings, get_settings

logger = logging.getLogger(__name__)

URL_PREFIX = "/public/"
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}


def sanitize_folder_name(name: str) -> str:
    """Lower-case, collapse anything non-alphanumeric into single dashes."""
    sanitized = re.sub(r"[^a-z0-9]", "-", (name or "").lower())
    sanitized = re.sub(r"-+", "-", sanitized).strip("-")
    return sanitized or "default"


class FileStorage:
    """
    Stores uploaded images on the local filesystem.

    All blocking file-system calls run in the threadpool. Deletions are
    best-effort: failures are logged and never raised to the caller.
    """

    def __init__(
        self,
        public_dir: str,
        max_file_size: int,
        allowed_types: Iterable[str],
        max_files_per_request: int = 10,
    ):
        self.root = Path(public_dir).resolve()
        self.max_file_size = max_file_size
        self.allowed_types = list(allowed_types)
        self.max_files_per_request = max_files_per_request

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "FileStorage":
        settings = settings or get_settings()
        return cls(
            public_dir=settings.upload_public_dir,
            max_file_size=settings.max_file_size_bytes,
            allowed_types=settings.allowed_file_types,
            max_files_per_request=settings.max_files_per_request,
        )

    # Path helpers

    def folder_for(self, website_name: str) -> Path:
        return self.root / sanitize_folder_name(website_name)

    def url_prefix_for(self, website_name: str) -> str:
        return f"{URL_PREFIX}{sanitize_folder_name(website_name)}/"

    def url_for(self, path: Path) -> str:
        return URL_PREFIX + path.relative_to(self.root).as_posix()

    def resolve(self, url: str) -> Optional[Path]:
        """
        Map a stored ``/public/...`` path to a file under the storage root.

        Returns None for empty values, foreign URLs and anything that would
        escape the root.
        """
        if not url or not url.startswith(URL_PREFIX):
            return None
        candidate = (self.root / url[len(URL_PREFIX):]).resolve()
        if candidate == self.root or self.root not in candidate.parents:
            return None
        return candidate

    def belongs_to(self, url: str, website_name: str) -> bool:
        path = self.resolve(url)
        return path is not None and path.parent == self.folder_for(website_name).resolve()

    # Validation

    def validate_upload(self, content_type: Optional[str], size: int) -> Optional[str]:
        """Return an error message if the upload is not acceptable, else None."""
        if content_type not in self.allowed_types:
            return f"File type not allowed. Allowed types: {', '.join(self.allowed_types)}"
        if size > self.max_file_size:
            return f"File too large. Maximum size is {self.max_file_size // (1024 * 1024)}MB"
        return None

    # Writes

    def _save_sync(self, data: bytes, website_name: str, original_filename: str) -> str:
        folder = self.folder_for(website_name)
        folder.mkdir(parents=True, exist_ok=True)
        ext = Path(original_filename or "").suffix.lower() or ".jpg"
        target = folder / f"{uuid.uuid4()}{ext}"
        target.write_bytes(data)
        return self.url_for(target)

    async def save(self, data: bytes, website_name: str, original_filename: str) -> str:
        """Write bytes into the website's folder and return the stored URL path."""
        url = await run_in_threadpool(self._save_sync, data, website_name, original_filename)
        logger.info(f"Stored image {url}")
        return url

    # Deletes

    def _delete_sync(self, url: str) -> None:
        path = self.resolve(url)
        if path is None:
            return
        try:
            if path.is_file():
                path.unlink()
                logger.debug(f"Deleted image {url}")
        except OSError as e:
            logger.error(f"Failed to delete image file {url}: {e}")

    async def delete(self, url: Optional[str]) -> None:
        if not url:
            return
        await run_in_threadpool(self._delete_sync, url)

    async def delete_many(self, urls: Iterable[Optional[str]]) -> None:
        for url in urls or []:
            await self.delete(url)

    def _delete_folder_sync(self, website_name: str) -> None:
        folder = self.folder_for(website_name)
        try:
            if folder.exists():
                shutil.rmtree(folder)
                logger.info(f"Deleted website folder {folder}")
        except OSError as e:
            logger.error(f"Failed to delete website folder {folder}: {e}")

    async def delete_website_folder(self, website_name: str) -> None:
        await run_in_threadpool(self._delete_folder_sync, website_name)

    def _move_folder_sync(self, old_name: str, new_name: str) -> None:
        source = self.folder_for(old_name)
        target = self.folder_for(new_name)
        if source == target or not source.exists():
            return
        try:
            target.mkdir(parents=True, exist_ok=True)
            for item in source.iterdir():
                shutil.move(str(item), str(target / item.name))
            source.rmdir()
            logger.info(f"Moved website folder {source} to {target}")
        except OSError as e:
            logger.error(f"Failed to move website folder {source} to {target}: {e}")

    async def move_website_folder(self, old_name: str, new_name: str) -> None:
        """Move a website's images after a rename; best-effort like deletes."""
        await run_in_threadpool(self._move_folder_sync, old_name, new_name)

    # Listing

    def _list_sync(self, website_name: str) -> List[Dict[str, Any]]:
        folder = self.folder_for(website_name)
        if not folder.exists():
            return []

        images = []
        for item in folder.rglob("*"):
            if not item.is_file() or item.suffix.lower() not in IMAGE_EXTENSIONS:
                continue
            stat = item.stat()
            images.append({
                "filename": item.name,
                "path": self.url_for(item),
                "size": stat.st_size,
                "createdAt": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
                "_mtime": stat.st_mtime,
            })

        images.sort(key=lambda image: image["_mtime"], reverse=True)
        for image in images:
            del image["_mtime"]
        return images

    async def list_website_images(self, website_name: str) -> List[Dict[str, Any]]:
        """Images stored for a website, newest first."""
        return await run_in_threadpool(self._list_sync, website_name)


_file_storage: Optional[FileStorage] = None


def init_file_storage(settings: Optional[Settings] = None) -> FileStorage:
    """Build the process-wide storage from settings; called at startup."""
    global _file_storage
    _file_storage = FileStorage.from_settings(settings)
    return _file_storage


def get_file_storage() -> FileStorage:
    """Dependency returning the configured file storage."""
    if _file_storage is None:
        return init_file_storage()
    return _file_storage
