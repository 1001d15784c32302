"""Image transforms applied to uploads (Pillow)."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

PIL_FORMATS = {"jpeg": "JPEG", "png": "PNG", "webp": "WEBP"}

GALLERY_LARGE_WIDTH = 1920
GALLERY_MEDIUM_WIDTH = 800
GALLERY_THUMBNAIL_SIZE = 300


def _prepare(image: Image.Image, fmt: str) -> Image.Image:
    """Apply EXIF orientation and drop alpha for formats that cannot carry it."""
    image = ImageOps.exif_transpose(image)
    if fmt == "jpeg" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    elif image.mode == "P":
        image = image.convert("RGBA")
    return image


def _fit_inside(image: Image.Image, width: Optional[int], height: Optional[int]) -> Image.Image:
    """Shrink to fit inside the box without ever enlarging."""
    if not width and not height:
        return image
    box = (width or image.width, height or image.height)
    if image.width <= box[0] and image.height <= box[1]:
        return image
    image = image.copy()
    image.thumbnail(box, Image.Resampling.LANCZOS)
    return image


def _write(image: Image.Image, path: Path, fmt: str, quality: int) -> None:
    options: Dict[str, Any] = {}
    if fmt in ("jpeg", "webp"):
        options["quality"] = quality
    if fmt == "png":
        options["optimize"] = True
    image.save(path, PIL_FORMATS[fmt], **options)


def optimize(
    path: Path,
    width: Optional[int] = None,
    height: Optional[int] = None,
    quality: int = 80,
    fmt: str = "webp",
) -> Path:
    """
    Re-encode an image, optionally shrinking it to fit ``width``/``height``.

    The output has the target format's extension. When that differs from the
    input path, the input file is removed.

    Returns:
        Path of the optimised image
    """
    if fmt not in PIL_FORMATS:
        raise ValueError(f"Unsupported image format: {fmt}")

    path = Path(path)
    output = path.with_suffix(f".{fmt}")

    with Image.open(path) as source:
        image = _fit_inside(_prepare(source, fmt), width, height)
        _write(image, output, fmt, quality)

    if output != path and path.exists():
        path.unlink()

    logger.debug(f"Optimised image {path.name} -> {output.name}")
    return output


def create_thumbnail(path: Path, size: int = 200) -> Path:
    """Square, centre-cropped thumbnail next to the source, ``<name>_thumb<ext>``."""
    path = Path(path)
    output = path.with_name(f"{path.stem}_thumb{path.suffix}")
    fmt = path.suffix.lower().lstrip(".").replace("jpg", "jpeg")
    if fmt not in PIL_FORMATS:
        fmt = "webp"
        output = output.with_suffix(".webp")

    with Image.open(path) as source:
        image = ImageOps.fit(_prepare(source, fmt), (size, size), Image.Resampling.LANCZOS)
        _write(image, output, fmt, 80)
    return output


def resize_for_gallery(path: Path) -> Dict[str, Path]:
    """
    Produce the gallery variants of an image as webp files.

    Returns:
        Mapping of ``original``, ``large`` (1920 wide), ``medium`` (800 wide)
        and ``thumbnail`` (300x300 crop) to their paths
    """
    path = Path(path)
    base = path.with_suffix("")

    variants = {
        "large": base.with_name(f"{base.name}_large.webp"),
        "medium": base.with_name(f"{base.name}_medium.webp"),
        "thumbnail": base.with_name(f"{base.name}_thumb.webp"),
    }

    with Image.open(path) as source:
        image = _prepare(source, "webp")
        _write(_fit_inside(image, GALLERY_LARGE_WIDTH, None), variants["large"], "webp", 85)
        _write(_fit_inside(image, GALLERY_MEDIUM_WIDTH, None), variants["medium"], "webp", 80)
        thumb = ImageOps.fit(
            image, (GALLERY_THUMBNAIL_SIZE, GALLERY_THUMBNAIL_SIZE), Image.Resampling.LANCZOS
        )
        _write(thumb, variants["thumbnail"], "webp", 75)

    return {"original": path, **variants}


def get_metadata(path: Path) -> Dict[str, Any]:
    path = Path(path)
    with Image.open(path) as image:
        return {
            "width": image.width,
            "height": image.height,
            "format": (image.format or "unknown").lower(),
            "size": path.stat().st_size,
        }
