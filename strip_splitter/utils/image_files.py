"""
Image file helpers: listing a source folder, decoding and encoding images.

Decoding always yields an RGB (or RGBA) numpy buffer so the splitter sees
at least three colour channels whatever the source mode was.
"""

import logging
import os
from pathlib import Path
from typing import Iterable

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "webp", "bmp")


class ImageFileError(Exception):
    """Raised when an image file cannot be read or written."""

    pass


class ImageDecodeError(ImageFileError):
    """Raised when a source image cannot be decoded."""

    pass


class ImageEncodeError(ImageFileError):
    """Raised when a segment cannot be written."""

    pass


def has_image_extension(path: Path, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> bool:
    """Check the file suffix against the allowed extensions, ignoring case."""
    suffix = path.suffix.lower().lstrip(".")
    return bool(suffix) and suffix in {ext.lower() for ext in extensions}


def list_images(
    folder: Path,
    extensions: Iterable[str] = IMAGE_EXTENSIONS,
) -> list[Path]:
    """
    List the images directly inside a folder, sorted by file name.

    Entries that cannot be inspected are skipped.

    Args:
        folder: Folder to scan (not recursive).
        extensions: Allowed file extensions, without dots.

    Returns:
        Sorted list of image paths.
    """
    extensions = tuple(extensions)
    images = []

    try:
        entries = list(os.scandir(folder))
    except OSError as e:
        logger.warning(f"Cannot read input folder {folder}: {e}")
        return []

    for entry in entries:
        try:
            if not entry.is_file():
                continue
        except OSError:
            continue

        path = Path(entry.path)
        if has_image_extension(path, extensions):
            images.append(path)

    images.sort(key=lambda p: p.name)
    return images


def load_image(path: Path) -> np.ndarray:
    """
    Decode an image file into a pixel buffer.

    Args:
        path: Image path.

    Returns:
        Array of shape (height, width, 3 or 4).

    Raises:
        ImageDecodeError: If the file cannot be opened or decoded.
    """
    try:
        with Image.open(path) as img:
            if img.mode not in ("RGB", "RGBA"):
                has_alpha = "A" in img.getbands() or "transparency" in img.info
                img = img.convert("RGBA" if has_alpha else "RGB")
            return np.array(img)
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(f"Failed to load image {path}: {e}") from e


def save_image(buffer: np.ndarray, path: Path) -> Path:
    """
    Encode a pixel buffer to a file; the format follows the file suffix.

    Args:
        buffer: Pixel buffer.
        path: Output path.

    Returns:
        The output path.

    Raises:
        ImageEncodeError: If the image cannot be written.
    """
    try:
        Image.fromarray(buffer).save(path)
    except (OSError, ValueError, KeyError) as e:
        raise ImageEncodeError(f"Failed to save image: {e}") from e
    return path
