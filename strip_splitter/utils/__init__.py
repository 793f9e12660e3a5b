"""Utility modules for the strip splitter."""

from strip_splitter.utils.image_files import (
    IMAGE_EXTENSIONS,
    ImageDecodeError,
    ImageEncodeError,
    ImageFileError,
    list_images,
    load_image,
    save_image,
)

__all__ = [
    "IMAGE_EXTENSIONS",
    "ImageDecodeError",
    "ImageEncodeError",
    "ImageFileError",
    "list_images",
    "load_image",
    "save_image",
]
