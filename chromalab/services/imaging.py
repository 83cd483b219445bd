"""
Chromalab Imaging Utilities
Upload validation, decoding to RGBA and downscaling ahead of color extraction.
"""
import io
from typing import Optional, Tuple

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image

from chromalab.config import config


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file metadata before reading it.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 413 for oversize files, 415 for unsupported formats
    """
    # file.size might be None for some clients
    if getattr(file, "size", None) and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    if file.content_type not in config.SUPPORTED_MIME_TYPES:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported media type. Supported: {', '.join(config.SUPPORTED_MIME_TYPES)}"
        )

    if file.filename:
        ext = file.filename.lower().rsplit(".", 1)[-1] if "." in file.filename else ""
        if f".{ext}" not in config.SUPPORTED_EXTENSIONS:
            raise HTTPException(
                status_code=415,
                detail=f"Unsupported file extension. Supported: {', '.join(sorted(config.SUPPORTED_EXTENSIONS))}"
            )


def validate_magic_bytes(file_bytes: bytes) -> str:
    """
    Check file magic bytes to make sure the payload really is an image.

    Returns:
        Detected MIME type

    Raises:
        HTTPException: 400 for invalid/corrupt files
    """
    if len(file_bytes) < 12:
        raise HTTPException(status_code=400, detail="File too small or corrupt")

    if file_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if file_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if file_bytes[:4] == b"RIFF" and file_bytes[8:12] == b"WEBP":
        return "image/webp"
    raise HTTPException(
        status_code=400,
        detail="Invalid image file. Magic bytes don't match supported formats."
    )


def decode_rgba(file_bytes: bytes) -> np.ndarray:
    """
    Decode image bytes into an (H, W, 4) uint8 RGBA array.

    Raises:
        HTTPException: 400 for decode errors
    """
    validate_magic_bytes(file_bytes)
    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        if pil_image.mode != "RGBA":
            pil_image = pil_image.convert("RGBA")
        return np.array(pil_image)
    except (OSError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Failed to decode image: {str(e)}")


async def read_image_rgba(file: UploadFile) -> np.ndarray:
    """
    Read an upload and decode it to RGBA.

    Raises:
        HTTPException: 413 for oversize payloads, 400 for decode errors
    """
    file_bytes = await file.read()

    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    return decode_rgba(file_bytes)


def resize_long_edge(img: np.ndarray, max_edge: Optional[int] = None) -> np.ndarray:
    """
    Resize image so the longest edge is at most max_edge pixels.

    Args:
        img: Input image (any channel count)
        max_edge: Maximum edge size (default from config)

    Returns:
        Resized image, or the input when already small enough
    """
    if max_edge is None:
        max_edge = config.EXTRACT_MAX_EDGE

    height, width = img.shape[:2]
    current_max = max(height, width)

    if current_max <= max_edge:
        return img

    scale = max_edge / current_max
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    # INTER_AREA for downscaling
    return cv2.resize(img, (new_width, new_height), interpolation=cv2.INTER_AREA)


def get_image_dimensions(img: np.ndarray) -> Tuple[int, int]:
    """Image (width, height)."""
    height, width = img.shape[:2]
    return width, height
