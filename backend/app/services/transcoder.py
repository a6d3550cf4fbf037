"""Server-side image format conversion with Pillow."""
import io
from typing import Optional

from PIL import Image, UnidentifiedImageError

from app.core.errors import TranscodingError
from app.core.logging import setup_logging
from app.core.result import Err, Ok, Result

logger = setup_logging("transcoder")

JPEG_QUALITY = 90
CONVERSION_FAILED_MESSAGE = "Image conversion failed: the generated image could not be decoded."

# Pillow format names keyed by the lower-case names used in this service.
_PIL_FORMATS: dict[str, str] = {
    "png": "PNG",
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "webp": "WEBP",
}


def format_for_mime_type(mime_type: Optional[str]) -> Optional[str]:
    """Map ``image/jpeg`` style media types to a format name, None when unknown."""
    if not mime_type or not mime_type.lower().startswith("image/"):
        return None
    name = mime_type.split("/", 1)[1].split(";", 1)[0].strip().lower()
    return name if name in _PIL_FORMATS else None


def _pil_format(name: str) -> str:
    try:
        return _PIL_FORMATS[name.lower()]
    except KeyError:
        raise TranscodingError(f"Unsupported image format: {name}") from None


def transcode(
    data: bytes,
    from_format: Optional[str] = "png",
    to_format: str = "jpeg",
    quality: int = JPEG_QUALITY,
) -> Result[bytes, TranscodingError]:
    """Re-encode a bitmap buffer, e.g. PNG to JPEG.

    Alpha channels are dropped when the target format has none.

    Args:
        data: Encoded source image.
        from_format: Expected source encoding, or None to let Pillow detect it.
        to_format: Target encoding.
        quality: Encoder quality for lossy targets.

    Returns:
        Ok with the encoded bytes, or Err(TranscodingError) on any codec failure.
    """
    try:
        source = _pil_format(from_format) if from_format else None
        target = _pil_format(to_format)
    except TranscodingError as exc:
        return Err(exc)

    try:
        with Image.open(io.BytesIO(data), formats=[source] if source else None) as img:
            if target == "JPEG" and img.mode != "RGB":
                img = img.convert("RGB")
            buffer = io.BytesIO()
            img.save(buffer, format=target, quality=quality, optimize=True)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.error(
            "Image transcoding failed: %s",
            exc,
            extra={"service": "transcoder", "error_type": type(exc).__name__},
        )
        return Err(TranscodingError(CONVERSION_FAILED_MESSAGE))

    logger.info("Transcoded %s -> %s (%d bytes)", source or "auto", target, buffer.tell())
    return Ok(buffer.getvalue())
