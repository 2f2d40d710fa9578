"""Image data-URL parsing and the 50x50 cover-fit avatar rendering (Pillow)."""

import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from cms.core.errors import AvatarRejected, AvatarRejectedReason

DATA_URL_PATTERN = re.compile(r"^data:image/([A-Za-z0-9.+-]+);base64,(.*)$", re.DOTALL)

# Declared subtype -> (Pillow format used for re-encoding, MIME type of the output)
SUPPORTED_FORMATS: dict[str, tuple[str, str]] = {
    "jpeg": ("JPEG", "image/jpeg"),
    "jpg": ("JPEG", "image/jpeg"),
    "png": ("PNG", "image/png"),
    "gif": ("GIF", "image/gif"),
}

# Formats Pillow may report when opening each of the above. MPO is the
# multi-picture JPEG written by many phone cameras.
DECODED_AS: dict[str, frozenset[str]] = {
    "JPEG": frozenset({"JPEG", "MPO"}),
    "PNG": frozenset({"PNG"}),
    "GIF": frozenset({"GIF"}),
}

INVALID_DATA_URL = "Invalid image data URL"
INVALID_IMAGE_DATA = "Invalid image data"


@dataclass(frozen=True)
class ImagePayload:
    declared_format: str
    pil_format: str
    mime_type: str
    data: bytes


def _invalid_image_data() -> AvatarRejected:
    return AvatarRejected(AvatarRejectedReason.INVALID_IMAGE_DATA, INVALID_IMAGE_DATA)


def parse_image_data_url(data_url: str | None, max_length: int) -> ImagePayload:
    """
    Validate an image data URL and return its decoded bytes.

    Checks, in order: data-URL shape and supported format, encoded length
    ceiling, then base64 decoding.
    """
    match = DATA_URL_PATTERN.match(data_url or "")
    if match is None:
        raise AvatarRejected(AvatarRejectedReason.INVALID_FORMAT, INVALID_DATA_URL)
    declared = match.group(1).lower()
    if declared not in SUPPORTED_FORMATS:
        raise AvatarRejected(
            AvatarRejectedReason.INVALID_FORMAT,
            f"Unsupported image format: {declared}",
        )
    if len(data_url) > max_length:
        raise AvatarRejected(
            AvatarRejectedReason.TOO_LARGE,
            f"Image too large (max {max_length // 1000}KB)",
        )
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        raise _invalid_image_data()
    if not data:
        raise _invalid_image_data()
    pil_format, mime_type = SUPPORTED_FORMATS[declared]
    return ImagePayload(
        declared_format=declared,
        pil_format=pil_format,
        mime_type=mime_type,
        data=data,
    )


def _open_checked(payload: ImagePayload, max_dimension: int) -> Image.Image:
    """Open the image, check its declared format and header dimensions, then decode pixels."""
    too_big = AvatarRejected(
        AvatarRejectedReason.IMAGE_DIMENSIONS_EXCEEDED,
        f"Image dimensions too large (max {max_dimension}x{max_dimension})",
    )
    try:
        image = Image.open(io.BytesIO(payload.data))
    except Image.DecompressionBombError:
        raise too_big
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError):
        raise _invalid_image_data()
    if image.format not in DECODED_AS[payload.pil_format]:
        raise _invalid_image_data()

    # Image.open only reads the header; refuse oversized images before decoding pixels.
    width, height = image.size
    if width > max_dimension or height > max_dimension:
        raise too_big
    try:
        image.load()
    except Image.DecompressionBombError:
        raise too_big
    except (OSError, ValueError, SyntaxError):
        raise _invalid_image_data()
    return image


def _encodable(image: Image.Image, pil_format: str) -> Image.Image:
    if pil_format == "JPEG":
        return image if image.mode in ("RGB", "L") else image.convert("RGB")
    if image.mode not in ("1", "L", "LA", "P", "RGB", "RGBA"):
        return image.convert("RGBA")
    return image


def render_avatar(payload: ImagePayload, size: int, max_dimension: int) -> str:
    """
    Decode, cover-fit to exactly size x size (scale then center-crop, no
    letterboxing) and re-encode in the declared format. Returns a data URL.
    """
    image = _open_checked(payload, max_dimension)
    image = _encodable(image, payload.pil_format)
    fitted = ImageOps.fit(
        image,
        (size, size),
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )
    buffer = io.BytesIO()
    fitted.save(buffer, format=payload.pil_format)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:{payload.mime_type};base64,{encoded}"
