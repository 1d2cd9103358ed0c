import base64
import binascii
import io
import logging
import re
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from plant_doctor.config import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE

logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r'^data:(image/\w+);base64,')

# Pillow format name -> MIME type sent to the model
_FORMAT_MIME = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
}


class ImageValidationError(ValueError):
    """The submitted image cannot be analyzed. The message is shown to the user."""


def validate_image(image_bytes: bytes, content_type: Optional[str]) -> str:
    """Check an uploaded image and return the MIME type to send upstream.

    Rejects empty uploads, types other than JPEG/PNG, files over
    ``MAX_IMAGE_SIZE`` and bytes Pillow cannot read.
    """
    if not image_bytes:
        raise ImageValidationError("Uploaded file is empty.")

    if content_type not in ALLOWED_IMAGE_TYPES:
        logger.warning(f"Rejected upload with content type {content_type!r}")
        raise ImageValidationError("Invalid file type. Please upload JPEG or PNG.")

    if len(image_bytes) > MAX_IMAGE_SIZE:
        logger.warning(f"Rejected upload of {len(image_bytes)} bytes")
        raise ImageValidationError(
            f"Image is too large. Maximum file size is {MAX_IMAGE_SIZE // (1024 * 1024)}MB."
        )

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.warning(f"Uploaded bytes are not a readable image: {e}")
        raise ImageValidationError("Failed to process image. Please try again.") from e

    # Trust the decoded format over the client-declared type
    return _FORMAT_MIME.get(image_format, "image/jpeg")


def decode_data_url(data_url: str) -> Tuple[bytes, str]:
    """Decode a camera capture (``data:image/...;base64,...``) to bytes and MIME type."""
    match = _DATA_URL_RE.match(data_url or "")
    if not match:
        raise ImageValidationError("Failed to process image. Please try again.")

    try:
        image_bytes = base64.b64decode(data_url[match.end():], validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageValidationError("Failed to process image. Please try again.") from e

    return image_bytes, match.group(1)


def to_data_url(image_bytes: bytes, mime_type: str) -> str:
    """Encode image bytes for inline preview and for the model request."""
    base64_image = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{base64_image}"
