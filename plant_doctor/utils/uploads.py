import logging
from typing import Optional, Tuple

from fastapi import UploadFile

from plant_doctor.config import MAX_IMAGE_SIZE
from plant_doctor.services.image import ImageValidationError, decode_data_url, validate_image

logger = logging.getLogger(__name__)


async def read_submitted_image(
    file: Optional[UploadFile] = None,
    image_data: Optional[str] = None,
) -> Tuple[bytes, str]:
    """Return (bytes, mime type) for whichever image the form carried.

    A file upload wins over a camera capture sent as a data URL.
    """
    if file is not None and file.filename:
        # One byte past the limit is enough to reject an oversized upload
        image_bytes = await file.read(MAX_IMAGE_SIZE + 1)
        mime_type = validate_image(image_bytes, file.content_type)
        logger.info(f"Received upload {file.filename} ({len(image_bytes)} bytes)")
        return image_bytes, mime_type

    if image_data:
        image_bytes, declared_type = decode_data_url(image_data)
        mime_type = validate_image(image_bytes, declared_type)
        logger.info(f"Received camera capture ({len(image_bytes)} bytes)")
        return image_bytes, mime_type

    raise ImageValidationError("Please upload or capture a plant image.")
