import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse

from plant_doctor.config import ANALYZE_RATE_LIMIT
from plant_doctor.dependencies import limiter, templates
from plant_doctor.models import PageState, PlantDetails
from plant_doctor.services.gemini import identify_plant
from plant_doctor.services.image import ImageValidationError, to_data_url
from plant_doctor.utils.uploads import read_submitted_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/identifier", response_class=HTMLResponse)
async def identifier_page(request: Request):
    return templates.TemplateResponse(request, "identifier.html", {"state": PageState.idle()})


@router.post("/identifier", response_class=HTMLResponse)
@limiter.limit(ANALYZE_RATE_LIMIT)
async def identifier_submit(
    request: Request,
    file: Optional[UploadFile] = File(None),
    image_data: Optional[str] = Form(None),
):
    preview = None
    status_code = 200
    try:
        image_bytes, mime_type = await read_submitted_image(file, image_data)
        preview = to_data_url(image_bytes, mime_type)
        result = await identify_plant(image_bytes, mime_type)
        state = PageState.show_result(result, image=preview)
    except ImageValidationError as e:
        state = PageState.show_error(str(e))
        status_code = 400
    except HTTPException as e:
        logger.error(f"Identification failed: {e.detail}")
        state = PageState.show_error(str(e.detail), image=preview)
        status_code = e.status_code

    return templates.TemplateResponse(
        request, "identifier.html", {"state": state}, status_code=status_code
    )


@router.post("/api/identify", response_model=PlantDetails)
@limiter.limit(ANALYZE_RATE_LIMIT)
async def identify_endpoint(
    request: Request,
    file: Optional[UploadFile] = File(None),
    image_data: Optional[str] = Form(None),
):
    """
    Identify a plant and return its details as JSON
    """
    image_bytes, mime_type = await read_submitted_image(file, image_data)
    return await identify_plant(image_bytes, mime_type)
