import logging
from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse

from plant_doctor.config import ANALYZE_RATE_LIMIT
from plant_doctor.dependencies import limiter, templates
from plant_doctor.models import DiagnosisResult, PageState
from plant_doctor.services.gemini import diagnose_plant
from plant_doctor.services.image import ImageValidationError, to_data_url
from plant_doctor.utils.uploads import read_submitted_image

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/plantdigno", response_class=HTMLResponse)
async def diagnosis_page(request: Request):
    return templates.TemplateResponse(request, "plantdigno.html", {"state": PageState.idle()})


@router.post("/plantdigno", response_class=HTMLResponse)
@limiter.limit(ANALYZE_RATE_LIMIT)
async def diagnosis_submit(
    request: Request,
    file: Optional[UploadFile] = File(None),
    image_data: Optional[str] = Form(None),
):
    preview = None
    status_code = 200
    try:
        image_bytes, mime_type = await read_submitted_image(file, image_data)
        preview = to_data_url(image_bytes, mime_type)
        result = await diagnose_plant(image_bytes, mime_type)
        state = PageState.show_result(result, image=preview)
    except ImageValidationError as e:
        state = PageState.show_error(str(e))
        status_code = 400
    except HTTPException as e:
        logger.error(f"Diagnosis failed: {e.detail}")
        state = PageState.show_error(str(e.detail), image=preview)
        status_code = e.status_code

    return templates.TemplateResponse(
        request, "plantdigno.html", {"state": state}, status_code=status_code
    )


@router.post(
    "/api/diagnose",
    response_model=DiagnosisResult,
    response_model_exclude_none=True,
)
@limiter.limit(ANALYZE_RATE_LIMIT)
async def diagnose_endpoint(
    request: Request,
    file: Optional[UploadFile] = File(None),
    image_data: Optional[str] = Form(None),
):
    """
    Diagnose plant health; fields the model did not label are left out
    """
    image_bytes, mime_type = await read_submitted_image(file, image_data)
    return await diagnose_plant(image_bytes, mime_type)
