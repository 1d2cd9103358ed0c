import logging
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from plant_doctor import __version__
from plant_doctor.config import GEMINI_MODEL
from plant_doctor.dependencies import templates
from plant_doctor.services import gemini
from plant_doctor.services.cache import get_cache_stats, clear_all_caches

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return templates.TemplateResponse(request, "index.html", {"model": GEMINI_MODEL})


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "cache_stats": await get_cache_stats(),
        "services": {
            "gemini": bool(gemini.gemini_client),
            "model": GEMINI_MODEL
        }
    }


@router.get("/cache/stats")
async def cache_stats_endpoint():
    return await get_cache_stats()


@router.post("/cache/clear")
async def clear_cache_endpoint():
    await clear_all_caches()
    return {"status": "success", "message": "All caches cleared"}
