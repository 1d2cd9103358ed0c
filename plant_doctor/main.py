# Plant Doctor web app
import logging
import os
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from plant_doctor import __version__
from plant_doctor.config import GEMINI_API_KEY, GEMINI_MODEL
from plant_doctor.dependencies import BASE_DIR, limiter
from plant_doctor.routers import diagnosis, health, identify
from plant_doctor.services.cache import clear_all_caches
from plant_doctor.services.image import ImageValidationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================#
# Lifespan Events
# ============================================================================#

@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    # Startup
    logger.info("=" * 60)
    logger.info(f"Starting Plant Doctor v{__version__}")
    logger.info(f"Gemini API: {'✓' if GEMINI_API_KEY else '✗'} ({GEMINI_MODEL})")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Shutting down gracefully...")
    await clear_all_caches()

# Initialize FastAPI app
app = FastAPI(
    title="Plant Doctor",
    description="Identify plants and diagnose plant health from a photo with Gemini",
    version=__version__,
    lifespan=lifespan
)

# Rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ImageValidationError)
async def image_validation_handler(request: Request, exc: ImageValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Static assets (camera capture script, styles)
static_path = os.path.join(BASE_DIR, "static")
if os.path.exists(static_path):
    app.mount("/static", StaticFiles(directory=static_path), name="static")

app.include_router(health.router)
app.include_router(identify.router)
app.include_router(diagnosis.router)


def run():
    uvicorn.run(
        "plant_doctor.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


if __name__ == "__main__":
    run()
