import asyncio
import logging
from typing import Optional

import httpx
from fastapi import HTTPException
from openai import APIConnectionError, APIError, APITimeoutError, AsyncOpenAI

from plant_doctor.config import (
    API_CONNECT_TIMEOUT,
    API_TIMEOUT,
    GEMINI_API_KEY,
    GEMINI_BASE_URL,
    GEMINI_MODEL,
)
from plant_doctor.models import DiagnosisResult, PlantDetails
from plant_doctor.prompts import DIAGNOSE_PLANT_PROMPT, IDENTIFY_PLANT_PROMPT
from plant_doctor.services.cache import get_from_cache, get_image_hash, set_to_cache
from plant_doctor.services.image import to_data_url
from plant_doctor.services.parsing import ParseError, parse_diagnosis, parse_plant_details

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Check your internet connection."

# Initialize Gemini client through its OpenAI-compatible endpoint
gemini_client: Optional[AsyncOpenAI] = None
if GEMINI_API_KEY:
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=API_CONNECT_TIMEOUT,
            read=API_TIMEOUT,
            write=API_TIMEOUT,
            pool=API_TIMEOUT
        )
    )
    gemini_client = AsyncOpenAI(
        base_url=GEMINI_BASE_URL,
        api_key=GEMINI_API_KEY,
        http_client=http_client,
    )
    logger.info(f"Gemini ({GEMINI_MODEL}) initialized with {API_TIMEOUT}s timeout")


async def generate_from_image(prompt: str, image_bytes: bytes, mime_type: str) -> str:
    """Send one prompt plus one image to the model and return the answer text.

    Raises ``HTTPException`` with a message fit for the end user when the
    service is not configured, unreachable, or returns an error.
    """
    if not gemini_client:
        logger.error("Gemini API key not configured")
        raise HTTPException(
            status_code=500,
            detail="API Key is missing. Set GEMINI_API_KEY in your .env file.",
        )

    try:
        response = await asyncio.wait_for(
            gemini_client.chat.completions.create(
                model=GEMINI_MODEL,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {
                                "type": "image_url",
                                "image_url": {"url": to_data_url(image_bytes, mime_type)},
                            },
                        ],
                    }
                ],
            ),
            timeout=API_TIMEOUT
        )
    except asyncio.TimeoutError:
        logger.error(f"Gemini API timeout after {API_TIMEOUT} seconds")
        raise HTTPException(status_code=503, detail=NETWORK_ERROR_MESSAGE)
    except (httpx.TimeoutException, httpx.ConnectError, APITimeoutError, APIConnectionError) as e:
        logger.error(f"HTTP connection error: {e}")
        raise HTTPException(status_code=503, detail=NETWORK_ERROR_MESSAGE)
    except APIError as e:
        logger.error(f"Gemini API error: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"Analysis failed: {e.message}")

    if not response.choices:
        logger.warning("Gemini returned no choices")
        return ""

    raw_text = response.choices[0].message.content or ""
    logger.info(f"Gemini raw response: {raw_text[:500]}...")
    return raw_text


async def identify_plant(image_bytes: bytes, mime_type: str = "image/jpeg") -> PlantDetails:
    """Identify a plant from a photo (structured JSON flow)."""
    logger.info("Starting plant identification")

    image_hash = get_image_hash(image_bytes)
    cached = await get_from_cache("identify", image_hash)
    if cached:
        logger.info("✓ Using cached identification result")
        return PlantDetails.model_validate(cached)

    raw_text = await generate_from_image(IDENTIFY_PLANT_PROMPT, image_bytes, mime_type)

    try:
        result = parse_plant_details(raw_text)
    except ParseError as e:
        logger.warning(f"Failed to parse identification response: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    await set_to_cache("identify", image_hash, result.model_dump(by_alias=True))
    logger.info(f"Plant identified: {result.name} ({result.scientific_name})")
    return result


async def diagnose_plant(image_bytes: bytes, mime_type: str = "image/jpeg") -> DiagnosisResult:
    """Diagnose plant health from a photo (free-text flow). Parsing never fails."""
    logger.info("Starting plant diagnosis")

    image_hash = get_image_hash(image_bytes)
    cached = await get_from_cache("diagnose", image_hash)
    if cached:
        logger.info("✓ Using cached diagnosis result")
        return DiagnosisResult.model_validate(cached)

    raw_text = await generate_from_image(DIAGNOSE_PLANT_PROMPT, image_bytes, mime_type)
    result = parse_diagnosis(raw_text)

    await set_to_cache("diagnose", image_hash, result.model_dump(by_alias=True))
    logger.info(f"Diagnosis complete: {result.plant_name} (Disease: {result.disease or '-'})")
    return result
