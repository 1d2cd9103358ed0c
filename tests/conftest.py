import asyncio
import io
import os
import sys

import pytest
from PIL import Image

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from plant_doctor.dependencies import limiter
from plant_doctor.services.cache import clear_all_caches


def make_image(image_format: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (34, 139, 34)).save(buf, format=image_format)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes():
    return make_image("JPEG")


@pytest.fixture(autouse=True)
def fresh_state():
    """Every test starts with an empty result cache and rate limit window"""
    asyncio.run(clear_all_caches())
    limiter.reset()
    yield
    asyncio.run(clear_all_caches())
