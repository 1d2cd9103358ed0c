import os

from fastapi.templating import Jinja2Templates
from slowapi import Limiter
from slowapi.util import get_remote_address

from plant_doctor.models import DETAIL_LABELS

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Setup templates
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))
templates.env.globals["detail_labels"] = DETAIL_LABELS

# Shared rate limiter, registered on app.state in main
limiter = Limiter(key_func=get_remote_address)
