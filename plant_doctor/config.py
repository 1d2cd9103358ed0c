import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ============================================================================#
# ENVIRONMENT / SERVICES
# ============================================================================#
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
# Gemini exposes an OpenAI-compatible endpoint, so the openai SDK can talk to it
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"
)

# Timeouts for the model call
API_TIMEOUT = int(os.getenv("API_TIMEOUT", "60"))  # seconds
API_CONNECT_TIMEOUT = int(os.getenv("API_CONNECT_TIMEOUT", "15"))  # seconds

# ============================================================================#
# IMAGE INTAKE
# ============================================================================#
MAX_IMAGE_SIZE = int(os.getenv("MAX_IMAGE_SIZE", str(5 * 1024 * 1024)))  # 5MB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/jpg")

# Cache configuration
CACHE_TTL = 3600  # 1 hour
MAX_CACHE_SIZE = 500  # Maximum cache entries

# Rate limiting per client address (slowapi syntax)
ANALYZE_RATE_LIMIT = os.getenv("ANALYZE_RATE_LIMIT", "10/minute")
