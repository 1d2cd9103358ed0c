import time
import hashlib
import logging
from typing import Any, Dict, Optional, Tuple

from plant_doctor.config import CACHE_TTL, MAX_CACHE_SIZE

logger = logging.getLogger(__name__)

# key -> (expires_at, value)
_cache: Dict[str, Tuple[float, Any]] = {}


def get_image_hash(image_bytes: bytes) -> str:
    """Generate hash for image caching"""
    return hashlib.md5(image_bytes).hexdigest()


def get_cache_key(prefix: str, key: str) -> str:
    """Generate cache key with prefix"""
    return f"{prefix}:{key}"


async def get_from_cache(cache_type: str, key: str) -> Optional[Any]:
    """Get item from the in-memory cache, dropping it if expired"""
    full_key = get_cache_key(cache_type, key)
    entry = _cache.get(full_key)
    if entry is None:
        return None

    expires_at, value = entry
    if expires_at <= time.time():
        _cache.pop(full_key, None)
        return None

    logger.info(f"✓ Cache hit: {full_key[:50]}")
    return value


async def set_to_cache(cache_type: str, key: str, data: Any, ttl: int = CACHE_TTL):
    """Set item to the in-memory cache"""
    full_key = get_cache_key(cache_type, key)

    if full_key not in _cache and len(_cache) >= MAX_CACHE_SIZE:
        await cleanup_expired_cache()
        if len(_cache) >= MAX_CACHE_SIZE:
            # Evict the entry closest to expiry
            oldest = min(_cache, key=lambda k: _cache[k][0])
            _cache.pop(oldest, None)

    _cache[full_key] = (time.time() + ttl, data)
    logger.info(f"✓ Cache set: {full_key[:50]}")


# ============================================================================
# Cleanup & Stats
# ============================================================================

async def cleanup_expired_cache():
    """Remove expired cache entries"""
    now = time.time()
    expired = [k for k, (expires_at, _) in _cache.items() if expires_at <= now]
    for k in expired:
        _cache.pop(k, None)
    if expired:
        logger.info(f"Cache cleanup: removed {len(expired)} expired entries")


async def clear_all_caches():
    """Clear all cache entries"""
    _cache.clear()
    logger.info("All caches cleared")


async def get_cache_stats() -> dict:
    """Get cache statistics"""
    return {
        "total_cache_items": len(_cache),
        "max_cache_items": MAX_CACHE_SIZE,
        "storage": "In-memory",
    }
