import logging
import threading

import requests
from cachetools import TTLCache

from app.config import settings

logger = logging.getLogger(__name__)

FALLBACK_IMAGES = [
    "https://images.unsplash.com/photo-1564013799919-ab600027ffc6?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1570129477492-45c003edd2be?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1512917774080-9991f1c4c750?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1600596542815-ffad4c1539a9?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1600607687939-ce8a6c25118c?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1605276374104-dee2a0ed3cd6?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1600585154340-be6161a56a0c?w=400&h=300&fit=crop&auto=format",
    "https://images.unsplash.com/photo-1600566753190-17f0baa2a6c3?w=400&h=300&fit=crop&auto=format",
]

SEARCH_TERMS = {
    "exterior": "house exterior",
    "interior": "house interior",
}
PHOTOS_PER_PAGE = 30

# (property key, image type) -> resolved URL
_image_cache = TTLCache(
    maxsize=settings.IMAGE_CACHE_MAX_SIZE, ttl=settings.IMAGE_CACHE_TTL_SECONDS
)
_cache_lock = threading.Lock()


def hash_string(value: str) -> int:
    """Stable 32-bit string hash so a property always maps to the same photo.

    Runs over UTF-16 code units, so a character outside the BMP contributes
    its surrogate pair.
    """
    data = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h & 0x80000000:
        h -= 0x100000000
    return abs(h)


def clear_cache():
    with _cache_lock:
        _image_cache.clear()


class ImageService:
    def get_fallback_image(self, key: str) -> str:
        return FALLBACK_IMAGES[hash_string(key) % len(FALLBACK_IMAGES)]

    def search_photos(self, image_type: str) -> list:
        response = requests.get(
            settings.UNSPLASH_API_URL,
            params={
                "query": SEARCH_TERMS[image_type],
                "per_page": PHOTOS_PER_PAGE,
                "client_id": settings.UNSPLASH_ACCESS_KEY,
            },
            timeout=settings.UNSPLASH_TIMEOUT_SECONDS,
        )
        if response.status_code != 200:
            raise requests.HTTPError(
                f"Unsplash search failed with status {response.status_code}"
            )
        return response.json().get("results") or []

    def get_property_image(self, key: str, image_type: str = "exterior") -> str:
        if image_type not in SEARCH_TERMS:
            image_type = "exterior"
        cache_key = (key, image_type)
        with _cache_lock:
            cached = _image_cache.get(cache_key)
        if cached is not None:
            return cached

        if not settings.UNSPLASH_ACCESS_KEY:
            image_url = self.get_fallback_image(key)
            with _cache_lock:
                _image_cache[cache_key] = image_url
            return image_url

        try:
            photos = self.search_photos(image_type)
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Photo search failed, using fallback image: %s", exc)
            return self.get_fallback_image(key)

        if not photos:
            return self.get_fallback_image(key)

        photo = photos[hash_string(key) % len(photos)]
        try:
            image_url = photo["urls"]["regular"]
        except (KeyError, TypeError):
            logger.warning("Photo search returned an unexpected payload")
            return self.get_fallback_image(key)

        with _cache_lock:
            _image_cache[cache_key] = image_url
        return image_url

    def get_property_images(self, property_id: str, count: int = 3) -> list[str]:
        """One exterior shot followed by ``count - 1`` interior shots."""
        images = [self.get_property_image(property_id, "exterior")]
        for i in range(1, count):
            images.append(self.get_property_image(f"{property_id}-{i}", "interior"))
        return images
