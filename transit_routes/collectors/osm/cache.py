"""
OSM response caching

Handles caching of raw OSM API responses to disk, one file per URL
"""

import os
import time
import hashlib
import tempfile
from typing import Optional
from loguru import logger


class OSMCache:
    """Handles caching of OSM API responses to disk"""

    def __init__(self, cache_dir: Optional[str] = None, max_age_days: Optional[float] = 10.0):
        self.cache_dir = cache_dir
        self.max_age_days = max_age_days

    @property
    def enabled(self) -> bool:
        return bool(self.cache_dir)

    def get_cache_path(self, url: str) -> Optional[str]:
        """Get cache file path for a request URL"""
        if not self.cache_dir:
            return None
        cache_hash = hashlib.md5(url.encode()).hexdigest()
        return os.path.join(self.cache_dir, f"osm_{cache_hash}.xml")

    def load(self, url: str) -> Optional[str]:
        """Load a response body from cache if present and fresh"""
        cache_path = self.get_cache_path(url)
        if not cache_path or not os.path.exists(cache_path):
            return None
        try:
            if self.max_age_days is not None:
                age_s = time.time() - os.path.getmtime(cache_path)
                if age_s > self.max_age_days * 86400:
                    logger.debug(f"Cache entry expired for {url}")
                    return None
            with open(cache_path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            logger.warning(f"Failed to load cache {cache_path}: {e}")
        return None

    def save(self, url: str, body: str):
        """Save a response body to cache"""
        cache_path = self.get_cache_path(url)
        if not cache_path:
            return
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            # Concurrent writers each get their own temp file; os.replace is atomic
            fd, tmp_path = tempfile.mkstemp(dir=self.cache_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
            os.replace(tmp_path, cache_path)
        except OSError as e:
            logger.warning(f"Failed to save cache {cache_path}: {e}")
