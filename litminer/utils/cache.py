import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path.home() / ".litminer" / "cache"


class DownloadCache:
    """Cache for remote text downloads, keyed by URL."""

    def __init__(self, cache_dir: Optional[Path] = None, ttl_hours: int = 24 * 7):
        self.cache_dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR
        self.downloads_dir = self.cache_dir / "downloads"
        self.downloads_dir.mkdir(parents=True, exist_ok=True)
        self.ttl_seconds = ttl_hours * 3600

    def _get_key(self, url: str) -> str:
        return hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]

    def _path_for(self, url: str) -> Path:
        return self.downloads_dir / f"{self._get_key(url)}.json"

    def get(self, url: str) -> Optional[str]:
        """Get cached text for url if present and not expired."""
        cache_file = self._path_for(url)

        if not cache_file.exists():
            return None

        try:
            data = json.loads(cache_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Cache read error: {e}")
            return None

        if time.time() - data.get("timestamp", 0) > self.ttl_seconds:
            cache_file.unlink()
            logger.debug(f"Cache expired for {url}")
            return None

        logger.info(f"Cache hit for {url}")
        return data.get("text")

    def set(self, url: str, text: str, metadata: Optional[Dict] = None) -> None:
        """Store downloaded text in the cache."""
        cache_file = self._path_for(url)
        data = {
            "url": url,
            "text": text,
            "timestamp": time.time(),
            "metadata": metadata or {},
        }
        try:
            cache_file.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            logger.debug(f"Cached download for {url}")
        except OSError as e:
            logger.warning(f"Cache write error: {e}")

    def invalidate(self, url: str) -> bool:
        """Remove the cached entry for url."""
        cache_file = self._path_for(url)
        if cache_file.exists():
            cache_file.unlink()
            return True
        return False

    def clear(self) -> int:
        """Clear all cached downloads."""
        count = 0
        for f in self.downloads_dir.glob("*.json"):
            f.unlink()
            count += 1
        logger.info(f"Cleared {count} cached downloads")
        return count

    def stats(self) -> Dict[str, Any]:
        files = list(self.downloads_dir.glob("*.json"))
        total_size = sum(f.stat().st_size for f in files)
        return {
            "cache_dir": str(self.cache_dir),
            "file_count": len(files),
            "total_size_mb": total_size / (1024 * 1024),
            "ttl_hours": self.ttl_seconds / 3600,
        }
