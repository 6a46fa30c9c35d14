import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import LoaderError
from ..utils.cache import DownloadCache
from .base import BaseLoader, decode_bytes

logger = logging.getLogger(__name__)

USER_AGENT = "litminer/0.1 (+text analysis)"


def make_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=5,
        connect=3,
        read=3,
        backoff_factor=0.6,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update({"User-Agent": USER_AGENT})
    return session


class URLLoader(BaseLoader):
    """
    Downloads text over HTTP(S).

    Responses are decoded from raw bytes (UTF-8, then chardet) rather than
    trusting the server's charset header, which Gutenberg mirrors often get
    wrong. Successful downloads go to a DownloadCache unless
    config.cache_enabled is off.
    """

    name = "url"

    def __init__(self, config=None, session: Optional[requests.Session] = None):
        super().__init__(config)
        self._session = session
        self._cache: Optional[DownloadCache] = None

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = make_session()
        return self._session

    def _get_cache(self) -> Optional[DownloadCache]:
        if self._cache is None and self.config.cache_enabled:
            self._cache = DownloadCache(
                cache_dir=self.config.cache_dir,
                ttl_hours=self.config.cache_ttl_hours,
            )
        return self._cache

    @classmethod
    def can_load(cls, source: str) -> bool:
        return str(source).lower().startswith(("http://", "https://"))

    def load(self, source: str) -> str:
        cache = self._get_cache()
        if cache is not None:
            cached = cache.get(source)
            if cached is not None:
                return cached

        try:
            response = self.session.get(source, timeout=self.config.request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise LoaderError(f"Download failed for {source}: {e}") from e

        text = decode_bytes(response.content, source=source)
        logger.info(f"Downloaded {len(text)} characters from {source}")

        if cache is not None:
            cache.set(source, text, metadata={"status": response.status_code})
        return text
