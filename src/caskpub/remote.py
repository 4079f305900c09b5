"""HTTP side of a run: fetching the installer image and probing the published URL."""

from __future__ import annotations

import logging
import shutil
import urllib.parse
import urllib.error
import urllib.request
from pathlib import Path

import httpx

from .errors import DownloadFailed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 60.0
_CHUNK = 65536


class HttpxDownloader:
    """Download http(s) URLs with httpx; ftp/file URLs go through urllib."""

    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.timeout_s = float(timeout_s)

    def download(self, url: str, dest: Path) -> Path:
        scheme = urllib.parse.urlparse(url).scheme.lower()
        try:
            if scheme in ("http", "https"):
                return self._download_http(url, dest)
            return self._download_urllib(url, dest)
        except httpx.HTTPStatusError as e:
            raise DownloadFailed(url, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, urllib.error.URLError) as e:
            raise DownloadFailed(url, e) from e

    def _download_http(self, url: str, dest: Path) -> Path:
        logger.debug("Fetching %s -> %s", url, dest)
        with httpx.Client(follow_redirects=True, timeout=self.timeout_s) as client:
            with client.stream("GET", url) as resp:
                resp.raise_for_status()
                with Path(dest).open("wb") as f:
                    for chunk in resp.iter_bytes(_CHUNK):
                        f.write(chunk)
        return Path(dest)

    def _download_urllib(self, url: str, dest: Path) -> Path:
        logger.debug("Fetching %s -> %s (urllib)", url, dest)
        with urllib.request.urlopen(url, timeout=self.timeout_s) as resp, Path(dest).open("wb") as f:
            shutil.copyfileobj(resp, f, _CHUNK)
        return Path(dest)


class HttpxUrlProbe:
    def __init__(self, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.timeout_s = float(timeout_s)

    def is_available(self, url: str) -> bool:
        return url_available(url, timeout_s=self.timeout_s)


def url_available(url: str, *, timeout_s: float = DEFAULT_TIMEOUT_S) -> bool:
    """HEAD the URL following redirects; any 2xx final response counts as available."""
    try:
        with httpx.Client(follow_redirects=True, timeout=timeout_s) as client:
            resp = client.head(url)
    except httpx.TimeoutException:
        logger.debug("HEAD %s timed out after %ss", url, timeout_s)
        return False
    except httpx.RequestError as e:
        logger.debug("HEAD %s failed: %s", url, e)
        return False
    logger.debug("HEAD %s -> %s", url, resp.status_code)
    return 200 <= resp.status_code < 300
