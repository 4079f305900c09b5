from __future__ import annotations

import logging
import posixpath
import re
import urllib.parse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .adapters import Downloader
from .errors import ImageNotFound

logger = logging.getLogger(__name__)

URL_RE = re.compile(r"(https?|ftp|file)://[-A-Za-z0-9+&@#/%?=~_|!:,.;]*[-A-Za-z0-9+&@#/%=~_|]")


@dataclass(frozen=True)
class ImageArtifact:
    path: Path
    is_remote: bool
    source: str

    @property
    def name(self) -> str:
        """File name the image is published under on the download host."""
        return self.path.name


def is_url(value: str) -> bool:
    return URL_RE.search(value) is not None


def url_basename(url: str) -> str:
    return posixpath.basename(urllib.parse.urlparse(url).path)


def acquire_image(source: str, *, downloader: Downloader, workdir: Optional[Path] = None) -> ImageArtifact:
    """Return a local image for `source`, downloading it first when it is a URL.

    Local paths are returned unchanged. Downloads land in `workdir` (default: the
    current directory) under the URL's basename, replacing any existing file.
    """
    if is_url(source):
        name = url_basename(source)
        if not name:
            raise ImageNotFound(source)
        dest = Path(workdir or Path.cwd()) / name
        logger.info("Downloading file %s ...", source)
        downloader.download(source, dest)
        logger.info("Image ready at %s", dest)
        artifact = ImageArtifact(path=dest, is_remote=True, source=source)
    else:
        logger.info("Using local file %s", source)
        artifact = ImageArtifact(path=Path(source), is_remote=False, source=source)

    if not artifact.path.is_file():
        raise ImageNotFound(artifact.path)
    return artifact
