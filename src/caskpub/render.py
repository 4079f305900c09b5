from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaskDefinition:
    cask_name: str
    app_name: str
    version: str
    sha256: str
    url: str
    homepage: str
    description: str

    @property
    def file_name(self) -> str:
        return f"{self.cask_name}.rb"

    @property
    def verified_host(self) -> str:
        return urllib.parse.urlparse(self.url).netloc


def download_url(host_path: str, image_name: str) -> str:
    return f"{host_path.rstrip('/')}/{image_name}"


def render_cask(cask: CaskDefinition) -> str:
    return f'''cask "{cask.cask_name}" do
  version "{cask.version}"
  sha256 "{cask.sha256}"

  # {cask.verified_host} was verified as official when first introduced to the cask
  url "{cask.url}"
  name "{cask.app_name}"
  desc "{cask.description}"
  homepage "{cask.homepage}"

  app "{cask.app_name}.app"
end
'''


def write_cask_file(cask: CaskDefinition, directory: Path) -> Path:
    """Write `<cask_name>.rb` into `directory`, replacing any previous file."""
    out = Path(directory) / cask.file_name
    logger.info("📦 Generating cask file %s at %s ...", cask.file_name, Path(directory).resolve())
    text = render_cask(cask)
    out.write_text(text, encoding="utf-8")
    logger.info("\n%s", text)
    return out
