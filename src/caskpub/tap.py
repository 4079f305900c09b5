from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .adapters import PackageManager
from .errors import TapDirectoryMissing
from .paths import tap_casks_dir

logger = logging.getLogger(__name__)


def resolve_tap_dir(package_manager: PackageManager, *, tap_user: str, repository: str) -> Path:
    casks = tap_casks_dir(package_manager.repository(), tap_user=tap_user, repository=repository)
    if not casks.is_dir():
        raise TapDirectoryMissing(casks)
    return casks


def install_into_tap(cask_file: Path, tap_dir: Path) -> Path:
    """Copy a rendered cask into the tap's Casks directory, replacing the old one."""
    if not Path(tap_dir).is_dir():
        raise TapDirectoryMissing(tap_dir)
    dst = Path(tap_dir) / Path(cask_file).name
    if dst.exists():
        logger.info("👋 Removing old cask file at %s", dst)
        dst.unlink()
    logger.info("👉 Copying %s to %s", cask_file, dst)
    shutil.copyfile(cask_file, dst)
    return dst
