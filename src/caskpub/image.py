from __future__ import annotations

import hashlib
import logging
import plistlib
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional
from xml.parsers.expat import ExpatError

from . import shell
from .acquire import ImageArtifact
from .adapters import ChecksumComputer, ImageMounter, MetadataReader
from .errors import BundleNotFound, MetadataError

logger = logging.getLogger(__name__)

VERSION_KEY = "CFBundleShortVersionString"


@dataclass(frozen=True)
class AppMetadata:
    version: str
    checksum: str
    app_path: str


def parse_attach_plist(stdout: str) -> List[Dict[str, Any]]:
    """Return the `system-entities` reported by `hdiutil attach -plist`.

    hdiutil may print license agreement text before the plist; everything before
    the XML declaration is skipped.
    """
    match = re.search(r"^<\?xml", stdout, re.M)
    if match is None:
        raise MetadataError("hdiutil attach did not print a plist")
    try:
        plist = plistlib.loads(stdout[match.start():].encode("utf-8"))
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        raise MetadataError(f"hdiutil attach printed an unreadable plist: {e}") from e
    if not isinstance(plist, dict):
        raise MetadataError("hdiutil attach printed a plist without system-entities")
    return list(plist.get("system-entities", []))


def detach_target(entities: List[Dict[str, Any]]) -> Optional[str]:
    """Pick what to hand to `hdiutil detach`: the first mount point, else the first device."""
    for entity in entities:
        if "mount-point" in entity:
            return entity["mount-point"]
    for entity in entities:
        if "dev-entry" in entity:
            return entity["dev-entry"]
    return None


class HdiutilMounter:
    """Attach disk images read-only with hdiutil; detaches on every exit path."""

    @contextmanager
    def mounted(self, image: Path) -> Iterator[Path]:
        logger.info("Mounting image %s ...", image)
        # "qy" answers any license agreement prompt.
        cp = shell.run(
            ["hdiutil", "attach", "-plist", "-readonly", "-noidme", "-nobrowse", str(image)],
            input="qy\n",
            capture=True,
        )
        entities = parse_attach_plist(cp.stdout)
        target = detach_target(entities)
        try:
            mount_points = [e["mount-point"] for e in entities if "mount-point" in e]
            if len(mount_points) > 1:
                raise MetadataError(f"Disk image has multiple mount points: {mount_points}")
            if not mount_points:
                raise MetadataError(f"Attached {image} but found no mount point")
            logger.debug("Mounted %s at %s", image, mount_points[0])
            yield Path(mount_points[0])
        finally:
            # Detaching one mount point detaches the whole image.
            if target is not None:
                shell.run(["hdiutil", "detach", target, "-quiet"])
                logger.debug("Detached %s", target)


class PlistMetadataReader:
    def read_version(self, app_path: Path) -> str:
        info = Path(app_path) / "Contents" / "Info.plist"
        try:
            with info.open("rb") as f:
                data = plistlib.load(f)
        except FileNotFoundError as e:
            raise MetadataError(f"No Info.plist at {info}") from e
        version = data.get(VERSION_KEY)
        if not version:
            raise MetadataError(f"{VERSION_KEY} missing from {info}")
        return str(version)


class Sha256Checksum:
    def compute(self, path: Path) -> str:
        digest = hashlib.sha256()
        with Path(path).open("rb") as file_obj:
            while True:
                chunk = file_obj.read(65536)
                if not chunk:
                    break
                digest.update(chunk)
        return digest.hexdigest()


def find_app_bundle(mount_point: Path, app_name: str) -> Path:
    exact = Path(mount_point) / f"{app_name}.app"
    if exact.is_dir():
        return exact
    candidates = sorted(p for p in Path(mount_point).glob("*.app") if p.name.startswith(app_name))
    if not candidates:
        raise BundleNotFound(app_name, mount_point)
    return candidates[0]


def extract_metadata(
    artifact: ImageArtifact,
    *,
    app_name: str,
    mounter: ImageMounter,
    reader: MetadataReader,
    checksum: ChecksumComputer,
) -> AppMetadata:
    with mounter.mounted(artifact.path) as mount_point:
        app_path = find_app_bundle(mount_point, app_name)
        logger.info("🎯 App path: %s", app_path)
        version = reader.read_version(app_path)
        logger.info("📱 App version: %s", version)

    sha = checksum.compute(artifact.path)
    logger.info("👀 SHA 256 Checksum: %s", sha)
    return AppMetadata(version=version, checksum=sha, app_path=str(app_path))
