from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .acquire import acquire_image
from .adapters import (
    AppLauncher,
    BrowserOpener,
    ChecksumComputer,
    Downloader,
    ImageMounter,
    MetadataReader,
    PackageManager,
    UrlProbe,
    VersionControl,
)
from .brew import BrewCli
from .channel import ChannelTarget, ReleaseChannel, resolve_channel
from .config import PublisherConfig
from .errors import RemoteUnavailable
from .history import append_event
from .image import AppMetadata, HdiutilMounter, PlistMetadataReader, Sha256Checksum, extract_metadata
from .launcher import OpenLauncher, WebBrowserOpener
from .publish import PublishedBranch, publish_cask
from .remote import HttpxDownloader, HttpxUrlProbe
from .render import CaskDefinition, download_url, write_cask_file
from .tap import install_into_tap, resolve_tap_dir
from .vcs import GitCli

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvocationArgs:
    image: str
    install: bool = False
    launch: bool = False
    test: bool = False
    publish: bool = False
    verbose: bool = False
    config_path: Optional[Path] = None


@dataclass
class Collaborators:
    downloader: Downloader
    probe: UrlProbe
    mounter: ImageMounter
    reader: MetadataReader
    checksum: ChecksumComputer
    package_manager: PackageManager
    launcher: AppLauncher
    browser: BrowserOpener
    vcs_factory: Callable[[Path], VersionControl] = field(default=GitCli)

    @classmethod
    def default(cls, cfg: PublisherConfig) -> "Collaborators":
        return cls(
            downloader=HttpxDownloader(timeout_s=cfg.http_timeout_s),
            probe=HttpxUrlProbe(timeout_s=cfg.http_timeout_s),
            mounter=HdiutilMounter(),
            reader=PlistMetadataReader(),
            checksum=Sha256Checksum(),
            package_manager=BrewCli(),
            launcher=OpenLauncher(),
            browser=WebBrowserOpener(),
        )


@dataclass(frozen=True)
class PublishResult:
    cask: CaskDefinition
    target: ChannelTarget
    metadata: AppMetadata
    local_path: Path
    tap_path: Path
    published: Optional[PublishedBranch] = None


def build_cask(metadata: AppMetadata, target: ChannelTarget, *, image_name: str, cfg: PublisherConfig) -> CaskDefinition:
    return CaskDefinition(
        cask_name=target.cask_name,
        app_name=cfg.app_name,
        version=metadata.version,
        sha256=metadata.checksum,
        url=download_url(target.host_path, image_name),
        homepage=cfg.homepage,
        description=cfg.render_description(),
    )


def run(
    args: InvocationArgs,
    cfg: PublisherConfig,
    deps: Collaborators,
    *,
    workdir: Optional[Path] = None,
) -> PublishResult:
    """Run one publishing pass: acquire, inspect, render, install into the tap, then the opt-in actions."""
    workdir = Path(workdir or Path.cwd())

    artifact = acquire_image(args.image, downloader=deps.downloader, workdir=workdir)
    metadata = extract_metadata(
        artifact,
        app_name=cfg.app_name,
        mounter=deps.mounter,
        reader=deps.reader,
        checksum=deps.checksum,
    )

    target = resolve_channel(metadata.version, cfg)
    logger.info("📣 Creating a %s cask...", "nightly build" if target.channel is ReleaseChannel.NIGHTLY else "stable release")

    cask = build_cask(metadata, target, image_name=artifact.name, cfg=cfg)
    if not deps.probe.is_available(cask.url):
        raise RemoteUnavailable(cask.url)

    local_path = write_cask_file(cask, workdir)
    tap_dir = resolve_tap_dir(deps.package_manager, tap_user=cfg.tap_user, repository=target.repository)
    tap_path = install_into_tap(local_path, tap_dir)
    if cfg.history_log_enabled:
        append_event(
            "cask_installed",
            {"cask": cask.cask_name, "version": cask.version, "sha256": cask.sha256, "tap_path": str(tap_path)},
        )

    if args.install:
        deps.package_manager.install(cask.cask_name)

    if args.test:
        deps.package_manager.audit(cask.cask_name)
        deps.package_manager.style(tap_path)

    published: Optional[PublishedBranch] = None
    if args.publish:
        published = publish_cask(
            cask,
            repository=target.repository,
            cfg=cfg,
            vcs=deps.vcs_factory(tap_dir.parent),
            browser=deps.browser,
        )
        if cfg.history_log_enabled:
            append_event("cask_published", {"branch": published.branch, "compare_url": published.compare_url})

    if args.launch:
        deps.launcher.launch(cfg.app_name)

    logger.info("✅ Cask '%s' generated", cask.cask_name)
    return PublishResult(
        cask=cask,
        target=target,
        metadata=metadata,
        local_path=local_path,
        tap_path=tap_path,
        published=published,
    )
