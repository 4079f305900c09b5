from __future__ import annotations

import enum
from dataclasses import dataclass

from .config import PublisherConfig


class ReleaseChannel(enum.Enum):
    STABLE = "stable"
    NIGHTLY = "nightly"


@dataclass(frozen=True)
class ChannelTarget:
    channel: ReleaseChannel
    cask_name: str
    host_path: str
    repository: str


def resolve_channel(version: str, cfg: PublisherConfig) -> ChannelTarget:
    if cfg.nightly_marker in version:
        return ChannelTarget(
            channel=ReleaseChannel.NIGHTLY,
            cask_name=f"{cfg.cask_name}{cfg.nightly_suffix}",
            host_path=f"{cfg.host_path.rstrip('/')}/{cfg.nightly_subdir}",
            repository=cfg.nightly_repository,
        )
    return ChannelTarget(
        channel=ReleaseChannel.STABLE,
        cask_name=cfg.cask_name,
        host_path=cfg.host_path.rstrip("/"),
        repository=cfg.stable_repository,
    )
