from __future__ import annotations

import logging
from dataclasses import dataclass

from .adapters import BrowserOpener, VersionControl
from .config import PublisherConfig
from .render import CaskDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishedBranch:
    branch: str
    fork_url: str
    compare_url: str


def fork_url(cfg: PublisherConfig, repository: str) -> str:
    return f"https://github.com/{cfg.fork_owner}/{repository}.git"


def compare_url(cfg: PublisherConfig, repository: str, branch: str) -> str:
    return (
        f"https://github.com/{cfg.upstream_owner}/{repository}/compare/"
        f"{cfg.main_branch}...{cfg.fork_owner}:{branch}"
    )


def publish_cask(
    cask: CaskDefinition,
    *,
    repository: str,
    cfg: PublisherConfig,
    vcs: VersionControl,
    browser: BrowserOpener,
) -> PublishedBranch:
    """Commit the cask on a release branch, push it to the fork and open the PR page.

    `vcs` must operate on the tap's working tree (the parent of `Casks/`).
    """
    logger.info("🚚 Publishing...")
    branch = f"{cfg.branch_prefix}{cask.version}"
    remote_url = fork_url(cfg, repository)

    vcs.status()
    vcs.create_branch(branch)
    vcs.add(f"Casks/{cask.file_name}")
    vcs.commit(f"Add {cask.app_name}.app v{cask.version}")
    vcs.ensure_remote(cfg.fork_remote, remote_url)
    vcs.push(cfg.fork_remote, branch)
    vcs.checkout(cfg.main_branch)

    url = compare_url(cfg, repository, branch)
    logger.info("Opening %s", url)
    if not browser.open(url):
        logger.warning("Could not open a browser; create the pull request at %s", url)
    return PublishedBranch(branch=branch, fork_url=remote_url, compare_url=url)
