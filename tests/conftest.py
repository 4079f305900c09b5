from __future__ import annotations

import plistlib
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import pytest


# Ensure the src-layout package is importable when running `pytest` without
# installing the project.
_ROOT = Path(__file__).resolve().parents[1]
_SRC = _ROOT / "src"
if _SRC.exists() and str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from caskpub.config import PublisherConfig  # noqa: E402
from caskpub.image import Sha256Checksum, PlistMetadataReader  # noqa: E402
from caskpub.pipeline import Collaborators  # noqa: E402


def write_app_bundle(volume: Path, app_name: str, version: str) -> Path:
    app = volume / f"{app_name}.app"
    (app / "Contents").mkdir(parents=True, exist_ok=True)
    with (app / "Contents" / "Info.plist").open("wb") as f:
        plistlib.dump({"CFBundleShortVersionString": version, "CFBundleName": app_name}, f)
    return app


def write_dummy_cli(path: Path, log: Path, *, exit_code: int = 0, stdout: str = "") -> None:
    path.write_text(
        """#!/usr/bin/env bash
echo "$(basename "$0") $*" >> "{log}"
printf '%s' '{stdout}'
exit {code}
""".format(log=str(log), stdout=stdout, code=int(exit_code)),
        encoding="utf-8",
    )
    path.chmod(0o755)


class FakeDownloader:
    def __init__(self, payload: bytes = b"downloaded-image"):
        self.payload = payload
        self.calls: List[tuple[str, Path]] = []

    def download(self, url: str, dest: Path) -> Path:
        self.calls.append((url, dest))
        Path(dest).write_bytes(self.payload)
        return Path(dest)


class FakeProbe:
    def __init__(self, available: bool = True):
        self.available = available
        self.checked: List[str] = []

    def is_available(self, url: str) -> bool:
        self.checked.append(url)
        return self.available


class FakeMounter:
    """Mounts every image as a prepared directory holding one app bundle."""

    def __init__(self, volume: Path, app_name: str, version: str):
        self.volume = volume
        write_app_bundle(volume, app_name, version)
        self.attached: List[Path] = []
        self.detached: List[Path] = []

    @contextmanager
    def mounted(self, image: Path) -> Iterator[Path]:
        self.attached.append(Path(image))
        try:
            yield self.volume
        finally:
            self.detached.append(Path(image))


class FakePackageManager:
    def __init__(self, brew_repository: Path):
        self.brew_repository = brew_repository
        self.calls: List[tuple[str, str]] = []

    def repository(self) -> Path:
        return self.brew_repository

    def install(self, cask_name: str) -> None:
        self.calls.append(("install", cask_name))

    def audit(self, cask_name: str) -> None:
        self.calls.append(("audit", cask_name))

    def style(self, cask_path: Path) -> None:
        self.calls.append(("style", str(cask_path)))


class FakeVcs:
    def __init__(self, worktree: Path, log: List[tuple]):
        self.worktree = worktree
        self.log = log

    def status(self) -> None:
        self.log.append(("status",))

    def create_branch(self, branch: str) -> None:
        self.log.append(("create_branch", branch))

    def add(self, path: str) -> None:
        self.log.append(("add", path))

    def commit(self, message: str) -> None:
        self.log.append(("commit", message))

    def ensure_remote(self, name: str, url: str) -> None:
        self.log.append(("ensure_remote", name, url))

    def push(self, remote: str, branch: str) -> None:
        self.log.append(("push", remote, branch))

    def checkout(self, branch: str) -> None:
        self.log.append(("checkout", branch))


class FakeLauncher:
    def __init__(self) -> None:
        self.launched: List[str] = []

    def launch(self, app_name: str) -> None:
        self.launched.append(app_name)


class FakeBrowser:
    def __init__(self) -> None:
        self.opened: List[str] = []

    def open(self, url: str) -> bool:
        self.opened.append(url)
        return True


@pytest.fixture()
def tmp_caskpub_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "caskpub_home"
    home.mkdir()
    monkeypatch.setenv("CASKPUB_HOME", str(home))
    for key in ("CASKPUB_CASK_NAME", "CASKPUB_APP_NAME", "CASKPUB_HOST_PATH", "CASKPUB_HISTORY_LOG_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture()
def brew_repo(tmp_path: Path) -> Path:
    """A fake `brew --repository` with the stable and nightly cask taps checked out."""
    repo = tmp_path / "homebrew"
    for name in ("homebrew-cask", "homebrew-cask-versions"):
        (repo / "Library" / "Taps" / "homebrew" / name / "Casks").mkdir(parents=True)
    return repo


def make_deps(
    tmp_path: Path,
    brew_repo: Path,
    *,
    version: str = "2.0.0",
    available: bool = True,
    cfg: Optional[PublisherConfig] = None,
) -> tuple[Collaborators, List[tuple]]:
    cfg = cfg or PublisherConfig()
    vcs_log: List[tuple] = []
    deps = Collaborators(
        downloader=FakeDownloader(),
        probe=FakeProbe(available=available),
        mounter=FakeMounter(tmp_path / "volume", cfg.app_name, version),
        reader=PlistMetadataReader(),
        checksum=Sha256Checksum(),
        package_manager=FakePackageManager(brew_repo),
        launcher=FakeLauncher(),
        browser=FakeBrowser(),
        vcs_factory=lambda worktree: FakeVcs(worktree, vcs_log),
    )
    return deps, vcs_log


@pytest.fixture()
def publisher_deps(tmp_path: Path, brew_repo: Path):
    """Factory: build fake collaborators for a run; returns (deps, vcs_log)."""

    def _make(**kwargs):
        return make_deps(tmp_path, brew_repo, **kwargs)

    return _make


@pytest.fixture()
def dummy_cli():
    return write_dummy_cli


@pytest.fixture()
def app_bundle():
    return write_app_bundle
