"""Interfaces for the external collaborators a publishing run depends on.

The pipeline only talks to these; `pipeline.Collaborators.default()` wires the
command-line and HTTP implementations, tests substitute fakes.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from pathlib import Path
from typing import Protocol


class Downloader(Protocol):
    def download(self, url: str, dest: Path) -> Path: ...


class UrlProbe(Protocol):
    def is_available(self, url: str) -> bool: ...


class ImageMounter(Protocol):
    def mounted(self, image: Path) -> AbstractContextManager[Path]: ...


class MetadataReader(Protocol):
    def read_version(self, app_path: Path) -> str: ...


class ChecksumComputer(Protocol):
    def compute(self, path: Path) -> str: ...


class PackageManager(Protocol):
    def repository(self) -> Path: ...

    def install(self, cask_name: str) -> None: ...

    def audit(self, cask_name: str) -> None: ...

    def style(self, cask_path: Path) -> None: ...


class VersionControl(Protocol):
    def status(self) -> None: ...

    def create_branch(self, branch: str) -> None: ...

    def add(self, path: str) -> None: ...

    def commit(self, message: str) -> None: ...

    def ensure_remote(self, name: str, url: str) -> None: ...

    def push(self, remote: str, branch: str) -> None: ...

    def checkout(self, branch: str) -> None: ...


class AppLauncher(Protocol):
    def launch(self, app_name: str) -> None: ...


class BrowserOpener(Protocol):
    def open(self, url: str) -> bool: ...
