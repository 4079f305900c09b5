from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from . import shell


class GitCli:
    """git operations inside a single working tree."""

    def __init__(self, worktree: Path, executable: str = "git"):
        self.worktree = Path(worktree)
        self.executable = executable

    def _git(self, *args: str, capture: bool = False) -> subprocess.CompletedProcess[str]:
        return shell.run([self.executable, *args], cwd=self.worktree, capture=capture)

    def status(self) -> None:
        self._git("status")

    def create_branch(self, branch: str) -> None:
        self._git("checkout", "-b", branch)

    def add(self, path: str) -> None:
        self._git("add", path)

    def commit(self, message: str) -> None:
        self._git("commit", "-m", message)

    def remote_url(self, name: str) -> Optional[str]:
        try:
            cp = self._git("remote", "get-url", name, capture=True)
        except subprocess.CalledProcessError:
            return None
        return cp.stdout.strip() or None

    def ensure_remote(self, name: str, url: str) -> None:
        current = self.remote_url(name)
        if current is None:
            self._git("remote", "add", name, url)
        elif current != url:
            self._git("remote", "set-url", name, url)
        self._git("remote", "-v")

    def push(self, remote: str, branch: str) -> None:
        self._git("push", remote, branch)

    def checkout(self, branch: str) -> None:
        self._git("checkout", branch)
