from __future__ import annotations

import logging
from pathlib import Path

from . import shell

logger = logging.getLogger(__name__)


class BrewCli:
    """Homebrew driven through the `brew` executable."""

    def __init__(self, executable: str = "brew"):
        self.executable = executable

    def repository(self) -> Path:
        cp = shell.run([self.executable, "--repository"], capture=True)
        return Path(cp.stdout.strip())

    def install(self, cask_name: str) -> None:
        # Auto-update is suppressed for this call only; the parent environment is untouched.
        shell.run(
            [self.executable, "install", "--cask", cask_name, "--force"],
            env={"HOMEBREW_NO_AUTO_UPDATE": "1"},
        )

    def audit(self, cask_name: str) -> None:
        shell.run([self.executable, "audit", "--cask", "--online", cask_name])

    def style(self, cask_path: Path) -> None:
        shell.run([self.executable, "style", "--fix", str(cask_path)])
