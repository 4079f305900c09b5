from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union


def caskpub_home() -> Path:
    override = os.environ.get("CASKPUB_HOME")
    if override:
        return Path(override).expanduser().resolve()
    return (Path.home() / ".caskpub").resolve()


def ensure_caskpub_home() -> Path:
    home = caskpub_home()
    home.mkdir(parents=True, exist_ok=True)
    return home


def config_path() -> Path:
    return caskpub_home() / "config.json"


def history_log_path() -> Path:
    return caskpub_home() / "history.log.jsonl"


def tap_casks_dir(brew_repository: Union[str, Path], *, tap_user: str, repository: str) -> Path:
    """Casks directory of a tap checked out under the Homebrew repository.

    Mirrors the layout `brew tap` creates:
    `<brew --repository>/Library/Taps/<user>/<repository>/Casks`.
    """

    return Path(brew_repository) / "Library" / "Taps" / tap_user / repository / "Casks"


def resolve_user_path(path: Union[str, Path], *, base: Optional[Path] = None) -> Path:
    """Resolve a user-provided path.

    - "~" expands to the user's home.
    - Relative paths resolve against `base` when given, else the current working directory.
    """

    p = Path(path).expanduser()
    if not p.is_absolute() and base is not None:
        p = Path(base) / p
    return p.resolve()
