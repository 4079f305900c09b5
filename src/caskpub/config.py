from __future__ import annotations

import os
import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import config_path


@dataclass(frozen=True)
class PublisherConfig:
    # Application being packaged
    cask_name: str = "arduino-ide-2"
    app_name: str = "Arduino Pro IDE"
    host_path: str = "https://downloads.arduino.cc/arduino-pro-ide"
    homepage: str = "https://github.com/arduino/arduino-pro-ide"
    # "{app_name}" is substituted at render time.
    description: str = "The {app_name} is a modern Development Environment for Arduino Programming"

    # Nightly channel adjustments
    nightly_marker: str = "nightly"
    nightly_suffix: str = "-nightly"
    nightly_subdir: str = "nightly"

    # Tap repositories (stable builds go to the main cask tap, nightlies to the versions tap)
    tap_user: str = "homebrew"
    stable_repository: str = "homebrew-cask"
    nightly_repository: str = "homebrew-cask-versions"

    # Publishing
    upstream_owner: str = "Homebrew"
    fork_owner: str = "arduino"
    fork_remote: str = "fork"
    main_branch: str = "master"
    branch_prefix: str = "release-"

    http_timeout_s: float = 60.0

    # Run history
    history_log_enabled: bool = True

    def render_description(self) -> str:
        return self.description.replace("{app_name}", self.app_name)


_STR_KEYS = {f.name for f in fields(PublisherConfig) if f.type in ("str", str)}
_TRUTHY = {"1", "true", "yes", "y", "on"}


def _as_bool(raw: Any, default: bool) -> bool:
    if raw is None:
        return default
    if isinstance(raw, str):
        if raw.strip() == "":
            return default
        return raw.strip().lower() in _TRUTHY
    return bool(raw)


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}


def _coerce(cfg: Dict[str, Any]) -> PublisherConfig:
    # Keep this explicit so unknown keys are ignored.
    defaults = PublisherConfig()
    values: Dict[str, Any] = {}
    for key in _STR_KEYS:
        raw = cfg.get(key)
        if raw is not None and str(raw).strip() != "":
            values[key] = str(raw).strip()
    return replace(
        defaults,
        **values,
        http_timeout_s=float(cfg.get("http_timeout_s", defaults.http_timeout_s)),
        history_log_enabled=_as_bool(cfg.get("history_log_enabled"), defaults.history_log_enabled),
    )


def load_config(explicit_path: Optional[Path] = None) -> PublisherConfig:
    """Load config (global file + optional explicit file + environment)."""
    merged: Dict[str, Any] = {**asdict(PublisherConfig()), **_load_json(config_path())}
    if explicit_path is not None:
        # An explicit --config file must exist; a typo should not silently fall back.
        merged.update(json.loads(Path(explicit_path).read_text(encoding="utf-8")))
    cfg = _coerce(merged)

    # Environment overrides (highest precedence), e.g. CASKPUB_HOST_PATH.
    env_values: Dict[str, str] = {}
    for key in _STR_KEYS:
        env_v = os.environ.get(f"CASKPUB_{key.upper()}")
        if env_v is not None and env_v.strip() != "":
            env_values[key] = env_v.strip()
    if env_values:
        cfg = replace(cfg, **env_values)

    cfg = replace(cfg, history_log_enabled=_as_bool(os.environ.get("CASKPUB_HISTORY_LOG_ENABLED"), cfg.history_log_enabled))

    return cfg

