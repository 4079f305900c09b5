"""Append-only JSON-lines record of casks installed into a tap and branches published."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Dict, Optional

from . import __version__
from .paths import ensure_caskpub_home, history_log_path


def append_event(kind: str, payload: Dict[str, Any], *, log_path: Optional[Path] = None) -> Path:
    if log_path is None:
        ensure_caskpub_home()
        log_path = history_log_path()
    record = {"ts": time.time(), "kind": kind, "caskpub": __version__, "payload": payload}
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with log_path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, sort_keys=True) + "\n")
    return log_path
