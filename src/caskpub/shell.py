from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

from .errors import ToolFailure

logger = logging.getLogger(__name__)


def run(
    cmd: List[str],
    *,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
    capture: bool = False,
    input: Optional[str] = None,
) -> subprocess.CompletedProcess[str]:
    """Run an external tool and raise CalledProcessError on a non-zero exit.

    Output is streamed to the terminal unless `capture` is set. `env` entries are
    layered over the current environment for this call only. A missing executable
    raises ToolFailure.
    """
    logger.debug("Running %r (cwd=%s)", cmd, cwd or ".")
    full_env = None
    if env:
        full_env = {**os.environ, **env}
    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=full_env,
            input=input,
            check=True,
            capture_output=capture,
            text=True,
        )
    except FileNotFoundError as e:
        if e.filename != cmd[0]:
            raise
        raise ToolFailure(f"`{cmd[0]}` not found on PATH") from e
