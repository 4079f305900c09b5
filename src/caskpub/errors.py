from __future__ import annotations

import subprocess


class CaskPubError(RuntimeError):
    """Base class for failures that end a run with a specific exit code."""

    exit_code: int = 1


class UsageError(CaskPubError):
    exit_code = 1


class HelpRequested(UsageError):
    pass


class ImageNotFound(CaskPubError):
    exit_code = 2

    def __init__(self, path: object):
        super().__init__(f"Target image not found at {path}")
        self.path = path


class RemoteUnavailable(CaskPubError):
    exit_code = 3

    def __init__(self, url: str):
        super().__init__(f"Resource at {url} not available.")
        self.url = url


class TapDirectoryMissing(CaskPubError):
    exit_code = 4

    def __init__(self, directory: object):
        super().__init__(f"No cask directory found at {directory}")
        self.directory = directory


class MetadataError(CaskPubError):
    exit_code = 5


class BundleNotFound(MetadataError):
    def __init__(self, app_name: str, mount_point: object):
        super().__init__(f"No {app_name}.app found in volume {mount_point}")
        self.app_name = app_name
        self.mount_point = mount_point


class ToolFailure(CaskPubError):
    exit_code = 6

    @classmethod
    def from_called_process_error(cls, exc: subprocess.CalledProcessError) -> "ToolFailure":
        cmd = exc.cmd if isinstance(exc.cmd, str) else " ".join(str(c) for c in exc.cmd)
        detail = exc.stderr or exc.stdout or ""
        if not isinstance(detail, str):
            detail = ""
        detail = detail.strip()
        msg = f"`{cmd}` failed (exit={exc.returncode})"
        if detail:
            msg += f": {detail}"
        return cls(msg)


class DownloadFailed(CaskPubError):
    exit_code = 2

    def __init__(self, url: str, reason: object):
        super().__init__(f"Could not download {url}: {reason}")
        self.url = url


class VersionRequested(CaskPubError):
    exit_code = 0
