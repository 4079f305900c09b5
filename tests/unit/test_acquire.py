from __future__ import annotations

from pathlib import Path

import pytest

from caskpub.acquire import acquire_image, is_url, url_basename
from caskpub.errors import ImageNotFound


class _ExplodingDownloader:
    def download(self, url, dest):
        raise AssertionError("no network access expected")


class _RecordingDownloader:
    def __init__(self):
        self.calls = []

    def download(self, url, dest):
        self.calls.append((url, dest))
        Path(dest).write_bytes(b"dmg")
        return Path(dest)


@pytest.mark.parametrize(
    "value",
    [
        "https://downloads.arduino.cc/arduino-pro-ide/arduino-pro-ide_0.1.0_macOS.dmg",
        "http://example.com/a.dmg",
        "ftp://mirror.example.org/pub/a.dmg",
        "file:///tmp/a.dmg",
    ],
)
def test_is_url_accepts_supported_schemes(value):
    assert is_url(value)


@pytest.mark.parametrize("value", ["a.dmg", "./build/a.dmg", "/tmp/a.dmg", "ssh://host/a.dmg"])
def test_is_url_rejects_paths_and_other_schemes(value):
    assert not is_url(value)


def test_url_basename_drops_query():
    assert url_basename("https://host/dir/App_1.0.dmg?token=abc") == "App_1.0.dmg"


def test_local_path_is_used_unchanged(tmp_path: Path):
    image = tmp_path / "App.dmg"
    image.write_bytes(b"dmg")
    artifact = acquire_image(str(image), downloader=_ExplodingDownloader())
    assert artifact.path == image
    assert artifact.is_remote is False
    assert artifact.name == "App.dmg"


def test_missing_local_file_raises(tmp_path: Path):
    with pytest.raises(ImageNotFound) as exc_info:
        acquire_image(str(tmp_path / "missing.dmg"), downloader=_ExplodingDownloader())
    assert exc_info.value.exit_code == 2
    assert "missing.dmg" in str(exc_info.value)


def test_url_is_downloaded_under_its_basename(tmp_path: Path):
    downloader = _RecordingDownloader()
    url = "https://downloads.example.com/app/App_2.0.0_macOS.dmg"
    artifact = acquire_image(url, downloader=downloader, workdir=tmp_path)
    assert downloader.calls == [(url, tmp_path / "App_2.0.0_macOS.dmg")]
    assert artifact.path == tmp_path / "App_2.0.0_macOS.dmg"
    assert artifact.is_remote is True
    assert artifact.source == url


def test_download_that_produces_no_file_raises(tmp_path: Path):
    class _NoOp:
        def download(self, url, dest):
            return Path(dest)

    with pytest.raises(ImageNotFound):
        acquire_image("https://host/App.dmg", downloader=_NoOp(), workdir=tmp_path)
