from __future__ import annotations

import webbrowser

from . import shell


class OpenLauncher:
    def launch(self, app_name: str) -> None:
        shell.run(["open", "-a", app_name])


class WebBrowserOpener:
    def open(self, url: str) -> bool:
        return webbrowser.open(url)
