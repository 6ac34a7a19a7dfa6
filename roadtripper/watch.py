"""Watch mode: a self-refreshing page showing the newest capture."""

import html
import os
import webbrowser
from datetime import datetime
from urllib.parse import quote

from .capture import image_month
from .config import CONFIG
from .models import Position

WATCH_HTML = '''<!DOCTYPE html>
<html>
<head>
    <title>Roadtripper - {name}</title>
    <meta charset="utf-8" />
    <meta http-equiv="refresh" content="{refresh}">
    <style>
        body {{ margin: 0; background: #111; color: #eee; font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; }}
        header {{ background: #1e293b; padding: 10px 20px; display: flex; justify-content: space-between; font-size: 14px; }}
        .alternate {{ background: #f97316; color: #000; padding: 2px 8px; border-radius: 10px; margin-left: 8px; }}
        img {{ display: block; max-width: 100%; max-height: calc(100vh - 44px); margin: 0 auto; }}
    </style>
</head>
<body>
    <header>
        <span>{caption}{alternate}</span>
        <span>{count} captured &middot; updated {updated}</span>
    </header>
    <img src="{src}" alt="{pano}" />
</body>
</html>'''


class ImageWatcher:
    """Keeps watch.html in the project directory pointed at the latest image"""

    def __init__(self, project_path: str, name: str = "", refresh: int = CONFIG["watch_refresh"],
                 open_browser: bool = True):
        self.project_path = project_path
        self.name = name
        self.refresh = refresh
        self.open_browser = open_browser
        self.page_path = os.path.join(project_path, "watch.html")
        self.count = 0
        self._opened = False

    def render(self, image_file: str, position: Position) -> str:
        rel = os.path.relpath(image_file, self.project_path).replace(os.sep, "/")
        caption = (f"{position.lat:.6f}, {position.lng:.6f} &middot; {image_month(position.date)} "
                   f"&middot; {html.escape(position.description or 'unknown road')}")
        return WATCH_HTML.format(
            name=html.escape(self.name),
            refresh=self.refresh,
            caption=caption,
            alternate='<span class="alternate">alternate</span>' if position.is_alternate else "",
            count=self.count,
            updated=datetime.now().strftime("%H:%M:%S"),
            src=quote(rel),
            pano=html.escape(position.pano or ""),
        )

    def __call__(self, image_file: str, position: Position):
        self.count += 1
        with open(self.page_path, "w", encoding="utf-8") as f:
            f.write(self.render(image_file, position))
        if self.open_browser and not self._opened:
            webbrowser.open(f"file://{os.path.abspath(self.page_path)}")
            self._opened = True
