"""Panorama session: the browser-side Street View viewer the navigator drives."""

from typing import Optional, Protocol

from playwright.async_api import async_playwright

from .config import NavigatorConfig
from .errors import SessionError
from .models import PanoRecord


class PanoramaSession(Protocol):
    """What the navigator needs from a panorama viewer"""

    async def fetch_current_position(self) -> tuple[str, float]: ...

    async def fetch_pano_data(self, pano: str) -> Optional[PanoRecord]: ...

    async def move_to(self, pano: str, heading: float) -> None: ...

    async def initialize_panorama(self, lat: float, lng: float, heading: float,
                                  pano: Optional[str] = None) -> None: ...

    async def screenshot(self, path: str, quality: int) -> None: ...


# Page served on localhost so the Maps API sees a normal http referer
VIEWPORT_HTML = '''<!DOCTYPE html>
<html>
<head>
    <title>Roadtripper Viewport</title>
    <meta charset="utf-8" />
    <style>
        html, body { margin: 0; padding: 0; height: 100%; overflow: hidden; background: #000; }
        #pano { width: 100%; height: 100%; }
    </style>
</head>
<body>
    <div id="pano"></div>
    <script>
        var panorama = null;
        var service = null;

        function timeEntryDate(entry) {
            for (var key in entry) {
                if (entry[key] instanceof Date) {
                    var d = entry[key];
                    var month = ('0' + (d.getMonth() + 1)).slice(-2);
                    return d.getFullYear() + '-' + month;
                }
            }
            return null;
        }

        window.initPanoramaV = function(lat, lng, heading, pano) {
            service = service || new google.maps.StreetViewService();
            var options = {
                pov: { heading: heading || 0, pitch: 0 },
                zoom: 0,
                disableDefaultUI: true,
                showRoadLabels: false,
                clickToGo: false,
                linksControl: false
            };
            if (pano) {
                options.pano = pano;
            } else {
                options.position = { lat: lat, lng: lng };
            }
            return new Promise(function(resolve) {
                panorama = new google.maps.StreetViewPanorama(document.getElementById('pano'), options);
                google.maps.event.addListenerOnce(panorama, 'status_changed', function() {
                    resolve(panorama.getStatus());
                });
            });
        };

        window.getCurrentPositionPanoV = function() {
            if (!panorama) { return null; }
            return { pano: panorama.getPano(), heading: panorama.getPov().heading };
        };

        window.getPanoDataV = function(pano) {
            service = service || new google.maps.StreetViewService();
            return new Promise(function(resolve) {
                service.getPanorama({ pano: pano }, function(data, status) {
                    if (status !== google.maps.StreetViewStatus.OK || !data) {
                        resolve(null);
                        return;
                    }
                    resolve({
                        pano: data.location.pano,
                        lat: data.location.latLng.lat(),
                        lng: data.location.latLng.lng(),
                        date: data.imageDate || null,
                        description: data.location.description || null,
                        links: (data.links || []).map(function(l) {
                            return { pano: l.pano, heading: l.heading };
                        }),
                        times: (data.time || []).map(function(t) {
                            return { pano: t.pano, date: timeEntryDate(t) };
                        })
                    });
                });
            });
        };

        window.moveToPanoV = function(pano, heading) {
            panorama.setPano(pano);
            panorama.setPov({ heading: heading, pitch: 0 });
            return true;
        };
    </script>
</body>
</html>'''

IGNORED_CONSOLE = "Google Maps JavaScript API has been loaded directly"
IGNORED_FAILED_HOST = "maps.gstatic.com"


class BrowserSession:
    """Street View viewer in a Chromium page, driven with Playwright"""

    def __init__(self, config: NavigatorConfig, logger, headless: bool = True):
        self.config = config
        self.logger = logger
        self.headless = headless
        self.viewport_url = f"http://localhost:{config.viewport_port}/"
        self._playwright = None
        self.browser = None
        self.page = None

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def start(self):
        api_key = self.config.require_api_key()
        self._playwright = await async_playwright().start()
        self.browser = await self._playwright.chromium.launch(headless=self.headless)
        self.page = await self.browser.new_page(
            viewport={"width": self.config.width, "height": self.config.height}
        )
        self.page.on("console", self._on_console)
        self.page.on("requestfailed", self._on_request_failed)

        async def serve_viewport(route):
            await route.fulfill(content_type="text/html", body=VIEWPORT_HTML)

        await self.page.route(self.viewport_url, serve_viewport)
        await self.page.goto(self.viewport_url)
        await self.page.add_script_tag(
            url=f"https://maps.googleapis.com/maps/api/js?key={api_key}"
        )
        await self.page.wait_for_function("() => window.google && window.google.maps")
        self.logger.info("Google Maps API loaded")

    async def close(self):
        if self.browser:
            await self.browser.close()
            self.browser = None
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None

    def _on_console(self, msg):
        if IGNORED_CONSOLE in msg.text:
            return
        self.logger.info(f"Viewport log: {msg.text}")

    def _on_request_failed(self, request):
        if IGNORED_FAILED_HOST in request.url:
            return
        self.logger.error(f"FAILED REQUEST: {request.url} - {request.failure}")

    async def wait_for_ready(self):
        """Wait for tiles to finish loading, then give them time to render"""
        await self.page.wait_for_load_state("networkidle")
        await self.page.wait_for_timeout(self.config.step_delay)

    async def fetch_current_position(self) -> tuple[str, float]:
        data = await self.page.evaluate("() => getCurrentPositionPanoV()")
        if not data or not data.get("pano"):
            raise SessionError("Viewer has no current panorama")
        return data["pano"], float(data.get("heading") or 0)

    async def fetch_pano_data(self, pano: str) -> Optional[PanoRecord]:
        data = await self.page.evaluate("(pano) => getPanoDataV(pano)", pano)
        if not data:
            return None
        return PanoRecord.from_dict(data)

    async def move_to(self, pano: str, heading: float) -> None:
        await self.page.evaluate(
            "([pano, heading]) => moveToPanoV(pano, heading)", [pano, heading]
        )
        await self.wait_for_ready()

    async def initialize_panorama(self, lat: float, lng: float, heading: float,
                                  pano: Optional[str] = None) -> None:
        status = await self.page.evaluate(
            "([lat, lng, heading, pano]) => initPanoramaV(lat, lng, heading, pano)",
            [lat, lng, heading, pano],
        )
        if status != "OK":
            raise SessionError(
                f"Street View could not open a panorama at {lat}, {lng} (status {status})"
            )
        await self.wait_for_ready()

    async def screenshot(self, path: str, quality: int) -> None:
        await self.page.screenshot(path=path, type="jpeg", quality=quality)
