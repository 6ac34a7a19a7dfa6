"""Configuration settings for Roadtripper."""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError

CONFIG = {
    "arrival_radius": 25,  # meters - waypoint counts as reached inside this
    "link_max_difference": 90,  # degrees - widest link accepted off the target heading
    "stuck_link_max_difference": 135,  # degrees - relaxed cone right after a stuck recovery
    "recently_visited_limit": 10,  # panos kept for short-horizon loop avoidance
    "step_delay": 5000,  # ms to wait after the network goes idle
    "width": 1920,
    "height": 1080,
    "jpeg_quality": 60,
    "min_image_year": None,  # reject imagery captured before this year
    "max_image_age_months": None,  # reject imagery older than this
    "watch_refresh": 3,  # seconds between watch page reloads
    "viewport_port": 3000,
}

# environment variable -> NavigatorConfig field
ENV_VARS = {
    "NAVIGATOR_STEP_DELAY": "step_delay",
    "NAVIGATOR_WIDTH": "width",
    "NAVIGATOR_HEIGHT": "height",
    "NAVIGATOR_JPEG_QUALITY": "jpeg_quality",
    "NAVIGATOR_MIN_IMAGE_YEAR": "min_image_year",
    "NAVIGATOR_MAX_IMAGE_AGE_MONTHS": "max_image_age_months",
}


@dataclass
class NavigatorConfig:
    api_key: Optional[str] = None
    arrival_radius: float = CONFIG["arrival_radius"]
    link_max_difference: float = CONFIG["link_max_difference"]
    stuck_link_max_difference: float = CONFIG["stuck_link_max_difference"]
    recently_visited_limit: int = CONFIG["recently_visited_limit"]
    step_delay: int = CONFIG["step_delay"]
    width: int = CONFIG["width"]
    height: int = CONFIG["height"]
    jpeg_quality: int = CONFIG["jpeg_quality"]
    min_image_year: Optional[int] = CONFIG["min_image_year"]
    max_image_age_months: Optional[int] = CONFIG["max_image_age_months"]
    watch_refresh: int = CONFIG["watch_refresh"]
    viewport_port: int = CONFIG["viewport_port"]

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NavigatorConfig":
        """Build a config from NAVIGATOR_* variables, falling back to CONFIG"""
        environ = os.environ if environ is None else environ
        values = {}
        for var, name in ENV_VARS.items():
            raw = environ.get(var)
            if raw is None or raw.strip() == "":
                continue
            try:
                values[name] = int(raw)
            except ValueError:
                raise ConfigError(f"{var} must be an integer, got {raw!r}")
        values["api_key"] = environ.get("GOOGLE_MAPS_API_KEY") or None
        return cls(**values)

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigError("GOOGLE_MAPS_API_KEY not found in environment or .env file!")
        return self.api_key

    def to_dict(self) -> dict:
        """Config as a dict for logging, without the API key"""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name != "api_key"}


def load_env_file(path) -> None:
    """Load a .env file into the environment if present (simple parser)."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for line in env_path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, val = line.split("=", 1)
        key = key.strip()
        val = val.strip().strip('"').strip("'")
        os.environ.setdefault(key, val)
