"""Roadtripper - Street View route navigation with resumable screenshot capture."""

from .config import CONFIG, NavigatorConfig, load_env_file
from .errors import (
    RoadtripperError,
    ConfigError,
    ProjectError,
    RouteNotFoundError,
    RouteFormatError,
    StateFileCorruptError,
    NoUsablePanoError,
    SessionError,
)
from .models import Waypoint, Link, TimeEntry, PanoRecord, Position
from .logger import Logger
from .geo import haversine_distance, bearing_between, heading_difference, bearing_to_compass
from .forbidden import RouteState, ForbiddenPanos
from .state import NavigatorState, load_state, save_state
from .capture import capture_screenshot, image_filename, parse_image_filename
from .session import PanoramaSession, BrowserSession
from .navigator import (
    Navigator,
    Done,
    Advance,
    Move,
    Stuck,
    get_best_link,
    decide_next_action,
    choose_best_pano_at_position,
    is_stale,
)
from .project import Project, load_route
from .watch import ImageWatcher
from .route_map import create_map
from .__main__ import main

__all__ = [
    "CONFIG",
    "NavigatorConfig",
    "load_env_file",
    "RoadtripperError",
    "ConfigError",
    "ProjectError",
    "RouteNotFoundError",
    "RouteFormatError",
    "StateFileCorruptError",
    "NoUsablePanoError",
    "SessionError",
    "Waypoint",
    "Link",
    "TimeEntry",
    "PanoRecord",
    "Position",
    "Logger",
    "haversine_distance",
    "bearing_between",
    "heading_difference",
    "bearing_to_compass",
    "RouteState",
    "ForbiddenPanos",
    "NavigatorState",
    "load_state",
    "save_state",
    "capture_screenshot",
    "image_filename",
    "parse_image_filename",
    "PanoramaSession",
    "BrowserSession",
    "Navigator",
    "Done",
    "Advance",
    "Move",
    "Stuck",
    "get_best_link",
    "decide_next_action",
    "choose_best_pano_at_position",
    "is_stale",
    "Project",
    "load_route",
    "ImageWatcher",
    "create_map",
    "main",
]
