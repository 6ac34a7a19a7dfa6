"""Project directory layout and route loading."""

import json
import os
from dataclasses import dataclass

from .errors import ProjectError, RouteFormatError, RouteNotFoundError
from .models import Waypoint


@dataclass
class Project:
    name: str
    path: str
    image_path: str
    route_file: str
    state_file: str
    log_file: str

    @classmethod
    def from_path(cls, project_path: str) -> "Project":
        path = os.path.abspath(project_path)
        return cls(
            name=os.path.basename(path.rstrip(os.sep)),
            path=path,
            image_path=os.path.join(path, "images"),
            route_file=os.path.join(path, "route.json"),
            state_file=os.path.join(path, "navigator_state.json"),
            log_file=os.path.join(path, "navigator.log"),
        )

    def check_exists(self):
        if not os.path.isdir(self.path):
            raise ProjectError(f"Project directory does not exist: {self.path}")

    def ensure_image_dir(self) -> bool:
        """Create the images directory, returning True if it was created"""
        if os.path.isdir(self.image_path):
            return False
        os.makedirs(self.image_path, exist_ok=True)
        return True

    def load_route(self) -> list[Waypoint]:
        return load_route(self.route_file)


def load_route(route_file: str) -> list[Waypoint]:
    """Load route.json: a non-empty array of {lat, lng} objects"""
    if not os.path.exists(route_file):
        raise RouteNotFoundError(
            f"route.json not found at {route_file}! First plan a route and save it there."
        )
    try:
        with open(route_file, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RouteFormatError(f"route.json is not valid JSON: {e}") from e

    if not isinstance(data, list) or not data:
        raise RouteFormatError("route.json must be a non-empty array of {lat, lng} points")
    try:
        return [Waypoint.from_dict(point) for point in data]
    except (KeyError, TypeError, ValueError) as e:
        raise RouteFormatError(f"route.json has an invalid waypoint: {e}") from e
