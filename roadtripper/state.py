"""Resumable navigation state, stored as JSON next to the route."""

import json
import os
import tempfile
from dataclasses import dataclass, field
from typing import Optional

from .errors import StateFileCorruptError
from .forbidden import RouteState
from .models import Position


@dataclass
class NavigatorState:
    step: int = 0
    pano: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    heading: Optional[float] = None
    date: Optional[str] = None
    route: RouteState = field(default_factory=RouteState)

    def to_dict(self) -> dict:
        return {
            "position": {
                "step": self.step,
                "pano": self.pano,
                "lat": self.lat,
                "lng": self.lng,
                "heading": self.heading or 0,
                "date": self.date or None,
            },
            "route": self.route.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "NavigatorState":
        position = d.get("position") or {}
        return cls(
            step=int(position.get("step") or 0),
            pano=position.get("pano"),
            lat=position.get("lat"),
            lng=position.get("lng"),
            heading=position.get("heading"),
            date=position.get("date"),
            route=RouteState.from_dict(d.get("route")),
        )


def load_state(state_path: str) -> NavigatorState:
    """Load saved state, or the step-0 default when there is no state file.

    A state file that exists but cannot be parsed is fatal: silently
    starting over would throw away the resume point.
    """
    if not os.path.exists(state_path):
        return NavigatorState()
    try:
        with open(state_path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("state must be a JSON object")
        return NavigatorState.from_dict(data)
    except (json.JSONDecodeError, ValueError, TypeError, AttributeError) as e:
        raise StateFileCorruptError(
            f"Failed to parse state file {state_path} ({e}). "
            "Please fix or remove the corrupted file."
        ) from e


def save_state(state_path: str, step: int, position: Position, route_state: RouteState) -> dict:
    """Atomically overwrite the state file and return what was written"""
    state = NavigatorState(
        step=step,
        pano=position.pano,
        lat=position.lat,
        lng=position.lng,
        heading=position.heading,
        date=position.date,
        route=route_state,
    )
    data = state.to_dict()

    directory = os.path.dirname(os.path.abspath(state_path))
    fd, tmp_path = tempfile.mkstemp(prefix=".navigator_state.", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, state_path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise
    return data
