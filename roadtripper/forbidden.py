"""Working memory of panoramas the navigator must not land on."""

from dataclasses import dataclass, field

from .config import CONFIG


@dataclass
class RouteState:
    """The persisted half of the forbidden-pano memory"""
    bad_panos: list[str] = field(default_factory=list)
    recently_visited_panos: list[str] = field(default_factory=list)  # most recent first
    banned_roads: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "badPanos": list(self.bad_panos),
            "recentlyVisitedPanos": list(self.recently_visited_panos),
            "bannedRoads": list(self.banned_roads),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RouteState":
        """Missing keys are backfilled with empty lists"""
        d = d or {}
        return cls(
            bad_panos=list(d.get("badPanos") or []),
            recently_visited_panos=list(d.get("recentlyVisitedPanos") or []),
            banned_roads=list(d.get("bannedRoads") or []),
        )


class ForbiddenPanos:
    """Tracks permanently bad panos and a short list of recent visits.

    Bad panos are never removed. Recent visits are kept most-recent-first
    and capped at `limit`; they stop the navigator bouncing between two or
    three neighbouring panoramas.
    """

    def __init__(self, route_state: RouteState, limit: int = CONFIG["recently_visited_limit"]):
        self.route_state = route_state
        self.limit = limit
        self._bad = set(route_state.bad_panos)

    def add_bad_pano(self, pano: str):
        if pano in self._bad:
            return
        self._bad.add(pano)
        self.route_state.bad_panos.append(pano)

    def add_recently_visited(self, pano: str):
        recent = self.route_state.recently_visited_panos
        if pano in recent:
            recent.remove(pano)
        recent.insert(0, pano)
        del recent[self.limit:]

    def is_bad(self, pano: str) -> bool:
        return pano in self._bad

    def was_recently_visited(self, pano: str) -> bool:
        return pano in self.route_state.recently_visited_panos

    def all(self) -> list[str]:
        """Bad panos followed by recent visits, rebuilt on every call"""
        return self.route_state.bad_panos + self.route_state.recently_visited_panos

    def banned_roads(self) -> list[str]:
        return self.route_state.banned_roads or []

    def __contains__(self, pano: str) -> bool:
        return self.is_bad(pano) or self.was_recently_visited(pano)

    def __iter__(self):
        return iter(self.all())
