"""Data classes for Roadtripper."""

from dataclasses import dataclass, asdict, field
from typing import Optional


@dataclass(frozen=True)
class Waypoint:
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "Waypoint":
        return cls(lat=float(d["lat"]), lng=float(d["lng"]))


@dataclass(frozen=True)
class Link:
    """A neighbouring panorama reachable from the current one"""
    pano: str
    heading: float

    @classmethod
    def from_dict(cls, d: dict) -> "Link":
        return cls(pano=d["pano"], heading=float(d.get("heading") or 0))


@dataclass(frozen=True)
class TimeEntry:
    """One capture in the history of a physical location"""
    pano: str
    date: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "TimeEntry":
        return cls(pano=d["pano"], date=d.get("date"))


@dataclass
class PanoRecord:
    """Provider metadata for a single panorama.

    `times` is the capture history at this location, oldest first.
    `is_alternate` is set when this record was chosen in place of the
    pano that was originally asked for.
    """
    pano: str
    lat: float
    lng: float
    date: Optional[str] = None
    description: Optional[str] = None
    links: list[Link] = field(default_factory=list)
    times: list[TimeEntry] = field(default_factory=list)
    is_alternate: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> "PanoRecord":
        return cls(
            pano=d["pano"],
            lat=float(d["lat"]),
            lng=float(d["lng"]),
            date=d.get("date"),
            description=d.get("description"),
            links=[Link.from_dict(link) for link in d.get("links") or []],
            times=[TimeEntry.from_dict(t) for t in d.get("times") or []],
        )


@dataclass
class Position:
    """Where the navigator currently is, and which way it is facing"""
    pano: Optional[str]
    lat: float
    lng: float
    heading: float = 0.0
    date: Optional[str] = None
    description: Optional[str] = None
    links: Optional[list[Link]] = None
    is_alternate: bool = False

    @classmethod
    def from_record(cls, record: PanoRecord, heading: float) -> "Position":
        return cls(
            pano=record.pano,
            lat=record.lat,
            lng=record.lng,
            heading=heading,
            date=record.date,
            description=record.description,
            links=list(record.links),
            is_alternate=record.is_alternate,
        )
