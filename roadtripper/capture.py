"""Screenshot capture and image filename conventions."""

import os
import re
from datetime import datetime, timezone
from typing import Optional

from .models import Position

ALTERNATE_SUFFIX = " alternate"

FILENAME_RE = re.compile(
    r"^(?P<timestamp>\S+) (?P<lat>-?\d+\.\d+) (?P<lng>-?\d+\.\d+) "
    r"(?P<image_date>\d{4}-\d{2}|unknown) (?P<pano>\S+?)(?P<alternate> alternate)?\.jpe?g$",
    re.IGNORECASE,
)


def parse_image_date(date: Optional[str]) -> Optional[datetime]:
    """Parse a provider image date ("2023-06", "2023-06-01" or ISO) to a datetime"""
    if not date:
        return None
    text = str(date).strip()
    for fmt in ("%Y-%m", "%Y-%m-%d", "%Y"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


def image_month(date: Optional[str]) -> str:
    parsed = parse_image_date(date)
    return parsed.strftime("%Y-%m") if parsed else "unknown"


def file_timestamp(now: Optional[datetime] = None) -> str:
    """UTC timestamp safe for filenames, e.g. 2024-05-01T12-30-45-123"""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}"


def image_filename(position: Position, now: Optional[datetime] = None) -> str:
    name = (f"{file_timestamp(now)} {position.lat:.6f} {position.lng:.6f} "
            f"{image_month(position.date)} {position.pano}")
    if position.is_alternate:
        name += ALTERNATE_SUFFIX
    return name + ".jpg"


def parse_image_filename(filename: str) -> Optional[dict]:
    """Split a capture filename back into its parts, or None if it isn't one"""
    match = FILENAME_RE.match(os.path.basename(filename))
    if not match:
        return None
    return {
        "timestamp": match.group("timestamp"),
        "lat": float(match.group("lat")),
        "lng": float(match.group("lng")),
        "image_date": None if match.group("image_date") == "unknown" else match.group("image_date"),
        "pano": match.group("pano"),
        "alternate": bool(match.group("alternate")),
    }


async def capture_screenshot(image_path: str, session, position: Position,
                             quality: int, logger=None, now: Optional[datetime] = None) -> str:
    """Write one screenshot of the current view and return its path"""
    if logger:
        logger.info(f"Capturing pano {position.pano} at {position.lat}, {position.lng}")
    filename = os.path.join(image_path, image_filename(position, now))
    await session.screenshot(filename, quality)
    if logger:
        logger.info(f"Captured: {os.path.basename(filename)}")
    return filename
