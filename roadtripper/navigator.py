"""Navigation engine: follows a planned route through the Street View pano graph.

Each pass through the loop asks `decide_next_action` what to do from the
current position, then carries it out:

    Done     the last waypoint has been reached
    Advance  the next waypoint is within the arrival radius; bump the step,
             then carry out the Move or Stuck towards the waypoint after it
    Move     a neighbouring pano points towards the next waypoint; go there
    Stuck    no usable neighbour; mark this pano bad and look for another
             capture at the same spot

At most one waypoint is consumed per pass, so closely spaced waypoints
still move the viewer.

Decisions are pure functions of the position, route and forbidden panos.
All provider I/O goes through the session, one awaited call at a time.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Collection, Optional, Sequence, Union

from .capture import capture_screenshot, parse_image_date
from .config import CONFIG, NavigatorConfig
from .errors import NoUsablePanoError, RouteFormatError
from .forbidden import ForbiddenPanos, RouteState
from .geo import bearing_between, bearing_to_compass, haversine_distance, heading_difference
from .logger import Logger
from .models import Link, PanoRecord, Position, TimeEntry, Waypoint
from .state import NavigatorState, load_state, save_state


@dataclass(frozen=True)
class Done:
    pass


@dataclass(frozen=True)
class Move:
    link: Link
    heading: float
    distance: float


@dataclass(frozen=True)
class Stuck:
    heading: float
    distance: float


@dataclass(frozen=True)
class Advance:
    distance: float
    then: Optional[Union[Move, Stuck]] = None  # None when the reached waypoint is the last


Action = Union[Done, Advance, Move, Stuck]


def get_best_link(links: Optional[Sequence[Link]], target_heading: float,
                  max_difference: float = CONFIG["link_max_difference"]) -> Optional[Link]:
    """Pick the link pointing closest to target_heading.

    Links more than max_difference degrees off are never chosen. On an
    exact tie the first link wins.
    """
    if not links:
        return None
    closest = None
    min_diff = 360.0
    for link in links:
        diff = heading_difference(link.heading, target_heading)
        if diff > max_difference:
            continue
        if diff < min_diff:
            min_diff = diff
            closest = link
    return closest


def decide_next_action(position: Position, step: int, route: Sequence[Waypoint],
                       forbidden: Collection[str] = (),
                       arrival_radius: float = CONFIG["arrival_radius"],
                       max_difference: float = CONFIG["link_max_difference"]) -> Action:
    if step >= len(route) - 1:
        return Done()

    target = route[step + 1]
    distance = haversine_distance(position.lat, position.lng, target.lat, target.lng)
    if distance < arrival_radius:
        if step + 1 >= len(route) - 1:
            return Advance(distance)
        return Advance(distance, _head_towards(position, route[step + 2], forbidden, max_difference))
    return _head_towards(position, target, forbidden, max_difference)


def _head_towards(position: Position, target: Waypoint, forbidden: Collection[str],
                  max_difference: float) -> Union[Move, Stuck]:
    distance = haversine_distance(position.lat, position.lng, target.lat, target.lng)
    heading = bearing_between(position.lat, position.lng, target.lat, target.lng)
    candidates = [link for link in position.links or [] if link.pano not in forbidden]
    link = get_best_link(candidates, heading, max_difference)
    if link:
        return Move(link, heading, distance)
    return Stuck(heading, distance)


async def choose_best_pano_at_position(record: PanoRecord, forbidden: Collection[str],
                                       fetch_pano_data: Callable,
                                       logger: Optional[Logger] = None) -> Optional[PanoRecord]:
    """Decide which capture at this location to use.

    Returns the record itself, a replacement flagged `is_alternate`, or
    None when nothing usable is left here. Replacements must carry the
    same description as the original: newer imagery at the same
    coordinates often belongs to a crossing road.
    """
    forbidden = set(forbidden)
    times = record.times or [TimeEntry(record.pano, record.date)]
    times = [entry for entry in times if entry.pano not in forbidden]
    if not times:
        if logger:
            logger.warn(f"Every capture at {record.pano} is forbidden")
        return None

    if record.pano in forbidden:
        if logger:
            logger.warn(f"This is a bad pano: {record.pano}. Getting newest clean pano.")
        for entry in reversed(times):
            candidate = await fetch_pano_data(entry.pano)
            if candidate is None:
                if logger:
                    logger.debug(f"Pano {entry.pano} unknown to provider")
                continue
            if candidate.description != record.description:
                if logger:
                    logger.debug(f"Description mismatch: {record.description} vs {candidate.description}")
                continue
            if logger:
                logger.debug(f"Pano {entry.pano} from {entry.date} is the best good pano")
            return replace(candidate, is_alternate=True)
        if logger:
            logger.warn(f"No clean pano on {record.description} at {record.pano}")
        return None

    latest = times[-1]
    if latest.pano == record.pano:
        return record

    if logger:
        logger.warn(f"Not the latest pano. Considering switching from {record.pano} to {latest.pano}")
    latest_record = await fetch_pano_data(latest.pano)
    if latest_record is None:
        if logger:
            logger.warn(f"Not switching. Latest pano {latest.pano} is unknown to provider")
        return record
    if latest_record.description != record.description:
        if logger:
            logger.warn(f"Not switching. Latest pano was a different location: "
                        f"{latest_record.description} instead of {record.description}")
        return record
    if logger:
        logger.warn(f"Switching from older pano {record.pano} ({record.date}) "
                    f"to {latest_record.pano} ({latest_record.date})")
    return replace(latest_record, is_alternate=True)


def is_stale(date: Optional[str], config: NavigatorConfig, now: Optional[datetime] = None) -> bool:
    """True when imagery is older than the configured year or age limits"""
    captured = parse_image_date(date)
    if captured is None:
        return False
    if config.min_image_year and captured.year < config.min_image_year:
        return True
    if config.max_image_age_months:
        now = now or datetime.now()
        age = (now.year - captured.year) * 12 + (now.month - captured.month)
        if age > config.max_image_age_months:
            return True
    return False


def is_newer(date: Optional[str], than: Optional[str]) -> bool:
    candidate = parse_image_date(date)
    if candidate is None:
        return False
    current = parse_image_date(than)
    return current is None or candidate > current


class Navigator:
    """Drives a panorama session along a route, one screenshot per settled pano"""

    def __init__(self, route: Sequence[Waypoint], session, state_path: str, image_path: str,
                 config: Optional[NavigatorConfig] = None, logger: Optional[Logger] = None,
                 on_capture: Optional[Callable] = None):
        if not route:
            raise RouteFormatError("Route must contain at least one waypoint")
        self.route = list(route)
        self.session = session
        self.state_path = state_path
        self.image_path = image_path
        self.config = config or NavigatorConfig()
        self.logger = logger or Logger()
        self.on_capture = on_capture

        self.step = 0
        self.position: Optional[Position] = None
        self.route_state = RouteState()
        self.forbidden = ForbiddenPanos(self.route_state, self.config.recently_visited_limit)
        self.captures: list[str] = []

        self._cancelled = False
        self._recovering = False

    @property
    def last_step(self) -> int:
        return len(self.route) - 1

    def cancel(self):
        """Stop at the top of the next loop iteration"""
        self._cancelled = True
        self.logger.warn("Cancellation requested, stopping after this step")

    async def run(self) -> bool:
        """Navigate to the end of the route. Returns False if cancelled."""
        state = load_state(self.state_path)
        self.step = state.step
        if self.step > self.last_step:
            self.logger.warn(f"Saved step {self.step} is past the end of the route, "
                             f"resuming at {self.last_step}")
            self.step = self.last_step
        self.route_state = state.route
        self.forbidden = ForbiddenPanos(self.route_state, self.config.recently_visited_limit)
        self.logger.info(f"Starting at step {self.step}/{self.last_step}", {
            "pano": state.pano,
            "bad_panos": len(self.route_state.bad_panos),
        })

        self.position = await self._initialize(state)
        await self._capture(self.position)
        self._save()

        while True:
            if self._cancelled:
                self._save()
                self.logger.info(f"Navigation cancelled at step {self.step}")
                return False

            max_difference = (self.config.stuck_link_max_difference if self._recovering
                              else self.config.link_max_difference)
            self._recovering = False
            action = decide_next_action(self.position, self.step, self.route, self.forbidden,
                                        self.config.arrival_radius, max_difference)

            if isinstance(action, Done):
                self._save()
                self.logger.info("Trip complete", {"step": self.step, "captures": len(self.captures)})
                return True

            if isinstance(action, Advance):
                self.step += 1
                self.logger.info(f"Reached target step {self.step} ({action.distance:.1f}m away), "
                                 f"keeping position {self.position.lat}, {self.position.lng}")
                self._save()
                if action.then is None:
                    continue
                action = action.then

            self.logger.info(f"Target {self.step + 1}/{len(self.route)} - Dist: {action.distance:.1f}m "
                             f"heading {action.heading:.1f} ({bearing_to_compass(action.heading)})")
            self._warn_if_looping(action.heading, max_difference)
            if isinstance(action, Move):
                await self._move(action)
            else:
                await self._recover(action)

    async def _initialize(self, state: NavigatorState) -> Position:
        start = self.route[self.step]
        lat = state.lat if state.lat is not None else start.lat
        lng = state.lng if state.lng is not None else start.lng
        heading = state.heading
        if not heading:
            heading = 0.0
            if self.step < self.last_step:
                target = self.route[self.step + 1]
                heading = bearing_between(start.lat, start.lng, target.lat, target.lng)

        self.logger.info("Initializing panorama", {"lat": lat, "lng": lng, "heading": heading, "pano": state.pano})
        await self.session.initialize_panorama(lat, lng, heading, state.pano)

        # the saved pano is usually in the recent visits; only bad panos count here
        forbidden = list(self.route_state.bad_panos)
        position = await self.current_position_data(heading, forbidden)
        position = await self._refresh_if_stale(position, forbidden)
        self._settle(position)
        return position

    async def resolve_pano(self, pano: str, heading: float,
                           forbidden: Collection[str]) -> Optional[Position]:
        """Turn a pano id into a position, or None if there is no usable imagery there"""
        record = await self.session.fetch_pano_data(pano)
        if record is None:
            self.logger.warn(f"Pano {pano} is unknown to the provider")
            return None
        chosen = await choose_best_pano_at_position(record, forbidden, self.session.fetch_pano_data,
                                                    self.logger)
        if chosen is None:
            return None
        if chosen.description and chosen.description in self.forbidden.banned_roads():
            self.logger.warn(f"Pano {chosen.pano} is on banned road {chosen.description}")
            return None
        return Position.from_record(chosen, heading)

    async def current_position_data(self, heading: Optional[float] = None,
                                    forbidden: Optional[Collection[str]] = None) -> Position:
        """Resolve whatever pano the viewer is showing now"""
        pano, viewer_heading = await self.session.fetch_current_position()
        heading = viewer_heading if heading is None else heading
        forbidden = self.forbidden.all() if forbidden is None else forbidden
        position = await self.resolve_pano(pano, heading, forbidden)
        if position is None:
            raise NoUsablePanoError(f"Fatal: there are no good panos at this position "
                                    f"(pano {pano}, step {self.step}).")
        if position.pano != pano:
            await self.session.move_to(position.pano, position.heading)
        return position

    async def _move(self, action: Move):
        link = action.link
        self.logger.info(f"Checking linked pano: {link.pano} (Heading: {link.heading:.1f})")
        forbidden = self.forbidden.all()
        position = await self.resolve_pano(link.pano, action.heading, forbidden)
        if position is None:
            self.logger.warn(f"Marking linked pano {link.pano} bad: no usable imagery there")
            self.forbidden.add_bad_pano(link.pano)
            self._save()
            return

        await self.session.move_to(position.pano, position.heading)
        position = await self._refresh_if_stale(position, forbidden)
        self._settle(position)
        self.logger.info(f"Setting new pano to {position.pano} - {position.description}")
        await self._capture(position)
        self._save()

    async def _recover(self, action: Stuck):
        stuck_pano = self.position.pano
        self.logger.warn(f"Stuck at {stuck_pano}: no usable link towards {action.heading:.1f}. "
                         f"Marking it bad.")
        self.forbidden.add_bad_pano(stuck_pano)
        position = await self.current_position_data(action.heading)
        position = await self._refresh_if_stale(position, self.forbidden.all())
        self._settle(position)
        self.logger.info(f"Substituted {stuck_pano} with {position.pano} - {position.description}")
        await self._capture(position)
        self._save()
        self._recovering = True

    async def _refresh_if_stale(self, position: Position, forbidden: Collection[str]) -> Position:
        """Try once to get fresher imagery at the same spot; keep it only if newer"""
        if not is_stale(position.date, self.config):
            return position

        self.logger.warn(f"Imagery at {position.pano} from {position.date} is too old, "
                         f"re-initializing for fresher imagery")
        await self.session.initialize_panorama(position.lat, position.lng, position.heading, None)
        pano, _ = await self.session.fetch_current_position()
        candidate = await self.resolve_pano(pano, position.heading, forbidden)
        if candidate is not None and is_newer(candidate.date, position.date):
            self.logger.info(f"Switching to fresher pano {candidate.pano} from {candidate.date}")
            if candidate.pano != pano:
                await self.session.move_to(candidate.pano, candidate.heading)
            return replace(candidate, is_alternate=True)

        self.logger.warn(f"No fresher imagery at {position.lat}, {position.lng}; keeping {position.pano}")
        await self.session.initialize_panorama(position.lat, position.lng, position.heading, position.pano)
        return position

    def _warn_if_looping(self, heading: float, max_difference: float):
        preferred = get_best_link(self.position.links, heading, max_difference)
        if preferred and self.forbidden.was_recently_visited(preferred.pano):
            self.logger.warn(f"Loop detected: skipping recently visited pano {preferred.pano}")

    def _settle(self, position: Position):
        self.forbidden.add_recently_visited(position.pano)
        self.position = position

    async def _capture(self, position: Position):
        path = await capture_screenshot(self.image_path, self.session, position,
                                        self.config.jpeg_quality, self.logger)
        self.captures.append(path)
        if self.on_capture:
            self.on_capture(path, position)

    def _save(self):
        data = save_state(self.state_path, self.step, self.position, self.route_state)
        self.logger.debug("Saved state", data)
