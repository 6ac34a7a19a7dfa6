"""Fatal error types for Roadtripper."""


class RoadtripperError(Exception):
    """Base exception for fatal navigation errors."""


class ConfigError(RoadtripperError):
    """Required configuration is missing or malformed."""


class ProjectError(RoadtripperError):
    """The project directory does not exist."""


class RouteNotFoundError(RoadtripperError):
    """A project has no route.json."""


class RouteFormatError(RoadtripperError):
    """route.json is not a non-empty list of {lat, lng} points."""


class StateFileCorruptError(RoadtripperError):
    """The resume state file cannot be parsed."""


class NoUsablePanoError(RoadtripperError):
    """No acceptable panorama is left at the current location."""


class SessionError(RoadtripperError):
    """The panorama viewer reported an unrecoverable problem."""
