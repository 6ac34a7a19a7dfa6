import pytest

from roadtripper import errors


@pytest.mark.parametrize("name", [
    "ConfigError",
    "ProjectError",
    "RouteNotFoundError",
    "RouteFormatError",
    "StateFileCorruptError",
    "NoUsablePanoError",
    "SessionError",
])
def test_fatal_errors_share_a_base(name):
    error = getattr(errors, name)("boom")
    assert isinstance(error, errors.RoadtripperError)
    assert str(error) == "boom"


def test_errors_module_is_documented():
    assert errors.__doc__
