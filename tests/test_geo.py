import pytest

from roadtripper.geo import bearing_between, bearing_to_compass, haversine_distance, heading_difference


def test_distance_new_york_to_london():
    dist = haversine_distance(40.7128, -74.0060, 51.5074, -0.1278)
    assert 5500000 < dist < 5600000


def test_distance_is_symmetric_and_zero_for_same_point():
    a = (-33.91512, 18.42272)
    b = (-33.91457, 18.42345)
    assert haversine_distance(*a, *b) == pytest.approx(haversine_distance(*b, *a))
    assert haversine_distance(*a, *a) == 0


@pytest.mark.parametrize("lat2,lon2,expected", [
    (1, 0, 0),
    (0, 1, 90),
    (-1, 0, 180),
    (0, -1, 270),
])
def test_bearing_cardinal_directions(lat2, lon2, expected):
    assert round(bearing_between(0, 0, lat2, lon2)) == expected


@pytest.mark.parametrize("a,b", [
    ((0, 0), (1, 0)),
    ((0, 0), (0, 1)),
    ((10, 10), (10.001, 10.002)),
    ((-33.91512, 18.42272), (-33.91431, 18.42391)),
])
def test_reverse_bearing_differs_by_180(a, b):
    forward = bearing_between(*a, *b)
    back = bearing_between(*b, *a)
    assert heading_difference(forward, back) == pytest.approx(180, abs=0.01)


def test_bearing_is_normalized():
    bearing = bearing_between(0, 0, -1, -1)
    assert 0 <= bearing < 360


def test_heading_difference_wraps():
    assert heading_difference(350, 10) == 20
    assert heading_difference(10, 350) == 20
    assert heading_difference(0, 180) == 180
    assert heading_difference(90, 90) == 0


def test_bearing_to_compass():
    assert bearing_to_compass(0) == "north"
    assert bearing_to_compass(93) == "east"
    assert bearing_to_compass(359) == "north"
