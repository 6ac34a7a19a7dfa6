import folium

from roadtripper.forbidden import RouteState
from roadtripper.models import Waypoint
from roadtripper.route_map import create_map, list_captures
from roadtripper.state import NavigatorState

ROUTE = [Waypoint(-33.915, 18.422), Waypoint(-33.914, 18.422), Waypoint(-33.913, 18.423)]


def test_list_captures_skips_other_files(tmp_path):
    (tmp_path / "2024-05-01T12-30-50-001 -33.914000 18.422000 unknown p1 alternate.jpg").write_bytes(b"")
    (tmp_path / "2024-05-01T12-30-45-123 -33.915000 18.422000 2023-06 p0.jpg").write_bytes(b"")
    (tmp_path / "notes.txt").write_text("hi")

    captures = list_captures(str(tmp_path))
    assert [c["pano"] for c in captures] == ["p0", "p1"]
    assert captures[1]["alternate"]
    assert captures[0]["filename"].endswith("p0.jpg")


def test_list_captures_without_image_dir(tmp_path):
    assert list_captures(str(tmp_path / "images")) == []


def test_create_map_shows_progress():
    state = NavigatorState(step=1, pano="p1", lat=-33.914, lng=18.422,
                           route=RouteState(bad_panos=["bad1"]))
    captures = [
        {"timestamp": "t0", "lat": -33.915, "lng": 18.422, "image_date": "2023-06", "pano": "p0",
         "alternate": False, "filename": "a.jpg"},
        {"timestamp": "t1", "lat": -33.914, "lng": 18.422, "image_date": None, "pano": "p1",
         "alternate": True, "filename": "b.jpg"},
    ]
    m = create_map(ROUTE, state, captures)
    assert isinstance(m, folium.Map)

    html = m.get_root().render()
    assert "Step: 1/2" in html
    assert "Captures: 2 (1 alternate)" in html
    assert "Bad panos: 1" in html
    assert "Resume point: step 1" in html


def test_create_map_for_fresh_project():
    html = create_map(ROUTE).get_root().render()
    assert "Step: 0/2" in html
    assert "Resume point" not in html
