from roadtripper.forbidden import ForbiddenPanos, RouteState


def test_add_bad_pano_is_idempotent():
    state = RouteState()
    forbidden = ForbiddenPanos(state)
    forbidden.add_bad_pano("a")
    forbidden.add_bad_pano("a")
    assert state.bad_panos == ["a"]
    assert forbidden.is_bad("a")


def test_existing_bad_panos_are_respected():
    state = RouteState(bad_panos=["a"])
    forbidden = ForbiddenPanos(state)
    forbidden.add_bad_pano("a")
    forbidden.add_bad_pano("b")
    assert state.bad_panos == ["a", "b"]


def test_recently_visited_moves_to_front():
    state = RouteState()
    forbidden = ForbiddenPanos(state)
    for pano in ["a", "b", "c"]:
        forbidden.add_recently_visited(pano)
    forbidden.add_recently_visited("a")
    assert state.recently_visited_panos == ["a", "c", "b"]


def test_recently_visited_keeps_ten_most_recent():
    state = RouteState()
    forbidden = ForbiddenPanos(state)
    for i in range(15):
        forbidden.add_recently_visited(f"p{i}")
    assert len(state.recently_visited_panos) == 10
    assert state.recently_visited_panos[0] == "p14"
    assert state.recently_visited_panos[-1] == "p5"
    assert "p4" not in forbidden


def test_all_combines_bad_and_recent_and_is_rebuilt():
    state = RouteState(bad_panos=["bad"])
    forbidden = ForbiddenPanos(state)
    forbidden.add_recently_visited("recent")
    first = forbidden.all()
    assert first == ["bad", "recent"]
    forbidden.add_bad_pano("worse")
    assert forbidden.all() == ["bad", "worse", "recent"]
    assert first == ["bad", "recent"]
    assert "recent" in forbidden and "bad" in forbidden and "other" not in forbidden


def test_banned_roads_defaults_to_empty():
    assert ForbiddenPanos(RouteState()).banned_roads() == []
    assert ForbiddenPanos(RouteState(banned_roads=["M5"])).banned_roads() == ["M5"]


def test_route_state_backfills_missing_keys():
    state = RouteState.from_dict({"badPanos": ["x"]})
    assert state.bad_panos == ["x"]
    assert state.recently_visited_panos == []
    assert state.banned_roads == []
