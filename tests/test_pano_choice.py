import asyncio

from roadtripper.navigator import choose_best_pano_at_position

from .fakes import FakeSession, START_LAT, START_LNG, pano

TIMES = [
    {"pano": "old", "date": "2012-04"},
    {"pano": "mid", "date": "2016-09"},
    {"pano": "new", "date": "2023-06"},
]


def at_start(pano_id, description="Main Road", date=None, times=TIMES):
    return pano(pano_id, START_LAT, START_LNG, times=times, description=description, date=date)


def choose(record, forbidden, session):
    return asyncio.run(choose_best_pano_at_position(record, forbidden, session.fetch_pano_data))


def test_latest_pano_is_kept_without_fetching():
    record = at_start("new", date="2023-06")
    session = FakeSession({})
    assert choose(record, [], session) is record
    assert session.fetched == []


def test_switches_to_latest_with_same_description():
    record = at_start("old", date="2012-04")
    session = FakeSession({"new": at_start("new", date="2023-06")})
    chosen = choose(record, [], session)
    assert chosen.pano == "new"
    assert chosen.is_alternate
    assert session.fetched == ["new"]


def test_keeps_older_pano_when_latest_is_another_road():
    record = at_start("old", date="2012-04")
    session = FakeSession({"new": at_start("new", description="Cross Street", date="2023-06")})
    assert choose(record, [], session) is record


def test_keeps_older_pano_when_latest_is_unknown():
    record = at_start("old", date="2012-04")
    assert choose(record, [], FakeSession({})) is record


def test_forbidden_latest_is_skipped_for_next_newest():
    record = at_start("old", date="2012-04")
    session = FakeSession({"mid": at_start("mid", date="2016-09")})
    chosen = choose(record, ["new"], session)
    assert chosen.pano == "mid"
    assert chosen.is_alternate


def test_bad_pano_walks_back_to_newest_clean_capture():
    record = at_start("new", date="2023-06")
    session = FakeSession({
        "mid": at_start("mid", description="Cross Street", date="2016-09"),
        "old": at_start("old", date="2012-04"),
    })
    chosen = choose(record, ["new"], session)
    assert chosen.pano == "old"
    assert chosen.is_alternate
    assert session.fetched == ["mid", "old"]


def test_bad_pano_without_matching_capture_gives_none():
    record = at_start("new", date="2023-06")
    session = FakeSession({
        "mid": at_start("mid", description="Cross Street"),
        "old": at_start("old", description="Cross Street"),
    })
    assert choose(record, ["new"], session) is None


def test_every_capture_forbidden_gives_none():
    record = at_start("new", date="2023-06")
    session = FakeSession({})
    assert choose(record, ["old", "mid", "new"], session) is None
    assert session.fetched == []


def test_record_without_times_stands_for_itself():
    record = at_start("solo", date="2020-01", times=[])
    assert choose(record, [], FakeSession({})) is record
    assert choose(record, ["solo"], FakeSession({})) is None
