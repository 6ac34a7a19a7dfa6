from roadtripper.models import Position
from roadtripper.watch import ImageWatcher


def test_watch_page_points_at_latest_capture(tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr("webbrowser.open", opened.append)
    watcher = ImageWatcher(str(tmp_path), "Cape <Town>", refresh=5)
    images = tmp_path / "images"

    first = Position(pano="p0", lat=1.0, lng=2.0, date="2023-06", description="Main Road")
    watcher(str(images / "2024-05-01T12-30-45-123 1.000000 2.000000 2023-06 p0.jpg"), first)
    second = Position(pano="p1", lat=1.1, lng=2.0, date=None, is_alternate=True)
    watcher(str(images / "2024-05-01T12-30-50-001 1.100000 2.000000 unknown p1 alternate.jpg"), second)

    page = (tmp_path / "watch.html").read_text(encoding="utf-8")
    assert 'src="images/2024-05-01T12-30-50-001%201.100000%202.000000%20unknown%20p1%20alternate.jpg"' in page
    assert 'content="5"' in page
    assert "Cape &lt;Town&gt;" in page
    assert 'class="alternate"' in page
    assert "2 captured" in page
    assert "unknown road" in page
    assert len(opened) == 1


def test_watch_without_browser(tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr("webbrowser.open", opened.append)
    watcher = ImageWatcher(str(tmp_path), open_browser=False)
    watcher(str(tmp_path / "images" / "x.jpg"), Position(pano="p", lat=0.0, lng=0.0))
    assert opened == []
    assert watcher.count == 1
