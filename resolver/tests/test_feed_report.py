import importlib.util
import os
import sys

import pytest

from tripsort.exceptions import ConfigurationGapError

SCRIPT = os.path.join(os.path.dirname(__file__), "..", "scripts", "resolve_feed_report.py")

spec = importlib.util.spec_from_file_location("resolve_feed_report", SCRIPT)
resolve_feed_report = importlib.util.module_from_spec(spec)
spec.loader.exec_module(resolve_feed_report)


def _write_feed(feed_dir, routes):
    feed_dir.mkdir()
    (feed_dir / "routes.txt").write_text(
        "route_id,route_short_name,route_long_name,route_color,agency_id\n"
        + "".join(f"{route},{route[1:]},,,27\n" for route in routes)
    )
    (feed_dir / "trips.txt").write_text(
        "route_id,trip_id,trip_headsign,direction_id\n"
        "r2,t1,Highlands,0\n"
    )
    (feed_dir / "stop_times.txt").write_text(
        "trip_id,stop_id,stop_sequence\n"
        "t1,170545,1\n"
        "t1,170524,2\n"
        "t1,170474,3\n"
        "t1,170464,4\n"
        "t1,170545,5\n"
    )
    return str(feed_dir)


def test_feed_report_writes_csvs(tmp_path):
    feed = _write_feed(tmp_path / "feed", ["r2"])
    out = tmp_path / "out"

    result = resolve_feed_report.resolve_feed(feed, output_dir=str(out), merge=True, workers=1)

    assert [s.sub_trip_id for s in result.sub_trips] == ["t1:1", "t1:2"]
    assert (out / "sub_trips.csv").exists()
    assert (out / "failures.csv").exists()


def test_uncolored_route_aborts_without_output(tmp_path):
    feed = _write_feed(tmp_path / "feed", ["r2", "r9"])
    out = tmp_path / "out"

    with pytest.raises(ConfigurationGapError) as excinfo:
        resolve_feed_report.resolve_feed(feed, output_dir=str(out), workers=1)

    assert excinfo.value.gaps == ["Unexpected route color for route 9!"]
    assert not (out / "sub_trips.csv").exists()
    assert not (out / "failures.csv").exists()


def test_main_exits_with_error_on_configuration_gap(tmp_path, monkeypatch):
    feed = _write_feed(tmp_path / "feed", ["r2", "r9"])
    out = tmp_path / "out"
    monkeypatch.setattr(sys, "argv", ["resolve_feed_report.py", feed, "--output", str(out)])

    with pytest.raises(SystemExit) as excinfo:
        resolve_feed_report.main()

    assert excinfo.value.code == 1
    assert not out.exists()
