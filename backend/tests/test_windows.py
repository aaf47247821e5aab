import random
from datetime import datetime, timedelta

import pytest
import pytz

from app.jobs.ingest.types import EventKind, NormalizedEvent
from app.quiet.timeline import build_timeline
from app.quiet.windows import QuietWindow, derive_quiet_windows


def at(hh: int, mm: int, ss: int = 0) -> datetime:
    return datetime(2024, 5, 1, hh, mm, ss)


def timeline_of(*stamps: datetime):
    return build_timeline([[NormalizedEvent(kind=EventKind.DEPARTURE, timestamp=t) for t in stamps]])


def test_reference_scenario() -> None:
    windows = derive_quiet_windows(timeline_of(at(9, 0), at(9, 25), at(10, 10)), now=at(8, 0))
    assert windows == [
        QuietWindow(at(8, 0), at(9, 0), 60),
        QuietWindow(at(9, 25), at(10, 10), 45),
    ]


def test_exact_threshold_qualifies() -> None:
    windows = derive_quiet_windows(timeline_of(at(8, 30), at(9, 0), at(9, 29)), now=at(8, 0))
    assert windows == [
        QuietWindow(at(8, 0), at(8, 30), 30),
        QuietWindow(at(8, 30), at(9, 0), 30),
    ]


def test_duration_is_floored() -> None:
    windows = derive_quiet_windows(timeline_of(at(9, 0)), now=at(8, 0, 30))
    assert windows == [QuietWindow(at(8, 0, 30), at(9, 0), 59)]


def test_leading_gap_just_under_threshold() -> None:
    assert derive_quiet_windows(timeline_of(at(8, 30)), now=at(8, 0, 1)) == []


def test_empty_timeline() -> None:
    assert derive_quiet_windows((), now=at(8, 0)) == []


def test_single_event() -> None:
    assert derive_quiet_windows(timeline_of(at(8, 10)), now=at(8, 0)) == []
    assert derive_quiet_windows(timeline_of(at(12, 0)), now=at(8, 0)) == [QuietWindow(at(8, 0), at(12, 0), 240)]


def test_identical_timestamps_never_qualify() -> None:
    windows = derive_quiet_windows(timeline_of(at(8, 0), at(8, 0), at(8, 0)), now=at(8, 0))
    assert windows == []


def test_custom_threshold() -> None:
    windows = derive_quiet_windows(timeline_of(at(9, 0), at(9, 25), at(10, 10)), now=at(8, 0), threshold_minutes=50)
    assert windows == [QuietWindow(at(8, 0), at(9, 0), 60)]


@pytest.mark.parametrize("threshold", [-1, 0, "30", None, True])
def test_bad_threshold(threshold) -> None:
    with pytest.raises(ValueError):
        derive_quiet_windows(timeline_of(at(9, 0)), now=at(8, 0), threshold_minutes=threshold)


def test_bad_now() -> None:
    with pytest.raises(ValueError):
        derive_quiet_windows((), now="2024-05-01 08:00")
    with pytest.raises(ValueError):
        derive_quiet_windows((), now=pytz.utc.localize(at(8, 0)))


def test_windows_ordered_and_bounded() -> None:
    rng = random.Random(7)
    now = at(6, 0)
    stamps = [now + timedelta(minutes=rng.randint(0, 18 * 60), seconds=rng.choice([0, 0, 30])) for _ in range(60)]

    windows = derive_quiet_windows(timeline_of(*stamps), now=now)

    assert windows
    for w in windows:
        assert w.end - w.start >= timedelta(minutes=30)
        assert w.duration_minutes == int((w.end - w.start).total_seconds() // 60)
    for a, b in zip(windows, windows[1:]):
        assert a.end <= b.start
        assert a.start < b.start
