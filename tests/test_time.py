import threading
from datetime import datetime, timedelta, timezone

from app.core import time as app_time
from app.core.time import as_utc, now_utc

MS = timedelta(milliseconds=1)


def test_now_is_truncated_to_milliseconds(stopped_clock):
    assert now_utc() == stopped_clock.replace(microsecond=123000)


def test_calls_within_one_millisecond_stay_strictly_increasing(stopped_clock):
    a, b, c = now_utc(), now_utc(), now_utc()
    assert b == a + MS
    assert c == b + MS


def test_clock_going_backwards_does_not_reorder(stopped_clock, monkeypatch):
    later = stopped_clock + timedelta(seconds=5)
    monkeypatch.setattr(app_time, "_last", later)

    assert now_utc() == later + MS


def test_concurrent_callers_never_share_a_timestamp(stopped_clock):
    seen = []
    seen_lock = threading.Lock()

    def worker():
        values = [now_utc() for _ in range(50)]
        with seen_lock:
            seen.extend(values)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(seen) == 400
    assert len(set(seen)) == 400


def test_as_utc_normalises_naive_and_foreign_offsets():
    naive = datetime(2026, 1, 1, 10, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 10, 0, tzinfo=timezone.utc)

    madrid = datetime(2026, 1, 1, 11, 0, tzinfo=timezone(timedelta(hours=1)))
    converted = as_utc(madrid)
    assert converted.tzinfo == timezone.utc
    assert converted.hour == 10
