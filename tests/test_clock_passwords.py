from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from personal_hub.core.clock import day_range, isoformat, local_date_key
from personal_hub.core.passwords import hash_password, needs_rehash, verify_password


def test_day_range_uses_reference_timezone() -> None:
    tz = ZoneInfo("Europe/Moscow")
    now = datetime(2026, 3, 10, 22, 30, tzinfo=timezone.utc)  # 01:30 next day in Moscow
    start, end = day_range(now, tz)
    assert start == datetime(2026, 3, 10, 21, 0, tzinfo=timezone.utc)
    assert end == datetime(2026, 3, 11, 21, 0, tzinfo=timezone.utc)
    assert local_date_key(now, tz) == "2026-03-11"


def test_isoformat_marks_utc_with_z() -> None:
    assert isoformat(datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == "2026-01-02T03:04:05Z"
    assert isoformat(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02T03:04:05Z"
    assert isoformat(None) is None


def test_password_hash_round_trip() -> None:
    digest = hash_password("hunter22", iterations=1000)
    assert digest.startswith("pbkdf2_sha256$1000$")
    assert verify_password(digest, "hunter22")
    assert not verify_password(digest, "hunter23")
    assert hash_password("hunter22", iterations=1000) != digest


def test_verify_password_rejects_malformed_digest() -> None:
    assert not verify_password("garbage", "anything")
    assert not verify_password("md5$1$zz$00", "anything")
    assert needs_rehash("garbage")
