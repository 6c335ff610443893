from datetime import datetime

import pytest
import pytz

from apps.common.errors import ValidationError
from apps.reports.bucketing import ReportWindow, bucket_date, local_date


def test_bucket_is_local_date_plus_one():
    # 15:00 UTC is 12:00 in Halifax (ADT, UTC-3)
    assert bucket_date(datetime(2024, 6, 14, 15, 0)) == "2024-06-15"


def test_bucket_crosses_local_midnight():
    # 02:00 UTC on the 15th is still the 14th in Halifax
    assert local_date(datetime(2024, 6, 15, 2, 0)).isoformat() == "2024-06-14"
    assert bucket_date(datetime(2024, 6, 15, 2, 0)) == "2024-06-15"


def test_bucket_in_winter():
    # Standard time is UTC-4
    assert bucket_date(datetime(2024, 1, 10, 3, 30)) == "2024-01-10"
    assert bucket_date(datetime(2024, 1, 10, 4, 30)) == "2024-01-11"


def test_bucket_accepts_aware_timestamps():
    aware = pytz.utc.localize(datetime(2024, 6, 14, 15, 0))
    assert bucket_date(aware) == bucket_date(datetime(2024, 6, 14, 15, 0))


def test_bucket_is_deterministic():
    ts = datetime(2024, 11, 3, 5, 30)
    assert len({bucket_date(ts) for _ in range(10)}) == 1


def test_bucket_keys_sort_chronologically():
    stamps = [datetime(2024, 12, 31, 12), datetime(2024, 2, 1, 12), datetime(2024, 10, 5, 12)]
    keys = [bucket_date(ts) for ts in stamps]
    assert sorted(keys) == [bucket_date(ts) for ts in sorted(stamps)]


def test_window_month():
    window = ReportWindow.from_args({"year": "2024", "month": "6"})
    assert window.start == datetime(2024, 6, 1)
    assert window.end == datetime(2024, 6, 30, 23, 59, 59, 999999)
    assert window.contains(datetime(2024, 6, 30, 23, 0))
    assert not window.contains(datetime(2024, 7, 1, 0, 0))
    assert window.label == "2024-6"


def test_window_whole_year():
    for month in ("", "0", "all"):
        window = ReportWindow.from_args({"year": "2024", "month": month})
        assert window.month == 0
        assert window.start == datetime(2024, 1, 1)
        assert window.end == datetime(2024, 12, 31, 23, 59, 59, 999999)


def test_window_year_required():
    with pytest.raises(ValidationError) as e:
        ReportWindow.from_args({"month": "6"})
    assert e.value.description == "Year is required"


def test_window_all_time():
    window = ReportWindow.from_args({}, year_required=False)
    assert window.is_all_time
    assert window.filter(None) == []
    assert window.contains(datetime(1999, 1, 1))
    assert window.label == "all-0"


@pytest.mark.parametrize("args", [{"year": "2024", "month": "13"}, {"year": "2024", "month": "june"}, {"year": "x"}])
def test_window_rejects_bad_values(args):
    with pytest.raises(ValidationError):
        ReportWindow.from_args(args)
