import pytest

from core.models import date_to_epoch_ms, epoch_ms_to_date

FEB_1_2026_MS = 1769904000000


@pytest.mark.parametrize(
    "value",
    [
        "2026-02-01",
        "2026-02-01T00:00:00",
        "2026-02-01T00:00:00Z",
        "2026-02-01T02:00:00+02:00",
    ],
)
def test_date_to_epoch_ms_accepts_iso_forms(value):
    assert date_to_epoch_ms(value) == FEB_1_2026_MS


@pytest.mark.parametrize("value", ["7d", "yesterday", ""])
def test_date_to_epoch_ms_names_the_expected_format(value):
    with pytest.raises(ValueError, match="Expected an ISO date"):
        date_to_epoch_ms(value)


def test_epoch_ms_to_date():
    assert epoch_ms_to_date(FEB_1_2026_MS) == "2026-02-01"
    assert epoch_ms_to_date(FEB_1_2026_MS + 23 * 60 * 60 * 1000) == "2026-02-01"
    assert epoch_ms_to_date(None) == ""
