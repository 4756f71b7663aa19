# tests/test_utils.py
from datetime import datetime

import pytest

from proplayhub_app.utils import add_months, slugify, isoformat, parse_datetime


@pytest.mark.parametrize("start,months,expected", [
    (datetime(2024, 1, 15, 10, 0), 1, datetime(2024, 2, 15, 10, 0)),
    (datetime(2024, 1, 31), 1, datetime(2024, 2, 29)),
    (datetime(2023, 1, 31), 1, datetime(2023, 2, 28)),
    (datetime(2024, 12, 10), 1, datetime(2025, 1, 10)),
    (datetime(2024, 3, 31), 13, datetime(2025, 4, 30)),
])
def test_add_months(start, months, expected):
    assert add_months(start, months) == expected


def test_slugify():
    assert slugify("  PC Gaming Elite!! ") == "pc-gaming-elite"
    assert slugify("Xbox / Game -- Master") == "xbox-game-master"
    assert slugify(None) == ""


def test_isoformat_and_parse():
    dt = datetime(2025, 5, 1, 12, 30)
    assert isoformat(dt) == "2025-05-01T12:30:00Z"
    assert isoformat(None) is None
    assert parse_datetime("2025-05-01T12:30:00Z") == dt
    assert parse_datetime("2025-05-01T14:30:00+02:00") == dt
    assert parse_datetime("") is None
    with pytest.raises(ValueError):
        parse_datetime("tomorrow")
