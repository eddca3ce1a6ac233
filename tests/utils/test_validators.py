# tests/utils/test_validators.py
import pytest
from datetime import date

from sitelog.utils.validators import parse_date, require_range, require_positive, require_url, require_text, slugify
from sitelog.utils.serializers import user_summary


def test_parse_date_accepts_iso_string_and_date():
    # 1. 준비 (Arrange)
    today = date(2024, 3, 1)

    # 2. 실행 (Act) & 3. 단언 (Assert)
    assert parse_date("2024-03-01") == today
    assert parse_date(today) is today
    assert parse_date(None) is None


def test_parse_date_rejects_other_formats():
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        parse_date("01/03/2024")


@pytest.mark.parametrize("value", [True, "10", None])
def test_require_range_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        require_range(value, "progress", 0, 100)


def test_require_range_bounds_are_inclusive():
    assert require_range(0, "progress", 0, 100) == 0
    assert require_range(100, "progress", 0, 100) == 100
    with pytest.raises(ValueError):
        require_range(100.5, "progress", 0, 100)


def test_require_positive():
    assert require_positive(0.5, "amount") == 0.5
    with pytest.raises(ValueError):
        require_positive(0, "amount")


@pytest.mark.parametrize("url", ["ftp://cdn.example.com/a.jpg", "https://", "cdn.example.com/a.jpg", 42])
def test_require_url_rejects_invalid(url):
    with pytest.raises(ValueError):
        require_url(url)


def test_require_text():
    assert require_text("Semen", "name") == "Semen"
    with pytest.raises(ValueError):
        require_text("  ", "name")


def test_slugify():
    assert slugify("Semen Portland 50kg") == "semen-portland-50kg"
    assert slugify("  Besi Beton (10mm)! ") == "besi-beton-10mm"


def test_user_summary_hides_private_fields():
    class Author:
        id, name, image, email = 1, "Budi", None, "budi@example.com"

    assert user_summary(Author()) == {"id": 1, "name": "Budi", "image": None}
    assert user_summary(None) is None
