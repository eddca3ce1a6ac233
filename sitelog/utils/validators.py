# sitelog/utils/validators.py
import re
from datetime import date
from typing import Optional, Union
from urllib.parse import urlparse


def parse_date(value: Optional[Union[str, date]]) -> Optional[date]:
    """
    'YYYY-MM-DD' 문자열 또는 date 객체를 date로 변환합니다.

    Raises:
        ValueError: 날짜 형식이 올바르지 않을 때.
    """
    if value is None or isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid date '{value}'. Expected YYYY-MM-DD.")


def require_text(value: Optional[str], field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{field}' must be a non-empty string.")
    return value


def require_range(value, field: str, minimum=None, maximum=None):
    """숫자 값이 [minimum, maximum] 범위 안에 있는지 확인합니다."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{field}' must be a number.")
    if minimum is not None and value < minimum:
        raise ValueError(f"'{field}' must be at least {minimum}.")
    if maximum is not None and value > maximum:
        raise ValueError(f"'{field}' must be at most {maximum}.")
    return value


def require_positive(value, field: str):
    require_range(value, field)
    if value <= 0:
        raise ValueError(f"'{field}' must be positive.")
    return value


def require_url(value: str, field: str = "url") -> str:
    parsed = urlparse(value) if isinstance(value, str) else None
    if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"'{field}' must be a valid http(s) URL.")
    return value


def slugify(text: str) -> str:
    """'Semen Portland 50kg' -> 'semen-portland-50kg'"""
    return re.sub(r"(^-|-$)", "", re.sub(r"[^a-z0-9]+", "-", text.lower()))
