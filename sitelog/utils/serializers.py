# sitelog/utils/serializers.py
from datetime import date, datetime
from typing import Any, Dict, Optional, Union


def iso(value: Optional[Union[date, datetime]]) -> Optional[str]:
    """날짜/시각을 JSON으로 보낼 수 있는 ISO 8601 문자열로 변환합니다."""
    return value.isoformat() if value is not None else None


def enum_value(value) -> Optional[str]:
    return value.value if value is not None else None


def user_summary(user) -> Optional[Dict[str, Any]]:
    """다른 리소스에 포함시킬 작성자/요청자 요약 정보입니다."""
    if user is None:
        return None
    return {"id": user.id, "name": user.name, "image": user.image}
