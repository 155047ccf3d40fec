from datetime import datetime
from typing import Optional


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """to_dict 응답용 타임스탬프 문자열. 값이 없으면 None."""
    return value.isoformat() if value is not None else None
