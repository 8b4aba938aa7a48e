from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from .enums import Priority


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Task:
    id: int
    text: str
    created_at: datetime
    completed: bool = False
    completed_at: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM


@dataclass(frozen=True)
class EditSession:
    target_id: int
    draft_text: str
