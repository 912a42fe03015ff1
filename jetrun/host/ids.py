from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4


def _ts(dt: datetime) -> str:
    return dt.strftime("%Y%m%dT%H%M%SZ")


@dataclass(frozen=True)
class IdGenerator:
    def new_invocation_id(self, now: datetime) -> str:
        return f"inv_{_ts(now)}_{uuid4().hex[:8]}"
