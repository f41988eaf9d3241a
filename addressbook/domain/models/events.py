from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

CONTACT_ADDED = "contact_added"
USER_REGISTERED = "user_registered"


@dataclass(slots=True)
class NotificationEvent:
    event: str
    payload: Dict[str, Any]
    occurred_at: str = field(
        default_factory=lambda: datetime.now(tz=timezone.utc).replace(microsecond=0).isoformat()
    )

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=str, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "NotificationEvent":
        data = json.loads(raw)
        return cls(event=data["event"], payload=data.get("payload") or {}, occurred_at=data["occurred_at"])
