from __future__ import annotations

from typing import Any, Dict, Protocol


class Notifier(Protocol):
    """Fire-and-forget publisher of application events."""

    def publish(self, event: str, payload: Dict[str, Any]) -> None:
        ...
