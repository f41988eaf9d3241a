"""Contact domain model for address book entries."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(slots=True)
class Contact:
    """
    Contact entity stored in the address book.

    Attributes:
        id: Identifier assigned by the store (None until persisted)
        full_name: Contact full name (required)
        address: Street address
        city: City
        state: State or province
        zip_code: Postal code
        phone_number: 10-digit phone number (required)
    """

    full_name: str
    phone_number: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contact":
        return cls(
            id=data.get("id"),
            full_name=data["full_name"],
            phone_number=data["phone_number"],
            address=data.get("address") or "",
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip_code=data.get("zip_code") or "",
        )
