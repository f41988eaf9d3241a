"""Pydantic schemas for address book endpoints."""

import re

from pydantic import BaseModel, ConfigDict, field_validator

from ....domain.models import Contact

_PHONE_PATTERN = re.compile(r"^\d{10}$")


class ContactRequest(BaseModel):
    """Request schema for creating or replacing a contact."""

    model_config = ConfigDict(validate_default=True)

    full_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone_number: str = ""

    @field_validator("full_name")
    @classmethod
    def _check_full_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Full Name is required")
        if len(value) > 100:
            raise ValueError("Full Name cannot exceed 100 characters")
        return value

    @field_validator("phone_number")
    @classmethod
    def _check_phone_number(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Phone Number is required")
        if not _PHONE_PATTERN.match(value):
            raise ValueError("Phone Number must be exactly 10 digits")
        return value

    def to_entity(self) -> Contact:
        return Contact(
            full_name=self.full_name,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            phone_number=self.phone_number,
        )


class ContactResponse(BaseModel):
    """Response schema for contact data."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    address: str
    city: str
    state: str
    zip_code: str
    phone_number: str
