"""API router for address book contacts."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ....application.services.address_book_service import AddressBookService
from ....core.dependencies import get_address_book_service
from ..schemas.common import ResponseModel
from ..schemas.contact_schemas import ContactRequest, ContactResponse

router = APIRouter(prefix="/addressbook", tags=["addressbook"])

CONTACT_NOT_FOUND = "Contact not found"


@router.get("", response_model=ResponseModel[List[ContactResponse]])
async def get_contacts(
    service: AddressBookService = Depends(get_address_book_service),
) -> ResponseModel[List[ContactResponse]]:
    """List every contact."""
    contacts = service.get_all_contacts()
    return ResponseModel(
        message="Contacts retrieved successfully",
        data=[ContactResponse.model_validate(contact) for contact in contacts],
    )


@router.get("/{contact_id}", response_model=ResponseModel[ContactResponse])
async def get_contact(
    contact_id: int,
    service: AddressBookService = Depends(get_address_book_service),
) -> ResponseModel[ContactResponse]:
    """Get a contact by ID."""
    contact = service.get_contact_by_id(contact_id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)

    return ResponseModel(
        message="Contact retrieved successfully",
        data=ContactResponse.model_validate(contact),
    )


@router.post("", response_model=ResponseModel[ContactResponse], status_code=status.HTTP_201_CREATED)
async def add_contact(
    request: ContactRequest,
    service: AddressBookService = Depends(get_address_book_service),
) -> ResponseModel[ContactResponse]:
    """Create a contact."""
    created = service.add_contact(request.to_entity())
    if created is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Failed to add contact")

    return ResponseModel(
        message="Contact added successfully",
        data=ContactResponse.model_validate(created),
    )


@router.put("/{contact_id}", response_model=ResponseModel[ContactResponse])
async def update_contact(
    contact_id: int,
    request: ContactRequest,
    service: AddressBookService = Depends(get_address_book_service),
) -> ResponseModel[ContactResponse]:
    """Replace every field of an existing contact."""
    if not service.update_contact(contact_id, request.to_entity()):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)

    updated = service.get_contact_by_id(contact_id)
    if updated is None:
        # Deleted concurrently between the update and the re-read
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)

    return ResponseModel(
        message="Contact updated successfully",
        data=ContactResponse.model_validate(updated),
    )


@router.delete("/{contact_id}", response_model=ResponseModel[None])
async def delete_contact(
    contact_id: int,
    service: AddressBookService = Depends(get_address_book_service),
) -> ResponseModel[None]:
    """Delete a contact."""
    if not service.delete_contact(contact_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)

    return ResponseModel(message="Contact deleted successfully")
