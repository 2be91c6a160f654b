"""
Contact endpoints.

The two read endpoints use the cache-aside pattern: look in Redis
first, fall back to the contact store on a miss and populate the cache
for ``cache_ttl_seconds``.  The ``message`` field tells the client
where the data came from.  Mutations go straight to the store and do
not touch the cache.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...schemas.contact import (
    Contact,
    ContactCreate,
    ContactListResponse,
    ContactResponse,
    ResponseModel,
)
from ...services.cache_service import CONTACT_LIST_KEY, RedisCacheService, contact_key
from ...services.contact_service import ContactService
from ..deps import get_cache, get_contact_service


router = APIRouter()

FROM_CACHE = "Data from cache"
FROM_STORE = "Data from database"


def _not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"success": False, "message": "Contact not found", "data": None},
    )


@router.get("", response_model=ContactListResponse)
def get_contacts(
    service: ContactService = Depends(get_contact_service),
    cache: RedisCacheService = Depends(get_cache),
) -> ContactListResponse:
    """Return every contact, served from the cache when possible."""
    cached = cache.get(CONTACT_LIST_KEY)
    if cached is not None:
        return ContactListResponse(message=FROM_CACHE, contacts=[Contact(**c) for c in cached])

    contacts: List[Contact] = service.get_all_contacts()
    cache.set(CONTACT_LIST_KEY, [c.model_dump() for c in contacts])
    return ContactListResponse(message=FROM_STORE, contacts=contacts)


@router.get(
    "/{contact_id}",
    response_model=ContactResponse,
    responses={404: {"description": "Contact not found"}},
)
def get_contact(
    contact_id: int,
    service: ContactService = Depends(get_contact_service),
    cache: RedisCacheService = Depends(get_cache),
):
    """Return a single contact, served from the cache when possible.

    Misses for unknown ids are not cached.
    """
    key = contact_key(contact_id)
    cached = cache.get(key)
    if cached is not None:
        return ContactResponse(message=FROM_CACHE, contact=Contact(**cached))

    contact = service.get_contact_by_id(contact_id)
    if contact is None:
        return _not_found()
    cache.set(key, contact.model_dump())
    return ContactResponse(message=FROM_STORE, contact=contact)


@router.post("", response_model=ResponseModel[Contact])
def add_contact(
    contact: ContactCreate, service: ContactService = Depends(get_contact_service)
):
    added = service.add_contact(contact)
    return ResponseModel[Contact](success=True, message="Contact added successfully", data=[added])


@router.put(
    "/{contact_id}",
    response_model=ResponseModel[Contact],
    responses={404: {"description": "Contact not found"}},
)
def update_contact(
    contact_id: int,
    contact: ContactCreate,
    service: ContactService = Depends(get_contact_service),
):
    """Overwrite every field of an existing contact."""
    if not service.update_contact(contact_id, contact):
        return _not_found()
    updated = Contact(id=contact_id, **contact.model_dump())
    return ResponseModel[Contact](success=True, message="Contact updated successfully", data=[updated])


@router.delete(
    "/{contact_id}",
    response_model=ResponseModel[Contact],
    responses={404: {"description": "Contact not found"}},
)
def delete_contact(contact_id: int, service: ContactService = Depends(get_contact_service)):
    if not service.delete_contact(contact_id):
        return _not_found()
    return ResponseModel[Contact](success=True, message="Contact deleted successfully")
