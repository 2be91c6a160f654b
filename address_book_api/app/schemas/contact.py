"""
Pydantic models for address book contacts.

Field constraints (required names, email format, ten digit phone
number) are declared here and enforced by FastAPI before a request
reaches the service layer.  Updates overwrite every field, so the same
``ContactCreate`` schema is used for ``POST`` and ``PUT`` bodies.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactBase(BaseModel):
    first_name: str = Field(..., min_length=1, examples=["John"])
    last_name: str = Field(..., min_length=1, examples=["Doe"])
    email: EmailStr = Field(..., examples=["john.doe@example.com"])
    phone: str = Field(..., pattern=r"^[0-9]{10}$", examples=["1234567890"])
    address: Optional[str] = Field(None, examples=["New York"])


class ContactCreate(ContactBase):
    """Schema for adding or fully replacing a contact."""


class Contact(ContactBase):
    """A stored contact, including the id assigned by the store."""

    id: int

    model_config = ConfigDict(from_attributes=True)


T = TypeVar("T")


class ResponseModel(BaseModel, Generic[T]):
    """Envelope used by the contact mutation endpoints."""

    success: bool
    message: str
    data: Optional[List[T]] = None


class ContactListResponse(BaseModel):
    message: str
    contacts: List[Contact]


class ContactResponse(BaseModel):
    message: str
    contact: Contact
