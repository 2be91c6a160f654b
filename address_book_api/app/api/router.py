"""
Top-level API router.

The auth router is included first so that fixed paths such as
``/addressbook/protected-data`` are matched before the
``/addressbook/{contact_id}`` route.
"""

from fastapi import APIRouter

from .endpoints import auth, contacts


router = APIRouter()

router.include_router(auth.router, prefix="/addressbook", tags=["auth"])
router.include_router(contacts.router, prefix="/addressbook", tags=["contacts"])
