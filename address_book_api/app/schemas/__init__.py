"""
Pydantic schema definitions for API payloads.

Schemas are separated from the persistence records in ``repositories``
so that API representation (for example hiding password hashes) is
decoupled from storage.
"""
