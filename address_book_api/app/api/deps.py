"""
FastAPI dependencies that hand out the objects built by ``create_app``.

Services live on ``app.state`` for the lifetime of the process; routes
receive them through ``Depends`` so tests can swap any of them with
``app.dependency_overrides``.
"""

from fastapi import Request

from ..services.auth_service import AuthService
from ..services.cache_service import RedisCacheService
from ..services.contact_service import ContactService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


def get_cache(request: Request) -> RedisCacheService:
    return request.app.state.cache
