"""
Application package.

``main.create_app`` builds the FastAPI application; ``core`` holds
configuration, database access, security helpers and error types;
``repositories`` the credential and contact stores; ``services`` the
business logic and the Redis, email and notification adapters;
``api`` the HTTP routes.
"""

from .main import create_app  # noqa: F401
