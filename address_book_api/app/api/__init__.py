"""
API package.

``router.py`` aggregates the endpoint modules of ``endpoints`` into a
single router which ``main.create_app`` mounts under ``/api``.
"""
