"""
Endpoint subpackage.

Each module defines an ``APIRouter`` for one concern; all of them are
aggregated in ``api/router.py``.
"""
