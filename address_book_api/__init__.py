"""
Top-level package for the Address Book API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
