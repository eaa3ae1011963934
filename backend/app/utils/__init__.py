"""
GREpandit Utilities Package

Contains:
- http_errors: Engine exception -> HTTPException mapping for routers
"""

from app.utils.http_errors import to_http_exception

__all__ = [
    "to_http_exception",
]
