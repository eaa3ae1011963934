"""
FastAPI Dependencies for GREpandit
"""

from app.dependencies.auth import (
    get_user_token,
    get_current_user,
)

__all__ = [
    "get_user_token",
    "get_current_user",
]
