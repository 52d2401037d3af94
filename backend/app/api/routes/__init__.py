"""Route modules for the user auth API."""
from . import auth, health, users

__all__ = ["auth", "health", "users"]
