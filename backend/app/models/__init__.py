"""SQLAlchemy models exposed for metadata creation and imports."""
from .user import User

__all__ = ["User"]
