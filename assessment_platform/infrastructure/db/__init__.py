from . import models  # noqa: F401
from .base import Base
from .session import Database, get_session

__all__ = ["Base", "Database", "get_session"]
