from src.core.database.base import Base, BaseModel
from src.core.database.session import async_session, engine, get_db

__all__ = ["Base", "BaseModel", "async_session", "engine", "get_db"]
