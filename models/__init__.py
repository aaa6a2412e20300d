from models.base_model import Base
from models.user import User
from models.refresh_token import RefreshToken
from models.db_storage import DBStorage, SessionStorage
from models.errors import StorageError, NotFoundError, EmailTakenError

__all__ = [
    "Base",
    "User",
    "RefreshToken",
    "DBStorage",
    "SessionStorage",
    "StorageError",
    "NotFoundError",
    "EmailTakenError",
]
