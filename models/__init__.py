"""
Persistence layer. `storage` is the process-wide DBStorage (engine + scoped_session).
"""
from models.db_storage import DBStorage

storage = DBStorage()
storage.reload()
