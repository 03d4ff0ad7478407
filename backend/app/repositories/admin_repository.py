"""
Admin Repository - dashboard accounts used for authentication
"""
from typing import Any, Dict, Optional

from app.core.database import Database, db as default_db


class AdminRepository:

    def __init__(self, database: Optional[Database] = None):
        self.db = database or default_db

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        """Admin row including password_hash, or None"""
        return self.db.fetch_one(
            "SELECT id, username, password_hash, created_at FROM admins WHERE username = %s",
            (username,)
        )

    def find_by_id(self, admin_id: int) -> Optional[Dict[str, Any]]:
        return self.db.fetch_one(
            "SELECT id, username, created_at FROM admins WHERE id = %s",
            (admin_id,)
        )

    def create(self, username: str, password_hash: str) -> int:
        row = self.db.fetch_one(
            "INSERT INTO admins (username, password_hash) VALUES (%s, %s) RETURNING id",
            (username, password_hash)
        )
        return row['id']
