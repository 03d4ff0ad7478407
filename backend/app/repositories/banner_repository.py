"""
Banner Repository - Data Access Layer for Banners
"""
from typing import List, Optional

from app.domain.banner import Banner
from app.core.database import Database, db as default_db


BANNER_COLUMNS = "id, image, title_fr, title_ar, subtitle_fr, subtitle_ar, active, created_at"


class BannerRepository:
    """Repository for Banner data access"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database or default_db

    def find_active(self) -> List[Banner]:
        rows = self.db.fetch_all(f"""
            SELECT {BANNER_COLUMNS}
            FROM banners
            WHERE active = %s
            ORDER BY created_at DESC
        """, (True,))
        return [Banner(**dict(row)) for row in rows]

    def find_all(self) -> List[Banner]:
        rows = self.db.fetch_all(f"""
            SELECT {BANNER_COLUMNS}
            FROM banners
            ORDER BY created_at DESC
        """)
        return [Banner(**dict(row)) for row in rows]

    def find_by_id(self, banner_id: int) -> Optional[Banner]:
        row = self.db.fetch_one(f"SELECT {BANNER_COLUMNS} FROM banners WHERE id = %s", (banner_id,))
        return Banner(**dict(row)) if row else None

    def insert(self, image: str, title_fr, title_ar, subtitle_fr, subtitle_ar, active: bool) -> Banner:
        row = self.db.fetch_one(f"""
            INSERT INTO banners (image, title_fr, title_ar, subtitle_fr, subtitle_ar, active)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {BANNER_COLUMNS}
        """, (image, title_fr, title_ar, subtitle_fr, subtitle_ar, active))
        return Banner(**dict(row))

    def update(self, banner_id: int, image: str, title_fr, title_ar, subtitle_fr, subtitle_ar,
               active: bool) -> Optional[Banner]:
        row = self.db.fetch_one(f"""
            UPDATE banners
            SET image = %s, title_fr = %s, title_ar = %s, subtitle_fr = %s, subtitle_ar = %s, active = %s
            WHERE id = %s
            RETURNING {BANNER_COLUMNS}
        """, (image, title_fr, title_ar, subtitle_fr, subtitle_ar, active, banner_id))
        return Banner(**dict(row)) if row else None

    def delete(self, banner_id: int) -> int:
        return self.db.execute("DELETE FROM banners WHERE id = %s", (banner_id,))
