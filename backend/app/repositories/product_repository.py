"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and their colors and returns
Product domain models.
"""
from typing import Any, Dict, List, Optional

from app.domain.product import Product, ProductColor, ColorIn
from app.core.database import Database, db as default_db


# Whitelisted ORDER BY clauses for the ?sort= query parameter
SORT_CLAUSES = {
    'newest': 'created_at DESC',
    'price_asc': 'price ASC',
    'price_desc': 'price DESC',
    'discount': 'discount DESC',
    'name_asc': 'name_fr ASC',
    'name_desc': 'name_fr DESC',
}

PRODUCT_COLUMNS = """
    id, name_fr, name_ar, desc_fr, desc_ar, price, discount,
    category, image, stock, created_at
"""


def order_by(sort: Optional[str], default: str = 'newest') -> str:
    """Map a sort key to an ORDER BY clause, unknown keys use the default"""
    return "ORDER BY " + SORT_CLAUSES.get(sort or default, SORT_CLAUSES[default])


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    def __init__(self, database: Optional[Database] = None):
        self.db = database or default_db

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return Product(**dict(row))

    # ------------------------------------------------------------------
    # Catalog reads
    # ------------------------------------------------------------------

    def find_all(self, sort: Optional[str] = None) -> List[Product]:
        rows = self.db.fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            {order_by(sort)}
        """)
        return [self._map_row_to_product(row) for row in rows]

    def search(self, query: str, sort: Optional[str] = None) -> List[Product]:
        """
        Search products by name or description (both languages)

        Args:
            query: Search text, matched case-insensitively anywhere in the field
            sort: Sort key (see SORT_CLAUSES)
        """
        pattern = f"%{query}%"
        rows = self.db.fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE name_fr ILIKE %s OR name_ar ILIKE %s OR desc_fr ILIKE %s OR desc_ar ILIKE %s
            {order_by(sort)}
        """, (pattern, pattern, pattern, pattern))
        return [self._map_row_to_product(row) for row in rows]

    def find_discounted(self, sort: Optional[str] = None) -> List[Product]:
        rows = self.db.fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE discount > 0
            {order_by(sort, default='discount')}
        """)
        return [self._map_row_to_product(row) for row in rows]

    def find_by_category(self, category: str, sort: Optional[str] = None) -> List[Product]:
        rows = self.db.fetch_all(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE category = %s
            {order_by(sort)}
        """, (category,))
        return [self._map_row_to_product(row) for row in rows]

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        row = self.db.fetch_one(f"""
            SELECT {PRODUCT_COLUMNS}
            FROM products
            WHERE id = %s
        """, (product_id,))
        if not row:
            return None
        return self._map_row_to_product(row)

    def find_colors(self, product_id: int) -> List[ProductColor]:
        rows = self.db.fetch_all("""
            SELECT id, product_id, name_fr, name_ar, hex_code, stock, image
            FROM product_colors
            WHERE product_id = %s
            ORDER BY id
        """, (product_id,))
        return [ProductColor(**dict(row)) for row in rows]

    def delete(self, product_id: int) -> int:
        return self.db.execute("DELETE FROM products WHERE id = %s", (product_id,))

    # ------------------------------------------------------------------
    # Transactional writes used by the product-save operation
    # ------------------------------------------------------------------

    def find_image(self, cursor, product_id: int) -> Optional[Dict[str, Any]]:
        """Existing product row (id, image) or None"""
        cursor.execute("SELECT id, image FROM products WHERE id = %s", (product_id,))
        return cursor.fetchone()

    def insert(self, cursor, fields: Dict[str, Any]) -> int:
        cursor.execute("""
            INSERT INTO products (name_fr, name_ar, desc_fr, desc_ar, price, discount, category, image, stock)
            VALUES (%(name_fr)s, %(name_ar)s, %(desc_fr)s, %(desc_ar)s, %(price)s, %(discount)s,
                    %(category)s, %(image)s, %(stock)s)
            RETURNING id
        """, fields)
        return cursor.fetchone()['id']

    def update(self, cursor, product_id: int, fields: Dict[str, Any]) -> None:
        cursor.execute("""
            UPDATE products
            SET name_fr = %(name_fr)s, name_ar = %(name_ar)s, desc_fr = %(desc_fr)s, desc_ar = %(desc_ar)s,
                price = %(price)s, discount = %(discount)s, category = %(category)s,
                image = %(image)s, stock = %(stock)s
            WHERE id = %(id)s
        """, {**fields, 'id': product_id})

    def delete_colors_except(self, cursor, product_id: int, keep_ids: List[int]) -> int:
        """Delete every color of the product whose ID is not in keep_ids"""
        if keep_ids:
            cursor.execute("""
                DELETE FROM product_colors
                WHERE product_id = %s AND NOT (id = ANY(%s))
            """, (product_id, keep_ids))
        else:
            cursor.execute("DELETE FROM product_colors WHERE product_id = %s", (product_id,))
        return cursor.rowcount

    def insert_color(self, cursor, product_id: int, color: ColorIn, image: Optional[str]) -> None:
        cursor.execute("""
            INSERT INTO product_colors (product_id, name_fr, name_ar, hex_code, stock, image)
            VALUES (%s, %s, %s, %s, %s, %s)
        """, (product_id, color.name_fr, color.name_ar, color.hex_code, color.stock or 0, image))

    def update_color(self, cursor, product_id: int, color: ColorIn, image: Optional[str]) -> None:
        cursor.execute("""
            UPDATE product_colors
            SET name_fr = %s, name_ar = %s, hex_code = %s, stock = %s, image = %s
            WHERE id = %s AND product_id = %s
        """, (color.name_fr, color.name_ar, color.hex_code, color.stock or 0, image, int(color.id), product_id))

    def load_with_colors(self, cursor, product_id: int) -> Product:
        """Re-read a product and its colors inside the current transaction"""
        cursor.execute(f"SELECT {PRODUCT_COLUMNS} FROM products WHERE id = %s", (product_id,))
        product = self._map_row_to_product(cursor.fetchone())
        cursor.execute("""
            SELECT id, product_id, name_fr, name_ar, hex_code, stock, image
            FROM product_colors
            WHERE product_id = %s
            ORDER BY id
        """, (product_id,))
        product.colors = [ProductColor(**dict(row)) for row in cursor.fetchall()]
        return product
