"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and order items and returns Order
domain models. Write methods used inside the order-creation transaction take
the transaction cursor explicitly.
"""
from typing import List, Optional, Tuple, Any
from datetime import datetime

from app.domain.order import Order, OrderItem, OrderItemIn
from app.core.database import Database, db as default_db


ORDER_COLUMNS = """
    id, name, phone, address, notes, status, order_source,
    order_date, completed_date
"""

ITEM_QUERY = """
    SELECT
        oi.id, oi.order_id, oi.product_id, oi.color_id,
        oi.quantity, oi.price, oi.discount,
        p.name_fr as product_name,
        p.name_ar as product_name_ar,
        p.image,
        pc.name_fr as color_name_fr,
        pc.name_ar as color_name_ar,
        pc.hex_code as color_hex,
        pc.image as color_image
    FROM order_items oi
    JOIN products p ON oi.product_id = p.id
    LEFT JOIN product_colors pc ON oi.color_id = pc.id
    WHERE oi.order_id = %s
    ORDER BY oi.id
"""


def build_export_query(
    order_id: Optional[int] = None,
    status: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None
) -> Tuple[str, List[Any]]:
    """
    Build the filtered order query used by report exports

    Args:
        order_id: Exact order ID
        status: Single status; 'all' or None means no status filter
        start_date: YYYY-MM-DD, inclusive from 00:00:00
        end_date: YYYY-MM-DD, inclusive until 23:59:59

    Returns:
        Tuple of (SQL, params). Filters are AND-combined, newest first.
    """
    conditions = []
    params: List[Any] = []

    if order_id is not None:
        conditions.append("id = %s")
        params.append(order_id)

    if status and status != 'all':
        conditions.append("status = %s")
        params.append(status)

    if start_date:
        conditions.append("order_date >= %s")
        params.append(f"{start_date} 00:00:00")

    if end_date:
        conditions.append("order_date <= %s")
        params.append(f"{end_date} 23:59:59")

    where_clause = " AND ".join(conditions) if conditions else "1=1"

    query = f"""
        SELECT {ORDER_COLUMNS}
        FROM orders
        WHERE {where_clause}
        ORDER BY order_date DESC
    """
    return query, params


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    """

    def __init__(self, database: Optional[Database] = None):
        self.db = database or default_db

    @staticmethod
    def _map_row_to_item(row: dict) -> OrderItem:
        """Color image, when present, replaces the product image"""
        data = dict(row)
        if data.get('color_image'):
            data['image'] = data['color_image']
        return OrderItem(**data)

    # ------------------------------------------------------------------
    # Transactional writes (caller owns the cursor / transaction)
    # ------------------------------------------------------------------

    def insert_order(self, cursor, name: str, phone: str, address: str,
                     notes: Optional[str], order_source: str, status: str = "pending") -> int:
        """Insert an order row and return its ID"""
        cursor.execute("""
            INSERT INTO orders (name, phone, address, notes, status, order_source)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING id
        """, (name, phone, address, notes, status, order_source))
        return cursor.fetchone()['id']

    def insert_item(self, cursor, order_id: int, item: OrderItemIn) -> None:
        """Insert an order item with the caller-supplied price verbatim"""
        cursor.execute("""
            INSERT INTO order_items (order_id, product_id, quantity, price, color_id)
            VALUES (%s, %s, %s, %s, %s)
        """, (order_id, item.productId, item.quantity, item.price, item.colorId))

    def decrement_color_stock(self, cursor, color_id: int, product_id: int, quantity: int) -> int:
        """
        Decrement a color's stock when enough is available

        Returns:
            Affected row count (0 when stock was insufficient)
        """
        cursor.execute("""
            UPDATE product_colors
            SET stock = stock - %s
            WHERE id = %s AND product_id = %s AND stock >= %s
        """, (quantity, color_id, product_id, quantity))
        return cursor.rowcount

    def decrement_product_stock(self, cursor, product_id: int, quantity: int) -> int:
        """
        Decrement a product's stock when enough is available

        Returns:
            Affected row count (0 when stock was insufficient or NULL)
        """
        cursor.execute("""
            UPDATE products
            SET stock = stock - %s
            WHERE id = %s AND stock >= %s
        """, (quantity, product_id, quantity))
        return cursor.rowcount

    # ------------------------------------------------------------------
    # Reads and single-statement writes
    # ------------------------------------------------------------------

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID (without items)

        Returns:
            Order or None if not found
        """
        row = self.db.fetch_one(f"""
            SELECT {ORDER_COLUMNS}
            FROM orders
            WHERE id = %s
        """, (order_id,))
        if not row:
            return None
        return Order(**dict(row))

    def find_all(self) -> List[Order]:
        """All orders, newest first"""
        rows = self.db.fetch_all(f"""
            SELECT {ORDER_COLUMNS}
            FROM orders
            ORDER BY order_date DESC
        """)
        return [Order(**dict(row)) for row in rows]

    def find_items(self, order_id: int) -> List[OrderItem]:
        """Items of one order with product names and color details"""
        rows = self.db.fetch_all(ITEM_QUERY, (order_id,))
        return [self._map_row_to_item(row) for row in rows]

    def find_for_export(
        self,
        order_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None
    ) -> List[Order]:
        """
        Find orders matching export filters, each with its items

        Items are loaded with one query per order.
        """
        query, params = build_export_query(order_id, status, start_date, end_date)
        rows = self.db.fetch_all(query, params)

        orders = []
        for row in rows:
            order = Order(**dict(row))
            order.items = self.find_items(order.id)
            orders.append(order)
        return orders

    def update_status(self, order_id: int, status: str, completed_date: Optional[datetime]) -> int:
        return self.db.execute("""
            UPDATE orders
            SET status = %s, completed_date = %s
            WHERE id = %s
        """, (status, completed_date, order_id))

    def count_active(self) -> int:
        """Orders that are neither delivered nor cancelled"""
        row = self.db.fetch_one("""
            SELECT COUNT(*) as count
            FROM orders
            WHERE status != 'delivered' AND status != 'cancelled'
        """)
        return row['count'] if row else 0
