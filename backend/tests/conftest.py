"""
Pytest fixtures and configuration for the shop backend tests

No test needs a live database: repositories run against a mocked psycopg2
pool, services against an in-memory shop with fake repositories.
"""
import os
import copy
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

# Settings are read on first import of app.core.config
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")

from app.core.database import Database  # noqa: E402
from app.domain.order import Order, OrderItem  # noqa: E402
from app.domain.product import Product, ProductColor  # noqa: E402

ORDER_DATE = datetime(2024, 1, 15, 10, 30)


# ============================================================================
# Mocked psycopg2 pool (repository tests)
# ============================================================================

@pytest.fixture
def mock_cursor():
    cursor = MagicMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_conn(mock_cursor):
    conn = MagicMock()
    conn.cursor.return_value = mock_cursor
    return conn


@pytest.fixture
def mock_db(mock_conn):
    """Database wired to a mocked pool; every checkout returns mock_conn"""
    pool = MagicMock()
    pool.getconn.return_value = mock_conn
    return Database(pool=pool)


# ============================================================================
# In-memory shop (service tests)
# ============================================================================

class InMemoryShop:
    """Rows of the order-related tables kept in plain dicts"""

    def __init__(self):
        self.products = {}
        self.colors = {}
        self.orders = {}
        self.items = []
        self.next_order_id = 1

    def add_product(self, product_id, name_fr, stock=None, price="0"):
        self.products[product_id] = {
            'id': product_id, 'name_fr': name_fr, 'stock': stock, 'price': Decimal(price),
        }

    def add_color(self, color_id, product_id, name_fr, stock):
        self.colors[color_id] = {
            'id': color_id, 'product_id': product_id, 'name_fr': name_fr, 'stock': stock,
        }

    def snapshot(self):
        return copy.deepcopy(self.__dict__)

    def restore(self, state):
        self.__dict__.update(state)


class FakeDatabase:
    """transaction() restores the shop state when the block raises"""

    def __init__(self, shop):
        self.shop = shop
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        state = self.shop.snapshot()
        try:
            yield MagicMock(name="cursor")
            self.commits += 1
        except Exception:
            self.shop.restore(state)
            self.rollbacks += 1
            raise


class FakeOrderRepository:

    def __init__(self, shop):
        self.shop = shop
        self.fail_on_item = False

    def insert_order(self, cursor, name, phone, address, notes, order_source, status="pending"):
        order_id = self.shop.next_order_id
        self.shop.next_order_id += 1
        self.shop.orders[order_id] = {
            'id': order_id, 'name': name, 'phone': phone, 'address': address, 'notes': notes,
            'status': status, 'order_source': order_source, 'order_date': ORDER_DATE,
            'completed_date': None,
        }
        return order_id

    def insert_item(self, cursor, order_id, item):
        if self.fail_on_item:
            raise RuntimeError("insert failed")
        self.shop.items.append({
            'order_id': order_id, 'product_id': item.productId, 'color_id': item.colorId,
            'quantity': item.quantity, 'price': item.price,
        })

    def decrement_color_stock(self, cursor, color_id, product_id, quantity):
        color = self.shop.colors.get(color_id)
        if color is None or color['product_id'] != product_id or color['stock'] < quantity:
            return 0
        color['stock'] -= quantity
        return 1

    def decrement_product_stock(self, cursor, product_id, quantity):
        product = self.shop.products.get(product_id)
        if product is None or product['stock'] is None or product['stock'] < quantity:
            return 0
        product['stock'] -= quantity
        return 1

    def find_by_id(self, order_id):
        row = self.shop.orders.get(order_id)
        return Order(**row) if row else None

    def find_all(self):
        return [Order(**row) for row in reversed(list(self.shop.orders.values()))]

    def find_items(self, order_id):
        return [
            OrderItem(product_name=self.shop.products[row['product_id']]['name_fr'], **row)
            for row in self.shop.items if row['order_id'] == order_id
        ]

    def update_status(self, order_id, status, completed_date):
        self.shop.orders[order_id].update(status=status, completed_date=completed_date)
        return 1

    def count_active(self):
        return sum(1 for row in self.shop.orders.values() if row['status'] not in ('delivered', 'cancelled'))


class FakeProductRepository:

    def __init__(self, shop):
        self.shop = shop

    def find_by_id(self, product_id):
        row = self.shop.products.get(product_id)
        if row is None:
            return None
        return Product(id=row['id'], name_fr=row['name_fr'], stock=row['stock'], price=row['price'])

    def find_colors(self, product_id):
        return [ProductColor(**row) for row in self.shop.colors.values() if row['product_id'] == product_id]


class RecordingNotifier:
    """Stands in for NotificationService; can be told to fail"""

    def __init__(self, fail=False):
        self.fail = fail
        self.orders = []
        self.stock_alerts = []

    async def notify_new_order(self, order):
        if self.fail:
            raise ConnectionError("socket closed")
        self.orders.append(order)
        return 1

    async def notify_low_stock(self, product_name, product_id, color_name=None, color_id=None):
        if self.fail:
            raise ConnectionError("socket closed")
        self.stock_alerts.append((product_name, product_id, color_name, color_id))
        return 1


@pytest.fixture
def shop():
    """
    Catalog used by the order tests:
    - product 1 "Rouge Velours", product-level stock 5
    - product 2 "Palette Nude", per-color stock, color 10 "Rose" with stock 1
    """
    shop = InMemoryShop()
    shop.add_product(1, "Rouge Velours", stock=5, price="50.00")
    shop.add_product(2, "Palette Nude", stock=None, price="100.00")
    shop.add_color(10, 2, "Rose", stock=1)
    return shop


@pytest.fixture
def fake_db(shop):
    return FakeDatabase(shop)


@pytest.fixture
def order_repo(shop):
    return FakeOrderRepository(shop)


@pytest.fixture
def product_repo(shop):
    return FakeProductRepository(shop)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return RecordingNotifier(fail=True)


# ============================================================================
# Sample domain objects (report / export tests)
# ============================================================================

def make_order(order_id, status='pending', items=(), **fields):
    data = {
        'id': order_id,
        'name': f"Client {order_id}",
        'phone': "0600000000",
        'address': "12 Rue des Fleurs, Casablanca",
        'status': status,
        'order_source': 'website',
        'order_date': ORDER_DATE,
    }
    data.update(fields)
    order = Order(**data)
    order.items = [
        OrderItem(order_id=order_id, product_id=index, product_name=name,
                  quantity=quantity, price=Decimal(price))
        for index, (name, quantity, price) in enumerate(items, 1)
    ]
    return order


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def sample_orders():
    """Three orders with known totals: 150.00, 79.90 and 0.00"""
    return [
        make_order(1, 'confirmed', [("Rouge Velours", 2, "50.00"), ("Mascara Volume", 1, "50.00")]),
        make_order(2, 'delivered', [("Palette Nude", 1, "79.90")]),
        make_order(3, 'mystery', [], name=None, phone=None),
    ]
