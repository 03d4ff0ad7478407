"""
Order Service
Handles order intake (website and WhatsApp) and order status changes

Order creation is one transaction: order row, item rows and, for website
orders, the conditional stock decrement. Admin notifications go out after
commit and never affect the outcome of the request.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from app.core.database import Database, db as default_db
from app.core.exceptions import NotFoundError, TransactionFailure, ValidationError
from app.domain.order import ORDER_STATUSES, Order, OrderCreate, OrderItem
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.notification_service import NotificationService, get_notification_service

logger = logging.getLogger(__name__)


# Customer fields stored for WhatsApp orders, whatever the client sent
WHATSAPP_PLACEHOLDERS = {
    'name': 'WhatsApp Order',
    'phone': 'WhatsApp',
    'address': 'To be provided via WhatsApp',
    'notes': 'Customer will provide details via WhatsApp',
}


@dataclass
class StockShortfall:
    """An item whose stock decrement matched no row (not enough stock)"""
    product_id: int
    color_id: Optional[int]
    quantity: int


@dataclass
class OrderCreation:
    order_id: int
    order: Optional[Order] = None
    shortfalls: List[StockShortfall] = field(default_factory=list)


class OrderService:
    """
    Service for order business logic

    Handles:
    - Validation of cart payloads
    - Transactional creation of orders and items
    - Stock decrement for website orders
    - Status updates with the one-time completion date
    """

    def __init__(
        self,
        database: Optional[Database] = None,
        orders: Optional[OrderRepository] = None,
        products: Optional[ProductRepository] = None,
        notifier: Optional[NotificationService] = None
    ):
        self.db = database or default_db
        self.orders = orders or OrderRepository(self.db)
        self.products = products or ProductRepository(self.db)
        self.notifier = notifier

    async def create_order(self, payload: OrderCreate, whatsapp: bool = False) -> OrderCreation:
        """
        Create an order with its items in a single transaction

        Args:
            payload: Cart items and customer information
            whatsapp: True for orders coming from the WhatsApp cart flow

        Returns:
            OrderCreation with the new order ID, the persisted order and
            any items whose stock could not be decremented

        Raises:
            ValidationError: No items, or missing customer info on a website order
            TransactionFailure: Any datastore error (nothing is persisted)
        """
        whatsapp = whatsapp or payload.is_whatsapp

        if not payload.items:
            raise ValidationError("Missing required items")

        if not whatsapp and not (payload.name and payload.phone and payload.address):
            raise ValidationError("Missing required customer information")

        if whatsapp:
            fields = dict(WHATSAPP_PLACEHOLDERS, order_source='whatsapp')
        else:
            fields = {
                'name': payload.name,
                'phone': payload.phone,
                'address': payload.address,
                'notes': payload.notes or None,
                'order_source': 'website',
            }

        shortfalls: List[StockShortfall] = []

        try:
            with self.db.transaction() as cursor:
                order_id = self.orders.insert_order(cursor, **fields)

                for item in payload.items:
                    self.orders.insert_item(cursor, order_id, item)

                    # WhatsApp orders reserve stock when an admin confirms them
                    if whatsapp:
                        continue

                    if item.colorId:
                        affected = self.orders.decrement_color_stock(
                            cursor, item.colorId, item.productId, item.quantity
                        )
                    else:
                        affected = self.orders.decrement_product_stock(
                            cursor, item.productId, item.quantity
                        )

                    if affected == 0:
                        shortfalls.append(StockShortfall(item.productId, item.colorId, item.quantity))
        except Exception as e:
            logger.error(f"Error creating order: {e}")
            raise TransactionFailure("Server error", details=str(e))

        for shortfall in shortfalls:
            logger.warning(
                f"Order #{order_id}: insufficient stock for product {shortfall.product_id}"
                f" (color {shortfall.color_id}), quantity {shortfall.quantity} not decremented"
            )

        result = OrderCreation(order_id=order_id, shortfalls=shortfalls)

        try:
            result.order = self.orders.find_by_id(order_id)
        except Exception as e:
            logger.error(f"Order #{order_id} created but could not be re-read: {e}")

        if result.order is not None:
            await self._notify(result)

        logger.info(f"Created {fields['order_source']} order #{order_id} with {len(payload.items)} item(s)")
        return result

    async def _notify(self, result: OrderCreation) -> None:
        """Fire-and-forget admin notifications"""
        if self.notifier is None:
            return

        try:
            await self.notifier.notify_new_order(result.order)
        except Exception as e:
            logger.warning(f"Could not notify admins about order #{result.order_id}: {e}")

        for shortfall in result.shortfalls:
            try:
                product = self.products.find_by_id(shortfall.product_id)
                product_name = product.name_fr if product else f"Product #{shortfall.product_id}"
                color_name = None
                if shortfall.color_id:
                    colors = self.products.find_colors(shortfall.product_id)
                    color_name = next(
                        (c.name_fr for c in colors if c.id == shortfall.color_id),
                        f"#{shortfall.color_id}"
                    )
                await self.notifier.notify_low_stock(
                    product_name, shortfall.product_id, color_name, shortfall.color_id
                )
            except Exception as e:
                logger.warning(f"Could not send stock alert for product {shortfall.product_id}: {e}")

    def update_status(self, order_id: int, status: Optional[str]) -> Order:
        """
        Change an order's status

        The completion date is set the first time an order becomes
        delivered and is never overwritten afterwards.
        """
        if status not in ORDER_STATUSES:
            raise ValidationError("Invalid status")

        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        completed_date = order.completed_date
        if status == 'delivered' and completed_date is None:
            completed_date = datetime.now().replace(microsecond=0)

        self.orders.update_status(order_id, status, completed_date)
        return order.model_copy(update={'status': status, 'completed_date': completed_date})

    def list_orders(self) -> List[Order]:
        return self.orders.find_all()

    def get_order(self, order_id: int) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        return order

    def get_items(self, order_id: int) -> List[OrderItem]:
        return self.orders.find_items(order_id)

    def count_active(self) -> int:
        return self.orders.count_active()


def get_order_service() -> OrderService:
    return OrderService(notifier=get_notification_service())
