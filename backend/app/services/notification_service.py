"""
Real-time admin notifications

AdminConnectionRegistry holds the live admin connections (WebSockets in
production, anything with an async send_json in tests). NotificationService
fans structured events out to every registered connection, best effort:
no retry, no queue, no backfill for connections that register later.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from app.domain.order import Order

logger = logging.getLogger(__name__)


class AdminConnection(Protocol):
    async def send_json(self, data: Any) -> None: ...


class AdminConnectionRegistry:
    """Set of authenticated admin connections"""

    def __init__(self):
        self._connections: List[AdminConnection] = []

    def register(self, connection: AdminConnection) -> None:
        if connection not in self._connections:
            self._connections.append(connection)
            logger.info(f"Admin connection registered ({len(self._connections)} live)")

    def unregister(self, connection: AdminConnection) -> None:
        if connection in self._connections:
            self._connections.remove(connection)
            logger.info(f"Admin connection removed ({len(self._connections)} live)")

    def connections(self) -> List[AdminConnection]:
        return list(self._connections)

    def __len__(self) -> int:
        return len(self._connections)


DEFAULT_TITLES = {
    'order': 'New Order',
    'stock': 'Stock Alert',
}


class NotificationService:
    """Broadcasts notifications to an injected AdminConnectionRegistry"""

    def __init__(self, registry: AdminConnectionRegistry):
        self.registry = registry

    async def notify_admins(self, notification: Dict[str, Any]) -> int:
        """
        Send a notification to all registered admin connections

        Missing timestamp and title are filled in. Connections that fail to
        receive are dropped from the registry.

        Returns:
            Number of connections that received the notification
        """
        payload = dict(notification)
        payload.setdefault('timestamp', datetime.now(timezone.utc).isoformat())
        if not payload.get('title'):
            payload['title'] = DEFAULT_TITLES.get(payload.get('type'), 'Notification')
        payload['event'] = 'notification'

        delivered = 0
        for connection in self.registry.connections():
            try:
                await connection.send_json(payload)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping admin connection after failed send: {e}")
                self.registry.unregister(connection)

        logger.info(f"Notification '{payload['title']}' sent to {delivered} admin(s)")
        return delivered

    async def notify_new_order(self, order: Order) -> int:
        if order.is_whatsapp:
            title = 'WhatsApp Order'
            message = f"New WhatsApp order #{order.id} created"
        else:
            title = 'New Order'
            message = f"New order #{order.id} from {order.name}"

        return await self.notify_admins({
            'type': 'order',
            'title': title,
            'message': message,
            'data': order.to_dict(),
        })

    async def notify_low_stock(self, product_name: str, product_id: int,
                               color_name: Optional[str] = None, color_id: Optional[int] = None) -> int:
        if color_name:
            message = f"{product_name} ({color_name}) is out of stock"
        else:
            message = f"{product_name} is out of stock"

        return await self.notify_admins({
            'type': 'stock',
            'title': 'Stock Alert',
            'message': message,
            'data': {'product_id': product_id, 'color_id': color_id},
        })


registry = AdminConnectionRegistry()
notification_service = NotificationService(registry)


def get_notification_service() -> NotificationService:
    return notification_service
