"""
Unit tests for AdminConnectionRegistry and NotificationService
"""
import asyncio

import pytest

from app.services.notification_service import AdminConnectionRegistry, NotificationService


class FakeConnection:
    def __init__(self):
        self.sent = []

    async def send_json(self, data):
        self.sent.append(data)


class BrokenConnection:
    async def send_json(self, data):
        raise RuntimeError("connection reset")


@pytest.fixture
def registry():
    return AdminConnectionRegistry()


@pytest.fixture
def service(registry):
    return NotificationService(registry)


class TestAdminConnectionRegistry:

    def test_register_is_idempotent(self, registry):
        connection = FakeConnection()

        registry.register(connection)
        registry.register(connection)

        assert len(registry) == 1

    def test_unregister_unknown_connection_is_ignored(self, registry):
        registry.unregister(FakeConnection())
        assert len(registry) == 0


class TestNotificationService:

    def test_fills_timestamp_title_and_event(self, registry, service):
        connection = FakeConnection()
        registry.register(connection)

        delivered = asyncio.run(service.notify_admins({'type': 'stock', 'message': 'low'}))

        assert delivered == 1
        payload = connection.sent[0]
        assert payload['title'] == 'Stock Alert'
        assert payload['event'] == 'notification'
        assert payload['timestamp']

    def test_keeps_supplied_timestamp_and_title(self, registry, service):
        connection = FakeConnection()
        registry.register(connection)

        asyncio.run(service.notify_admins({'type': 'order', 'title': 'Hello', 'timestamp': 'T'}))

        assert connection.sent[0]['title'] == 'Hello'
        assert connection.sent[0]['timestamp'] == 'T'

    def test_unknown_type_gets_generic_title(self, registry, service):
        connection = FakeConnection()
        registry.register(connection)

        asyncio.run(service.notify_admins({'type': 'other'}))

        assert connection.sent[0]['title'] == 'Notification'

    def test_failed_connection_is_dropped(self, registry, service):
        healthy, broken = FakeConnection(), BrokenConnection()
        registry.register(healthy)
        registry.register(broken)

        delivered = asyncio.run(service.notify_admins({'type': 'order'}))

        assert delivered == 1
        assert registry.connections() == [healthy]

    def test_no_connections_is_not_an_error(self, service):
        assert asyncio.run(service.notify_admins({'type': 'order'})) == 0

    def test_new_website_order(self, registry, service, order_factory):
        connection = FakeConnection()
        registry.register(connection)

        asyncio.run(service.notify_new_order(order_factory(7, name="Salma")))

        payload = connection.sent[0]
        assert payload['type'] == 'order'
        assert payload['title'] == 'New Order'
        assert payload['message'] == 'New order #7 from Salma'
        assert payload['data']['id'] == 7

    def test_new_whatsapp_order(self, registry, service, order_factory):
        connection = FakeConnection()
        registry.register(connection)

        asyncio.run(service.notify_new_order(order_factory(8, order_source='whatsapp')))

        assert connection.sent[0]['title'] == 'WhatsApp Order'
        assert connection.sent[0]['message'] == 'New WhatsApp order #8 created'

    def test_low_stock_message(self, registry, service):
        connection = FakeConnection()
        registry.register(connection)

        asyncio.run(service.notify_low_stock("Palette Nude", 2, "Rose", 10))

        payload = connection.sent[0]
        assert payload['message'] == 'Palette Nude (Rose) is out of stock'
        assert payload['data'] == {'product_id': 2, 'color_id': 10}
