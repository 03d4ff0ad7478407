"""
Unit tests for OrderService

Runs against the in-memory shop from conftest: product 1 has stock 5,
product 2 tracks stock per color (color 10, stock 1).
"""
import asyncio
from datetime import datetime

import pytest

from app.core.exceptions import NotFoundError, TransactionFailure, ValidationError
from app.domain.order import OrderCreate
from app.services.order_service import OrderService, WHATSAPP_PLACEHOLDERS


CUSTOMER = {"name": "Salma", "phone": "0612345678", "address": "5 Avenue Hassan II, Rabat"}


@pytest.fixture
def service(fake_db, order_repo, product_repo, notifier):
    return OrderService(database=fake_db, orders=order_repo, products=product_repo, notifier=notifier)


def create(service, whatsapp=False, **payload):
    return asyncio.run(service.create_order(OrderCreate(**payload), whatsapp=whatsapp))


class TestCreateWebsiteOrder:

    def test_decrements_product_and_color_stock(self, service, shop, notifier):
        """Cart of 3 x product 1 and 1 x product 2 in color 10"""
        # Act
        result = create(service, items=[
            {"productId": 1, "quantity": 3, "price": 50},
            {"productId": 2, "colorId": 10, "quantity": 1, "price": 100},
        ], **CUSTOMER)

        # Assert
        assert shop.products[1]['stock'] == 2
        assert shop.colors[10]['stock'] == 0
        assert result.shortfalls == []

        order = shop.orders[result.order_id]
        assert order['order_source'] == 'website'
        assert order['status'] == 'pending'
        assert order['name'] == "Salma"
        assert len([i for i in shop.items if i['order_id'] == result.order_id]) == 2

        assert result.order is not None
        assert [o.id for o in notifier.orders] == [result.order_id]

    def test_item_price_is_stored_verbatim(self, service, shop):
        create(service, items=[{"productId": 1, "quantity": 1, "price": "12.34"}], **CUSTOMER)

        assert str(shop.items[0]['price']) == "12.34"

    def test_insufficient_stock_is_left_unchanged_and_reported(self, service, shop, notifier):
        result = create(service, items=[{"productId": 1, "quantity": 6, "price": 50}], **CUSTOMER)

        assert shop.products[1]['stock'] == 5
        assert len(result.shortfalls) == 1
        assert result.shortfalls[0].product_id == 1
        assert notifier.stock_alerts == [("Rouge Velours", 1, None, None)]
        # the order itself is still created
        assert result.order_id in shop.orders

    def test_color_stock_alert_names_the_color(self, service, shop, notifier):
        create(service, items=[{"productId": 2, "colorId": 10, "quantity": 2, "price": 100}], **CUSTOMER)

        assert shop.colors[10]['stock'] == 1
        assert notifier.stock_alerts == [("Palette Nude", 2, "Rose", 10)]

    def test_color_decrement_is_scoped_to_the_item_product(self, service, shop):
        """Color 10 belongs to product 2, so it is untouched for product 1"""
        result = create(service, items=[{"productId": 1, "colorId": 10, "quantity": 1, "price": 50}], **CUSTOMER)

        assert shop.colors[10]['stock'] == 1
        assert shop.products[1]['stock'] == 5
        assert len(result.shortfalls) == 1

    def test_null_product_stock_is_never_decremented(self, service, shop):
        result = create(service, items=[{"productId": 2, "quantity": 1, "price": 100}], **CUSTOMER)

        assert shop.products[2]['stock'] is None
        assert len(result.shortfalls) == 1

    def test_missing_items_is_rejected_before_any_write(self, service, shop):
        with pytest.raises(ValidationError) as exc:
            create(service, items=[], **CUSTOMER)

        assert exc.value.message == "Missing required items"
        assert shop.orders == {}

    def test_missing_customer_info_is_rejected(self, service, shop):
        with pytest.raises(ValidationError) as exc:
            create(service, items=[{"productId": 1, "quantity": 1, "price": 50}], name="Salma", phone="06")

        assert exc.value.message == "Missing required customer information"
        assert shop.orders == {}
        assert shop.products[1]['stock'] == 5

    def test_failure_rolls_back_everything(self, service, shop, order_repo, fake_db, notifier):
        # Arrange
        order_repo.fail_on_item = True

        # Act
        with pytest.raises(TransactionFailure) as exc:
            create(service, items=[{"productId": 1, "quantity": 1, "price": 50}], **CUSTOMER)

        # Assert
        assert exc.value.message == "Server error"
        assert exc.value.details == "insert failed"
        assert shop.orders == {}
        assert shop.items == []
        assert shop.products[1]['stock'] == 5
        assert fake_db.rollbacks == 1
        assert notifier.orders == []

    def test_notification_failure_does_not_fail_the_order(self, fake_db, order_repo, product_repo, shop,
                                                          failing_notifier):
        service = OrderService(database=fake_db, orders=order_repo, products=product_repo,
                               notifier=failing_notifier)

        result = create(service, items=[{"productId": 1, "quantity": 9, "price": 50}], **CUSTOMER)

        assert result.order_id in shop.orders
        assert fake_db.commits == 1

    def test_order_source_whatsapp_is_treated_as_whatsapp(self, service, shop):
        result = create(service, items=[{"productId": 1, "quantity": 1, "price": 50}],
                        order_source="whatsapp")

        assert shop.orders[result.order_id]['order_source'] == 'whatsapp'
        assert shop.products[1]['stock'] == 5


class TestCreateWhatsAppOrder:

    def test_uses_placeholders_and_never_touches_stock(self, service, shop, notifier):
        # Act: customer fields are sent but must be ignored
        result = create(service, whatsapp=True, items=[
            {"productId": 1, "quantity": 3, "price": 50},
            {"productId": 2, "colorId": 10, "quantity": 1, "price": 100},
        ], **CUSTOMER)

        # Assert
        order = shop.orders[result.order_id]
        assert order['name'] == WHATSAPP_PLACEHOLDERS['name'] == "WhatsApp Order"
        assert order['phone'] == "WhatsApp"
        assert order['address'] == "To be provided via WhatsApp"
        assert order['notes'] == "Customer will provide details via WhatsApp"
        assert order['order_source'] == 'whatsapp'
        assert order['status'] == 'pending'

        assert shop.products[1]['stock'] == 5
        assert shop.colors[10]['stock'] == 1
        assert result.shortfalls == []
        assert notifier.orders[0].is_whatsapp

    def test_needs_no_customer_info(self, service, shop):
        result = create(service, whatsapp=True, items=[{"productId": 1, "quantity": 1}])

        assert result.order_id in shop.orders
        assert str(shop.items[0]['price']) == "0"

    def test_still_requires_items(self, service):
        with pytest.raises(ValidationError):
            create(service, whatsapp=True)


class TestUpdateStatus:

    @pytest.fixture
    def order_id(self, service):
        return create(service, items=[{"productId": 1, "quantity": 1, "price": 50}], **CUSTOMER).order_id

    def test_invalid_status_is_rejected(self, service, order_id):
        with pytest.raises(ValidationError) as exc:
            service.update_status(order_id, "shipped")
        assert exc.value.message == "Invalid status"

    def test_missing_status_is_rejected(self, service, order_id):
        with pytest.raises(ValidationError):
            service.update_status(order_id, None)

    def test_unknown_order(self, service):
        with pytest.raises(NotFoundError) as exc:
            service.update_status(999, "confirmed")
        assert exc.value.message == "Order not found"

    def test_non_delivered_status_leaves_completed_date_null(self, service, shop, order_id):
        order = service.update_status(order_id, "confirmed")

        assert order.status == "confirmed"
        assert order.completed_date is None
        assert shop.orders[order_id]['completed_date'] is None

    def test_first_delivery_sets_completed_date(self, service, shop, order_id):
        before = datetime.now().replace(microsecond=0)

        order = service.update_status(order_id, "delivered")

        assert order.completed_date is not None
        assert order.completed_date >= before
        assert shop.orders[order_id]['completed_date'] == order.completed_date

    def test_completed_date_is_never_overwritten(self, service, shop, order_id):
        first = datetime(2024, 2, 1, 9, 0)
        shop.orders[order_id].update(status='delivered', completed_date=first)

        service.update_status(order_id, "delivered")
        assert shop.orders[order_id]['completed_date'] == first

        service.update_status(order_id, "pending")
        assert shop.orders[order_id]['completed_date'] == first
        assert shop.orders[order_id]['status'] == 'pending'


class TestOrderReads:

    def test_get_order_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.get_order(42)

    def test_count_active_ignores_delivered_and_cancelled(self, service, shop):
        for status in ('pending', 'confirmed', 'delivered', 'cancelled'):
            result = create(service, whatsapp=True, items=[{"productId": 1, "quantity": 1}])
            shop.orders[result.order_id]['status'] = status

        assert service.count_active() == 2
