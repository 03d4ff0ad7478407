"""
Intermediate order report shared by the Excel, PDF and Word renderers
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from app.core.config import settings
from app.domain.order import Order


@dataclass(frozen=True)
class StatusStyle:
    label: str
    badge_color: str  # PDF / Word badge background
    highlight: str    # Excel status cell fill (RGB hex)
    css_class: str


STATUS_STYLES = {
    'pending': StatusStyle('En attente', '#d97706', 'FFF5D7', 'status-pending'),
    'confirmed': StatusStyle('Confirmée', '#1a56db', 'D7E9FF', 'status-confirmed'),
    'delivered': StatusStyle('Livrée', '#059669', 'D7F9E9', 'status-delivered'),
    'cancelled': StatusStyle('Annulée', '#dc2626', 'FFD7D7', 'status-cancelled'),
}


def status_style(status: Optional[str]) -> StatusStyle:
    """Unknown or missing statuses are shown as pending"""
    return STATUS_STYLES.get(status, STATUS_STYLES['pending'])


def format_date(value: Optional[datetime]) -> str:
    return value.strftime('%d/%m/%Y %H:%M') if value else 'N/A'


def format_money(amount: Decimal, currency: str) -> str:
    return f"{amount:.2f} {currency}"


@dataclass
class ReportLine:
    number: int
    product_name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


@dataclass
class ReportOrder:
    id: int
    customer: str
    phone: str
    address: str
    order_date: Optional[datetime]
    status: StatusStyle
    lines: List[ReportLine]
    total: Decimal

    @property
    def date_label(self) -> str:
        return format_date(self.order_date)

    @property
    def products_summary(self) -> str:
        return ", ".join(f"{line.product_name} (x{line.quantity})" for line in self.lines)


@dataclass
class OrderReport:
    orders: List[ReportOrder]
    generated_at: datetime
    shop_name: str
    currency: str
    logo_path: Optional[str] = None
    title: str = 'Rapport de Commandes'

    @property
    def generated_label(self) -> str:
        return f"Généré le: {format_date(self.generated_at)}"

    @property
    def grand_total(self) -> Decimal:
        return sum((order.total for order in self.orders), Decimal('0'))

    def money(self, amount: Decimal) -> str:
        return format_money(amount, self.currency)


def _report_order(order: Order) -> ReportOrder:
    lines = []
    for number, item in enumerate(order.items, 1):
        price = Decimal(item.price or 0)
        quantity = int(item.quantity or 0)
        lines.append(ReportLine(
            number=number,
            product_name=item.product_name or 'Article inconnu',
            quantity=quantity,
            unit_price=price,
            subtotal=price * quantity,
        ))

    return ReportOrder(
        id=order.id,
        customer=order.name or 'N/A',
        phone=order.phone or 'N/A',
        address=order.address or 'N/A',
        order_date=order.order_date,
        status=status_style(order.status),
        lines=lines,
        total=sum((line.subtotal for line in lines), Decimal('0')),
    )


def build_report(
    orders: List[Order],
    generated_at: Optional[datetime] = None,
    shop_name: Optional[str] = None,
    currency: Optional[str] = None,
    logo_path: Optional[str] = None
) -> OrderReport:
    """
    Build the report value consumed by every renderer

    Args:
        orders: Orders (with items) in display order
        generated_at: Generation timestamp shown in headers (default: now)
        shop_name / currency / logo_path: Default to application settings
    """
    return OrderReport(
        orders=[_report_order(order) for order in orders],
        generated_at=generated_at or datetime.now(),
        shop_name=shop_name or settings.SHOP_NAME,
        currency=currency or settings.CURRENCY,
        logo_path=logo_path if logo_path is not None else settings.LOGO_PATH,
    )
