"""
Export Service
Builds order reports and delivers them synchronously or through one-time
download tokens

Deferred exports are written to EXPORT_TEMP_DIR, registered in a
DownloadTokenStore and deleted once they have been streamed. Files whose
token expired unredeemed are removed the next time an export is prepared.
"""
import os
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import AuthorizationError, NotFoundError, RenderFailure, ValidationError
from app.domain.order import EXPORT_FORMATS, ExportFilters, Order
from app.repositories.order_repository import OrderRepository
from app.services.download_tokens import DownloadTokenStore, InMemoryDownloadTokenStore
from app.services.reports import excel, pdf, word
from app.services.reports.report import OrderReport, build_report

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFormat:
    render: Callable[[OrderReport], bytes]
    media_type: str
    extension: str
    label: str


FORMATS: Dict[str, ExportFormat] = {
    'excel': ExportFormat(excel.render_excel, excel.MEDIA_TYPE, excel.EXTENSION, 'Excel'),
    'pdf': ExportFormat(pdf.render_pdf, pdf.MEDIA_TYPE, pdf.EXTENSION, 'PDF'),
    'word': ExportFormat(word.render_word, word.MEDIA_TYPE, word.EXTENSION, 'Word'),
}

@dataclass
class ExportResult:
    content: bytes
    media_type: str
    filename: str


@dataclass
class Download:
    """A redeemed export; discard() deletes the file and must run once the response is over"""
    path: str
    filename: str
    media_type: str

    def discard(self) -> None:
        remove_export(self.path)


def remove_export(path: str) -> None:
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as e:
        logger.error(f"Error deleting temporary export {path}: {e}")


def _parse_date(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None:
        return None
    try:
        datetime.strptime(value, '%Y-%m-%d')
    except ValueError:
        raise ValidationError(f"Invalid {field_name}, expected YYYY-MM-DD")
    return value


class ExportService:
    """
    Service for order report exports

    Handles:
    - Filter validation and the filtered order query
    - Building one OrderReport and rendering it in the requested format
    - Synchronous delivery (bytes + attachment filename)
    - Deferred delivery (temp file + one-time download token)
    """

    def __init__(
        self,
        orders: Optional[OrderRepository] = None,
        tokens: Optional[DownloadTokenStore] = None,
        temp_dir: Optional[str] = None,
        token_ttl: Optional[float] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.orders = orders or OrderRepository()
        self.tokens = tokens or download_tokens
        self.temp_dir = temp_dir or settings.EXPORT_TEMP_DIR
        self.token_ttl = token_ttl if token_ttl is not None else settings.DOWNLOAD_TOKEN_TTL_SECONDS
        self.clock = clock

    def validate_filters(self, filters: ExportFilters) -> ExportFormat:
        """
        Raises:
            ValidationError: Unknown format or malformed date
        """
        if filters.format not in EXPORT_FORMATS:
            raise ValidationError("Invalid export format")

        _parse_date(filters.startDate, 'startDate')
        _parse_date(filters.endDate, 'endDate')
        return FORMATS[filters.format]

    def find_orders(self, filters: ExportFilters) -> List[Order]:
        orders = self.orders.find_for_export(
            order_id=filters.orderId,
            status=filters.status,
            start_date=filters.startDate,
            end_date=filters.endDate,
        )
        logger.info(
            f"Export query (format={filters.format}, status={filters.status}, "
            f"start={filters.startDate}, end={filters.endDate}, order={filters.orderId}) "
            f"matched {len(orders)} order(s)"
        )
        return orders

    def build_report(self, filters: ExportFilters) -> OrderReport:
        return build_report(self.find_orders(filters), generated_at=self.clock())

    def render(self, export_format: ExportFormat, report: OrderReport) -> bytes:
        """
        Raises:
            RenderFailure: With the format's localized message
        """
        try:
            return export_format.render(report)
        except Exception as e:
            logger.error(f"Error generating {export_format.label} export: {e}")
            raise RenderFailure(
                f"Échec de la génération du fichier {export_format.label}",
                export_format=export_format.extension,
            )

    def export(self, filters: ExportFilters) -> ExportResult:
        """Render the report in memory for a direct attachment response"""
        export_format = self.validate_filters(filters)
        report = self.build_report(filters)
        content = self.render(export_format, report)

        filename = f"commandes_{self.clock().strftime('%Y-%m-%d')}.{export_format.extension}"
        return ExportResult(content=content, media_type=export_format.media_type, filename=filename)

    def prepare(self, filters: ExportFilters) -> dict:
        """
        Render the report to a temp file and register a download token

        Returns:
            {success, downloadUrl, filename, mimeType}
        """
        export_format = self.validate_filters(filters)
        self.purge_expired()

        report = self.build_report(filters)
        content = self.render(export_format, report)

        os.makedirs(self.temp_dir, exist_ok=True)
        filename = (
            f"orders_{self.clock().strftime('%Y%m%d_%H%M%S')}_"
            f"{secrets.token_hex(4)}.{export_format.extension}"
        )
        with open(os.path.join(self.temp_dir, filename), 'wb') as f:
            f.write(content)

        entry = self.tokens.put(filename, self.token_ttl)
        logger.info(f"Prepared {export_format.label} export {filename}")

        return {
            'success': True,
            'downloadUrl': f"/api/orders/download/{entry.token}",
            'filename': filename,
            'mimeType': export_format.media_type,
        }

    def open_download(self, token: str) -> Download:
        """
        Redeem a download token

        Raises:
            AuthorizationError: Unknown, expired or already used token
            NotFoundError: The prepared file no longer exists
        """
        entry = self.tokens.take(token)
        if entry is None:
            raise AuthorizationError("Invalid or expired download token")

        path = os.path.join(self.temp_dir, entry.filename)
        if entry.expired:
            remove_export(path)
            raise AuthorizationError("Invalid or expired download token")

        if not os.path.exists(path):
            raise NotFoundError("File not found")

        extension = os.path.splitext(entry.filename)[1].lstrip('.')
        media_type = next(
            (fmt.media_type for fmt in FORMATS.values() if fmt.extension == extension),
            'application/octet-stream',
        )
        return Download(path=path, filename=entry.filename, media_type=media_type)

    def purge_expired(self) -> int:
        """Delete files whose token expired without being redeemed"""
        expired = self.tokens.purge_expired()
        for entry in expired:
            remove_export(os.path.join(self.temp_dir, entry.filename))
        return len(expired)


download_tokens = InMemoryDownloadTokenStore()


def get_export_service() -> ExportService:
    return ExportService()
