"""
Orders API Endpoints
Order intake (storefront and WhatsApp), admin order management and report exports
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, JSONResponse, Response

from app.core.auth import TokenAdmin, get_current_admin, get_current_admin_or_query
from app.domain.order import ExportFilters, OrderCreate, StatusUpdate
from app.services.export_service import Download, ExportService, get_export_service
from app.services.order_service import OrderService, get_order_service

router = APIRouter()


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


class DownloadResponse(FileResponse):
    """Streams a prepared export and deletes it however the response ends"""

    def __init__(self, download: Download):
        super().__init__(download.path, media_type=download.media_type,
                         headers=_attachment(download.filename))
        self.download = download

    async def __call__(self, scope, receive, send):
        try:
            await super().__call__(scope, receive, send)
        finally:
            self.download.discard()


# ============================================================================
# Order intake (public)
# ============================================================================

@router.post("")
async def create_order(
    payload: OrderCreate,
    service: OrderService = Depends(get_order_service)
):
    """
    Create a storefront order

    Website orders decrement stock; an order_source of "whatsapp" is handled
    like POST /whatsapp.
    """
    result = await service.create_order(payload)
    return JSONResponse(status_code=201, content={
        "msg": "Order created successfully",
        "orderId": result.order_id,
    })


@router.post("/whatsapp")
async def create_whatsapp_order(
    payload: OrderCreate,
    service: OrderService = Depends(get_order_service)
):
    """Create an order from the WhatsApp cart flow (placeholder customer info, no stock change)"""
    result = await service.create_order(payload, whatsapp=True)
    return JSONResponse(status_code=201, content={
        "msg": "WhatsApp order created successfully",
        "orderId": result.order_id,
    })


# ============================================================================
# Exports
# ============================================================================

@router.get("/export")
async def export_orders(
    format: Optional[str] = Query(None, description="excel, pdf or word"),
    status: Optional[str] = Query(None, description="Order status or 'all'"),
    startDate: Optional[str] = Query(None, description="YYYY-MM-DD"),
    endDate: Optional[str] = Query(None, description="YYYY-MM-DD"),
    orderId: Optional[str] = Query(None, description="Single order ID"),
    admin: TokenAdmin = Depends(get_current_admin_or_query),
    service: ExportService = Depends(get_export_service)
):
    """Render the filtered orders and return the file as an attachment"""
    filters = ExportFilters(format=format, status=status, startDate=startDate, endDate=endDate,
                            orderId=orderId)
    result = service.export(filters)
    return Response(content=result.content, media_type=result.media_type,
                    headers=_attachment(result.filename))


@router.post("/prepare-export")
async def prepare_export(
    filters: ExportFilters,
    admin: TokenAdmin = Depends(get_current_admin),
    service: ExportService = Depends(get_export_service)
):
    """
    Render the filtered orders to a temporary file

    Returns a one-time download URL valid for DOWNLOAD_TOKEN_TTL_SECONDS.
    """
    return service.prepare(filters)


@router.get("/download/{token}")
async def download_export(
    token: str,
    service: ExportService = Depends(get_export_service)
):
    """Stream a prepared export; the token is consumed and the file deleted afterwards"""
    return DownloadResponse(service.open_download(token))


# ============================================================================
# Admin order management
# ============================================================================

@router.get("")
async def get_orders(
    admin: TokenAdmin = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    """All orders, newest first"""
    return [order.to_dict() for order in service.list_orders()]


@router.get("/active/count")
async def count_active_orders(
    admin: TokenAdmin = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    """Orders that are neither delivered nor cancelled"""
    return {"count": service.count_active()}


@router.get("/{order_id}")
async def get_order(
    order_id: int,
    admin: TokenAdmin = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    return service.get_order(order_id).to_dict()


@router.get("/{order_id}/items")
async def get_order_items(
    order_id: int,
    admin: TokenAdmin = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    """Items with product names, color details and the image to display"""
    return [item.to_dict() for item in service.get_items(order_id)]


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: int,
    payload: StatusUpdate,
    admin: TokenAdmin = Depends(get_current_admin),
    service: OrderService = Depends(get_order_service)
):
    order = service.update_status(order_id, payload.status)
    return {"msg": "Order status updated", "order": order.to_dict()}
