"""
Admin notification WebSocket

Protocol:
    client -> {"type": "admin:authenticate", "token": "<jwt>"}
    server -> {"event": "connection_status", "status": "connected", ...}
    server -> {"event": "notification", "type", "title", "message", "data", "timestamp"}
"""
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.core.auth import verify_socket_token
from app.services.notification_service import registry

logger = logging.getLogger(__name__)

router = APIRouter()

AUTHENTICATE = "admin:authenticate"


@router.websocket("/ws/admin")
async def admin_socket(websocket: WebSocket):
    await websocket.accept()
    authenticated = False

    try:
        while True:
            try:
                message = json.loads(await websocket.receive_text())
            except ValueError:
                continue
            if not isinstance(message, dict) or message.get("type") != AUTHENTICATE:
                continue

            admin = verify_socket_token(message.get("token"))
            if admin is None:
                await websocket.send_json({
                    "event": "connection_status",
                    "status": "unauthorized",
                    "message": "Token is not valid",
                })
                continue

            registry.register(websocket)
            authenticated = True
            logger.info(f"Admin '{admin.username}' subscribed to notifications")
            await websocket.send_json({
                "event": "connection_status",
                "status": "connected",
                "message": "Successfully connected to notification service",
            })
    except WebSocketDisconnect:
        pass
    finally:
        if authenticated:
            registry.unregister(websocket)
