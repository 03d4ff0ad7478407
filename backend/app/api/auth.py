"""
Authentication API endpoints
- Admin login (JWT issuance)
- Current admin lookup
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.core.auth import TokenAdmin, create_access_token, get_current_admin, verify_password
from app.core.exceptions import NotFoundError, ValidationError
from app.repositories.admin_repository import AdminRepository

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


def get_admin_repository() -> AdminRepository:
    return AdminRepository()


@router.post("/login")
async def login(
    credentials: LoginRequest,
    admins: AdminRepository = Depends(get_admin_repository)
):
    """Exchange admin credentials for a 24h JWT"""
    if not credentials.username or not credentials.password:
        raise ValidationError("Invalid Credentials")

    admin = admins.find_by_username(credentials.username)
    if not admin or not verify_password(credentials.password, admin['password_hash']):
        logger.info(f"Failed login for '{credentials.username}'")
        raise ValidationError("Invalid Credentials")

    return {"token": create_access_token(admin['id'], admin['username'])}


@router.get("")
async def get_admin(
    current: TokenAdmin = Depends(get_current_admin),
    admins: AdminRepository = Depends(get_admin_repository)
):
    """Current admin (without password hash)"""
    admin = admins.find_by_id(current.id)
    if not admin:
        raise NotFoundError("Admin not found")

    data = dict(admin)
    if data.get('created_at'):
        data['created_at'] = data['created_at'].isoformat()
    return data
