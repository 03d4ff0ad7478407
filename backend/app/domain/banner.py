"""
Banner Domain Model
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class Banner(BaseModel):
    """Promotional banner shown on the storefront home page"""

    id: int
    image: str
    title_fr: Optional[str] = None
    title_ar: Optional[str] = None
    subtitle_fr: Optional[str] = None
    subtitle_ar: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump()
        if self.created_at:
            data['created_at'] = self.created_at.isoformat()
        return data


def parse_active_flag(value) -> bool:
    """Form fields arrive as strings; only true / "true" activate a banner"""
    return value is True or value == "true"
