"""
Configuración centralizada de la aplicación
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Beauty Shop API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Backend for the beauty shop storefront and admin dashboard"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = ""
    DB_POOL_MIN: int = 1
    DB_POOL_MAX: int = 10

    # Auth
    JWT_SECRET: str = ""
    JWT_EXPIRES_HOURS: int = 24

    # Image hosting (ImgBB)
    IMGBB_API_KEY: str = ""
    IMGBB_UPLOAD_URL: str = "https://api.imgbb.com/1/upload"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    def get_jwt_secret(self) -> str:
        """Secret used to sign admin tokens"""
        if not self.JWT_SECRET:
            raise ValueError("JWT_SECRET environment variable is not set")
        return self.JWT_SECRET

    # Files
    EXPORT_TEMP_DIR: str = "temp"
    UPLOAD_TEMP_DIR: str = "temp/uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    DOWNLOAD_TOKEN_TTL_SECONDS: int = 300

    # Reports
    SHOP_NAME: str = "SWIBI Collection"
    CURRENCY: str = "MAD"
    LOGO_PATH: str = "public/logo.png"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
