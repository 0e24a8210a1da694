"""
Configuration settings for the application
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Storage bucket holding listing photos
LISTINGS_BUCKET = "listings-images"


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Core authentication and security
    jwt_secret_key: Optional[str] = Field(default=None, alias="JWT_SECRET_KEY")

    # Stripe billing configuration
    stripe_secret_key: Optional[str] = Field(default=None, alias="STRIPE_SECRET_KEY")
    stripe_webhook_secret: Optional[str] = Field(default=None, alias="STRIPE_WEBHOOK_SECRET")
    stripe_api_version: str = Field(default="2024-04-10", alias="STRIPE_API_VERSION")

    # Stripe products for each subscription plan
    stripe_product_basico: str = Field(default="prod_SrhgM76Jw1lKcn", alias="STRIPE_PRODUCT_BASICO")
    stripe_product_premium: str = Field(default="prod_SrhhsvazdNDKRG", alias="STRIPE_PRODUCT_PREMIUM")
    stripe_product_diamante: str = Field(default="prod_Srhhbxz0I6mEs5", alias="STRIPE_PRODUCT_DIAMANTE")

    # Infrastructure configuration
    database_url: Optional[str] = Field(default="sqlite+aiosqlite:///./gomeraway.db", alias="DATABASE_URL")
    storage_public_url: Optional[str] = Field(default=None, alias="STORAGE_PUBLIC_URL")
    functions_url: Optional[str] = Field(default="http://localhost:8000/functions/v1", alias="FUNCTIONS_URL")

    # Frontend configuration
    site_url: str = Field(default="http://localhost:5173", alias="SITE_URL")

    # Render.com deployment configuration
    render: Optional[str] = Field(default=None, alias="RENDER")
    render_external_url: Optional[str] = Field(default=None, alias="RENDER_EXTERNAL_URL")
    render_service_name: Optional[str] = Field(default=None, alias="RENDER_SERVICE_NAME")

    # Environment configuration
    env: Optional[str] = Field(default=None, alias="ENV")


# Instantiate settings object
settings = Settings()

# Determine if we're in production mode
IS_PRODUCTION = bool(settings.render) or (settings.env and settings.env.lower() == "production")
