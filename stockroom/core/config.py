# stockroom/core/config.py

import os
from functools import lru_cache
from typing import List, Annotated
from pydantic import ConfigDict, BeforeValidator
from pydantic_settings import BaseSettings, NoDecode

def _parse_email_list(value):
    if value in (None, "", []):
        return []
    if isinstance(value, str):
        return [email.strip() for email in value.split(",") if email.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(email).strip() for email in value if str(email).strip()]
    return []

EmailList = Annotated[List[str], NoDecode, BeforeValidator(lambda v: _parse_email_list(v))]

class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Database settings
    DATABASE_URL: str = "postgresql+asyncpg://localhost/stockroom"
    DATABASE_ECHO: bool = False

    # Basic Auth
    BASIC_AUTH_USERNAME: str = "admin"
    BASIC_AUTH_PASSWORD: str = ""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Stock thresholds
    LOW_STOCK_THRESHOLD: int = 5
    CRITICAL_STOCK_THRESHOLD: int = 2
    SIGNIFICANT_CHANGE_THRESHOLD: int = 10
    SHIPMENT_RECEIVED_THRESHOLD: int = 50
    REORDER_POINT: int = 10
    REORDER_TARGET_STOCK: int = 100
    STANDARD_REORDER_QUANTITY: int = 50
    AUDIT_MONITOR_THRESHOLD: int = 10
    DEFAULT_LOW_STOCK_LIST_THRESHOLD: int = 10

    # Notification recipients
    INVENTORY_EMAILS: EmailList = ["inventory@company.com"]
    PURCHASING_EMAILS: EmailList = ["purchasing@company.com"]
    MANAGER_EMAILS: EmailList = ["manager@company.com"]
    WAREHOUSE_EMAILS: EmailList = ["warehouse@company.com"]

    # SMTP / Email
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USERNAME: str = ""
    SMTP_PASSWORD: str = ""
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT: int = 30
    SMTP_FROM_EMAIL: str = ""
    SMTP_FROM_NAME: str = "Stockroom Alerts"

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
