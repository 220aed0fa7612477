from pydantic import BaseModel
import os

class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///sms_gateway.db")
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

    sms_byte_limit: int = int(os.getenv("SMS_BYTE_LIMIT", "150"))
    history_limit: int = int(os.getenv("HISTORY_LIMIT", "50"))
    default_device_name: str = os.getenv("DEFAULT_DEVICE_NAME", "My EV-07B")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
