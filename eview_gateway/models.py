from enum import Enum
from typing import Optional
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field

class DeliveryStatus(str, Enum):
    sent = "Sent"
    failed = "Failed"
    pending = "Pending"

class CommandHistory(SQLModel, table=True):
    __tablename__ = "command_history"

    id: Optional[int] = Field(default=None, primary_key=True)
    device_name: str = Field(default="")
    phone_number: str = Field(index=True)
    command: str  # command display name
    raw_message: str
    status: str = Field(default=DeliveryStatus.sent.value)  # Sent|Failed|Pending
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
