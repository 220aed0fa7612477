from datetime import datetime
from pydantic import BaseModel
from typing import Any

class OptionOut(BaseModel):
    label: str
    value: int | str

class ParamOut(BaseModel):
    name: str
    label: str
    type: str
    options: list[OptionOut] = []
    placeholder: str | None = None
    defaultValue: bool | int | str | None = None
    description: str | None = None
    suffix: str | None = None

class CommandOut(BaseModel):
    id: str
    name: str
    category: str
    structure: str
    params: list[ParamOut]

class HistoryOut(BaseModel):
    id: int
    device_name: str
    phone_number: str
    command: str
    raw_message: str
    status: str
    timestamp: datetime

class PreviewRequest(BaseModel):
    command: str
    params: dict[str, Any] = {}

class PreviewResponse(BaseModel):
    rawMessage: str
    byteLength: int
    withinLimit: bool
    errors: list[dict[str, str]] = []

class SendCommandRequest(BaseModel):
    # nulls are accepted here and reported by the workflow (e.g. EmptyDestination)
    deviceName: str | None = None
    phoneNumber: str | None = None
    command: str | None = None
    params: dict[str, Any] | None = None

class SendCommandResponse(BaseModel):
    accepted: bool
    rawMessage: str
    byteLength: int
    errors: list[dict[str, str]] = []
    recordId: int | None = None
    status: str | None = None
