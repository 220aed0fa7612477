"""Submission workflow: encode, gate, "send", record.

Checks are collected individually so a caller can tell "fix the phone number"
apart from "shorten the message". Nothing is sent or recorded unless every
check passes; a failure to record an accepted send raises PersistenceFailure.
"""
import logging
from typing import Any, Protocol

from pydantic import BaseModel, Field

from . import encoder
from .catalog import CommandSpec, find_command
from .errors import (
    EmptyDestination,
    EmptyMessage,
    GatewayError,
    MessageTooLong,
    PersistenceFailure,
    UnknownCommand,
)
from .models import DeliveryStatus
from .settings import settings

log = logging.getLogger("workflow")


class FieldError(BaseModel):
    field: str
    reason: str
    code: str

    @classmethod
    def from_error(cls, err: GatewayError) -> "FieldError":
        return cls(field=err.field, reason=err.reason, code=err.code)


class SubmissionRequest(BaseModel):
    device_name: str = ""
    phone_number: str = ""
    command: str  # id or display name
    params: dict[str, Any] = Field(default_factory=dict)


class SubmissionResult(BaseModel):
    accepted: bool
    raw_message: str = ""
    byte_length: int = 0
    errors: list[FieldError] = Field(default_factory=list)
    record_id: int | None = None
    status: str | None = None


class HistorySink(Protocol):
    def append(self, device_name: str, phone_number: str, command: str,
               raw_message: str, status: str) -> Any: ...


class Transport(Protocol):
    def send(self, phone_number: str, raw_message: str) -> DeliveryStatus: ...


class SimulatedTransport:
    """Stand-in for an SMS gateway: logs the message and reports it sent."""

    def send(self, phone_number: str, raw_message: str) -> DeliveryStatus:
        log.info("Sending SMS to %s: %s", phone_number, raw_message)
        return DeliveryStatus.sent


def _effective_limit(limit: int | None) -> int:
    return settings.sms_byte_limit if limit is None else limit


def _compose(command: CommandSpec, params: dict[str, Any], limit: int,
             errors: list[GatewayError]) -> tuple[str, int]:
    violations = encoder.validate(command, params)
    if violations:
        errors.extend(violations)
        return "", 0
    raw = encoder.encode(command, params)
    check = encoder.check_limit(raw, limit)
    if not raw:
        errors.append(EmptyMessage())
    elif not check.within_limit:
        errors.append(MessageTooLong(check.byte_length, check.limit))
    return raw, check.byte_length


def preview(command_id: str, params: dict[str, Any], limit: int | None = None) -> SubmissionResult:
    """Encode without sending, for live form previews."""
    errors: list[GatewayError] = []
    raw, n = "", 0
    try:
        command = find_command(command_id)
    except UnknownCommand as e:
        errors.append(e)
    else:
        raw, n = _compose(command, params, _effective_limit(limit), errors)
    return SubmissionResult(
        accepted=not errors,
        raw_message=raw,
        byte_length=n,
        errors=[FieldError.from_error(e) for e in errors],
    )


def submit(request: SubmissionRequest, sink: HistorySink, transport: Transport | None = None,
           limit: int | None = None, command: CommandSpec | None = None) -> SubmissionResult:
    """Run one send attempt.

    ``command`` overrides the catalog lookup of ``request.command``; it lets a
    caller submit a command definition that is not part of the shipped table.
    """
    errors: list[GatewayError] = []
    if not request.phone_number.strip():
        errors.append(EmptyDestination())

    raw, n = "", 0
    if command is None:
        try:
            command = find_command(request.command)
        except UnknownCommand as e:
            errors.append(e)
    if command is not None:
        raw, n = _compose(command, request.params, _effective_limit(limit), errors)

    if errors:
        log.info("rejected %s for %r: %s", request.command, request.phone_number,
                 ", ".join(e.code for e in errors))
        return SubmissionResult(
            accepted=False,
            raw_message=raw,
            byte_length=n,
            errors=[FieldError.from_error(e) for e in errors],
        )

    status = (transport or SimulatedTransport()).send(request.phone_number, raw)
    try:
        rec = sink.append(request.device_name, request.phone_number, command.name, raw, status.value)
    except PersistenceFailure as e:
        # an unrecorded send is not a success
        e.raw_message, e.byte_length = raw, n
        raise
    return SubmissionResult(
        accepted=True,
        raw_message=raw,
        byte_length=n,
        record_id=getattr(rec, "id", None),
        status=status.value,
    )
