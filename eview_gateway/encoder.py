"""Rendering of a command + parameter mapping into the SMS text, plus the
validation and byte-limit checks that gate sending it.

All functions here are pure; they never touch settings, the clock or the
database.
"""
import math
import re
from typing import Any, Mapping

from pydantic import BaseModel

from .catalog import CommandParam, CommandSpec, ParamKind
from .errors import (
    GatewayError,
    InvalidBoolean,
    InvalidNumber,
    InvalidOption,
    MissingParameter,
)

# single-segment SMS payload threshold; GSM-7 segments run 140-160
SMS_BYTE_LIMIT = 150

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

# plain base-10 text only: no exponents, underscores or hex
_DECIMAL = re.compile(r"[+-]?\d+(\.\d+)?", re.ASCII)


class LimitCheck(BaseModel):
    byte_length: int
    within_limit: bool
    limit: int


def _render(param: CommandParam, value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str) and param.kind is ParamKind.number:
        return value.strip()
    if isinstance(value, str) and param.kind is ParamKind.boolean:
        key = value.strip().lower()
        if key in _TRUE:
            return "1"
        if key in _FALSE:
            return "0"
    return str(value)


def encode(command: CommandSpec, params: Mapping[str, Any]) -> str:
    rendered: dict[str, str] = {}
    for p in command.params:
        value = params.get(p.name)
        if value is None:
            raise MissingParameter(p.name)
        rendered[p.name] = _render(p, value)
    # only declared params reach the formatter
    return command.encode(rendered)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        # arbitrarily large ints are finite; float() would overflow
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return _DECIMAL.fullmatch(value.strip()) is not None
    return False


def _option_key(value: Any) -> str:
    if isinstance(value, bool):
        value = int(value)
    return str(value).strip()


def _check_param(param: CommandParam, value: Any) -> GatewayError | None:
    if value is None:
        return MissingParameter(param.name)
    if param.kind is ParamKind.select:
        allowed = param.option_values()
        # form input arrives as text, so "1" matches option 1
        if _option_key(value) not in {_option_key(v) for v in allowed}:
            return InvalidOption(param.name, value, allowed)
    elif param.kind is ParamKind.number:
        # documented ranges are informational and not enforced
        if not _is_number(value):
            return InvalidNumber(param.name, value)
    elif param.kind is ParamKind.boolean:
        if not isinstance(value, bool) and _option_key(value).lower() not in _TRUE | _FALSE:
            return InvalidBoolean(param.name, value)
    return None


def validate(command: CommandSpec, params: Mapping[str, Any]) -> list[GatewayError]:
    """Check params against the command schema; an empty list means valid."""
    violations: list[GatewayError] = []
    for p in command.params:
        err = _check_param(p, params.get(p.name))
        if err is not None:
            violations.append(err)
    return violations


def ensure_valid(command: CommandSpec, params: Mapping[str, Any]) -> None:
    violations = validate(command, params)
    if violations:
        raise violations[0]


def byte_length(raw_message: str) -> int:
    return len(raw_message.encode("utf-8"))


def check_limit(raw_message: str, limit: int = SMS_BYTE_LIMIT) -> LimitCheck:
    n = byte_length(raw_message)
    return LimitCheck(byte_length=n, within_limit=n <= limit, limit=limit)
