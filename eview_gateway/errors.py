"""Error taxonomy for the command encoder and the submission workflow.

Every error carries the form field it concerns and a user-facing reason so
the HTTP and CLI front ends can report failures individually.
"""


class GatewayError(Exception):
    """Base class; recoverable at the request boundary."""

    field: str = "request"

    def __init__(self, reason: str, field: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        if field is not None:
            self.field = field

    @property
    def code(self) -> str:
        return type(self).__name__


class UnknownCommand(GatewayError):
    field = "command"

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Unknown command: {command_id!r}")
        self.command_id = command_id


class MissingParameter(GatewayError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required parameter {name!r}", field=f"params.{name}")
        self.name = name


class InvalidOption(GatewayError):
    def __init__(self, name: str, value: object, allowed: list) -> None:
        choices = ", ".join(str(v) for v in allowed)
        super().__init__(
            f"{value!r} is not a valid option for {name!r} (expected one of: {choices})",
            field=f"params.{name}",
        )
        self.name = name
        self.value = value


class InvalidNumber(GatewayError):
    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"{value!r} is not a finite number for {name!r}", field=f"params.{name}")
        self.name = name
        self.value = value


class InvalidBoolean(GatewayError):
    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"{value!r} is not a boolean for {name!r}", field=f"params.{name}")
        self.name = name
        self.value = value


class MessageTooLong(GatewayError):
    field = "raw_message"

    def __init__(self, byte_length: int, limit: int) -> None:
        super().__init__(f"Message is {byte_length} bytes, limit is {limit} bytes")
        self.byte_length = byte_length
        self.limit = limit


class EmptyDestination(GatewayError):
    field = "phone_number"

    def __init__(self) -> None:
        super().__init__("Phone number is required")


class PersistenceFailure(GatewayError):
    """The message was accepted but recording it to history failed."""

    field = "history"

    def __init__(self, reason: str = "Failed to log command") -> None:
        super().__init__(reason)
        # filled in by the workflow once the message has gone out
        self.raw_message = ""
        self.byte_length = 0


class EmptyMessage(GatewayError):
    field = "raw_message"

    def __init__(self) -> None:
        super().__init__("Encoded message is empty")
