"""Fixed catalog of Eview EV-07B SMS commands.

Each command pairs a parameter schema (what the form asks for) with its own
formatting function (what the device receives). The table is built once at
import time and never mutated.
"""
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import UnknownCommand


class ParamKind(str, Enum):
    text = "text"
    number = "number"
    select = "select"
    boolean = "boolean"


class Category(str, Enum):
    basic = "Basic"
    control = "Control"
    alarms = "Alarms"
    monitoring = "Monitoring"
    network = "Network"


class ParamOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    value: int | str


class CommandParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    kind: ParamKind
    options: tuple[ParamOption, ...] = ()
    placeholder: str | None = None
    default_value: bool | int | str | None = None
    description: str | None = None
    suffix: str | None = None  # display only, never encoded

    @model_validator(mode="after")
    def check_select(self):
        if self.kind is ParamKind.select:
            if not self.options:
                raise ValueError(f"select parameter {self.name!r} needs at least one option")
            if self.default_value is not None and self.default_value not in self.option_values():
                raise ValueError(f"default for {self.name!r} is not one of its options")
        return self

    def option_values(self) -> list[int | str]:
        return [o.value for o in self.options]


class CommandSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: Category
    structure: str
    params: tuple[CommandParam, ...] = ()
    encode: Callable[[dict[str, str]], str] = Field(exclude=True)

    @model_validator(mode="after")
    def check_unique_names(self):
        names = [p.name for p in self.params]
        if len(names) != len(set(names)):
            raise ValueError(f"command {self.id!r} declares a parameter twice")
        return self

    def param(self, name: str) -> CommandParam | None:
        for p in self.params:
            if p.name == name:
                return p
        return None


# shared option sets
def _yes_no() -> tuple[ParamOption, ...]:
    return (ParamOption(label="Yes", value=1), ParamOption(label="No", value=0))


def _on_off() -> tuple[ParamOption, ...]:
    return (ParamOption(label="On", value=1), ParamOption(label="Off", value=0))


EVIEW_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        id="set_contacts",
        name="Set Contact Numbers",
        category=Category.basic,
        structure="A(n),(SMS Yes/No),(call Yes/No),(phone number)",
        params=(
            CommandParam(name="n", label="Contact Slot", kind=ParamKind.number, default_value=1, description="1-10"),
            CommandParam(name="sms", label="Receive SMS", kind=ParamKind.select, default_value=1, options=_yes_no()),
            CommandParam(name="call", label="Receive Call", kind=ParamKind.select, default_value=1, options=_yes_no()),
            CommandParam(name="phone", label="Phone Number", kind=ParamKind.text, placeholder="e.g. 123456789"),
        ),
        encode=lambda p: f"A{p['n']},{p['sms']},{p['call']},{p['phone']}",
    ),
    CommandSpec(
        id="loc",
        name="Request Location",
        category=Category.monitoring,
        structure="loc",
        encode=lambda p: "loc",
    ),
    CommandSpec(
        id="fall_down",
        name="Fall Down Alarm",
        category=Category.alarms,
        structure="fl(on/off),(sensitivity),(call yes/no)",
        params=(
            CommandParam(name="on", label="Status", kind=ParamKind.select, default_value=1, options=_on_off()),
            CommandParam(name="sensitivity", label="Sensitivity", kind=ParamKind.number, default_value=5,
                         description="1-9 (1=least, 9=most)"),
            CommandParam(name="call", label="Call on Alarm", kind=ParamKind.select, default_value=1, options=_yes_no()),
        ),
        encode=lambda p: f"fl{p['on']},{p['sensitivity']},{p['call']}",
    ),
    CommandSpec(
        id="no_motion",
        name="No Motion Alarm",
        category=Category.alarms,
        structure="nmo(on/off),(time),(call yes/no)",
        params=(
            CommandParam(name="on", label="Status", kind=ParamKind.select, default_value=1, options=_on_off()),
            CommandParam(name="time", label="Static Time", kind=ParamKind.number, default_value=60, suffix="min",
                         description="Minutes of no motion"),
            CommandParam(name="call", label="Call on Alarm", kind=ParamKind.select, default_value=1, options=_yes_no()),
        ),
        # the "M" unit is part of the device grammar, not the suffix
        encode=lambda p: f"NMO{p['on']},{p['time']}M,{p['call']}",
    ),
    CommandSpec(
        id="working_mode",
        name="Set Working Mode",
        category=Category.control,
        structure="mode(n)",
        params=(
            CommandParam(
                name="mode",
                label="Mode",
                kind=ParamKind.select,
                default_value=1,
                options=(
                    ParamOption(label="Mode 1: Only in events", value=1),
                    ParamOption(label="Mode 2: Events & interval", value=2),
                    ParamOption(label="Mode 3: Always on", value=3),
                    ParamOption(label="Mode 4: Events & interval (data only)", value=4),
                    ParamOption(label="Mode 5: SOS Only", value=5),
                    ParamOption(label="Mode 6: Events & Activated", value=6),
                ),
            ),
        ),
        encode=lambda p: f"mode{p['mode']}",
    ),
    CommandSpec(
        id="sos_button",
        name="SOS Button Mode",
        category=Category.alarms,
        structure="SOS(mode),(time)",
        params=(
            CommandParam(name="mode", label="Trigger Type", kind=ParamKind.select, default_value=1,
                         options=(ParamOption(label="Long Press", value=1), ParamOption(label="Double Click", value=2))),
            CommandParam(name="time", label="Press Time", kind=ParamKind.number, default_value=20, suffix="x0.1s",
                         description="20 = 2 seconds"),
        ),
        encode=lambda p: f"SOS{p['mode']},{p['time']}",
    ),
    CommandSpec(
        id="sos_loops",
        name="SOS Call Loops",
        category=Category.alarms,
        structure="Loop(time)",
        params=(
            CommandParam(name="time", label="Cycles", kind=ParamKind.number, default_value=5,
                         description="0=infinite, 1-10=times"),
        ),
        encode=lambda p: f"Loop{p['time']}",
    ),
    CommandSpec(
        id="whitelist",
        name="SMS White List",
        category=Category.network,
        structure="sms(n)",
        params=(
            CommandParam(name="n", label="Status", kind=ParamKind.select, default_value=0,
                         options=(ParamOption(label="Off (All numbers)", value=0),
                                  ParamOption(label="On (Authorized only)", value=1))),
        ),
        encode=lambda p: f"sms{p['n']}",
    ),
    CommandSpec(
        id="timezone",
        name="Set Time Zone",
        category=Category.basic,
        structure="tz(zone):(minute)",
        params=(
            CommandParam(name="zone", label="Zone", kind=ParamKind.text, default_value="+8", placeholder="+8 or -5"),
            CommandParam(name="min", label="Minute Offset", kind=ParamKind.select, default_value="00",
                         options=tuple(ParamOption(label=m, value=m) for m in ("00", "15", "30", "45"))),
        ),
        encode=lambda p: f"tz{p['zone']}:{p['min']}",
    ),
    CommandSpec(
        id="apn",
        name="Set APN",
        category=Category.network,
        structure="S1,(apn)",
        params=(
            CommandParam(name="apn", label="APN Name", kind=ParamKind.text, placeholder="e.g. internet"),
        ),
        encode=lambda p: f"S1,{p['apn']}",
    ),
    CommandSpec(
        id="server",
        name="Set Server IP",
        category=Category.network,
        structure="IP1,(ip),(port)",
        params=(
            CommandParam(name="ip", label="Server IP/Domain", kind=ParamKind.text, placeholder="e.g. 1.2.3.4"),
            CommandParam(name="port", label="Port", kind=ParamKind.number, default_value=6060),
        ),
        encode=lambda p: f"IP1,{p['ip']},{p['port']}",
    ),
    CommandSpec(
        id="status",
        name="Check Status",
        category=Category.monitoring,
        structure="status",
        encode=lambda p: "status",
    ),
    CommandSpec(
        id="reboot",
        name="Reboot Device",
        category=Category.control,
        structure="reboot",
        encode=lambda p: "reboot",
    ),
    CommandSpec(
        id="findme",
        name="Find My Device",
        category=Category.control,
        structure="findme",
        encode=lambda p: "findme",
    ),
    CommandSpec(
        id="mic_volume",
        name="Microphone Volume",
        category=Category.control,
        structure="Micvolume(level)",
        params=(
            CommandParam(name="level", label="Volume Level", kind=ParamKind.number, default_value=10, description="0-15"),
        ),
        encode=lambda p: f"Micvolume{p['level']}",
    ),
    CommandSpec(
        id="speaker_volume",
        name="Speaker Volume",
        category=Category.control,
        structure="speakervolume(level)",
        params=(
            CommandParam(name="level", label="Volume Level", kind=ParamKind.number, default_value=90,
                         description="0-100"),
        ),
        encode=lambda p: f"speakervolume{p['level']}",
    ),
)

_BY_ID: dict[str, CommandSpec] = {c.id: c for c in EVIEW_COMMANDS}
_BY_NAME: dict[str, CommandSpec] = {c.name: c for c in EVIEW_COMMANDS}


def list_commands() -> tuple[CommandSpec, ...]:
    return EVIEW_COMMANDS


def get_command(command_id: str) -> CommandSpec:
    try:
        return _BY_ID[command_id]
    except KeyError:
        raise UnknownCommand(command_id) from None


def find_command(id_or_name: str) -> CommandSpec:
    """Look a command up by id, falling back to its display name."""
    cmd = _BY_ID.get(id_or_name) or _BY_NAME.get(id_or_name)
    if cmd is None:
        raise UnknownCommand(id_or_name)
    return cmd


def commands_by_category() -> dict[Category, list[CommandSpec]]:
    grouped: dict[Category, list[CommandSpec]] = {}
    for cat in Category:
        members = [c for c in EVIEW_COMMANDS if c.category is cat]
        if members:
            grouped[cat] = members
    return grouped


_EMPTY: dict[ParamKind, Any] = {
    ParamKind.text: "",
    ParamKind.number: 0,
    ParamKind.boolean: False,
}


def default_params(command: CommandSpec) -> dict[str, Any]:
    """Initial form state: declared defaults, else an empty value for the kind."""
    out: dict[str, Any] = {}
    for p in command.params:
        if p.default_value is not None:
            out[p.name] = p.default_value
        elif p.kind is ParamKind.select:
            out[p.name] = p.options[0].value
        else:
            out[p.name] = _EMPTY[p.kind]
    return out
