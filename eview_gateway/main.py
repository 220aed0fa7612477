import logging
from typing import Any, List

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .catalog import CommandSpec, default_params, get_command, list_commands
from .db import init_db
from .encoder import check_limit
from .errors import PersistenceFailure, UnknownCommand
from .history import SqlHistoryStore
from .schemas import (
    CommandOut, HistoryOut, OptionOut, ParamOut,
    PreviewRequest, PreviewResponse, SendCommandRequest, SendCommandResponse,
)
from .settings import settings
from .utils import add_cors
from .workflow import SubmissionRequest, preview, submit

logging.basicConfig(level=settings.log_level)
log = logging.getLogger("api")

app = FastAPI(title="Eview SMS Gateway", version="0.1.0")
add_cors(app)

store = SqlHistoryStore()

@app.on_event("startup")
def on_startup():
    init_db()
    log.info("command catalog loaded: %d commands, limit=%d bytes",
             len(list_commands()), settings.sms_byte_limit)

def _command_out(c: CommandSpec) -> CommandOut:
    return CommandOut(
        id=c.id, name=c.name, category=c.category.value, structure=c.structure,
        params=[
            ParamOut(
                name=p.name, label=p.label, type=p.kind.value,
                options=[OptionOut(label=o.label, value=o.value) for o in p.options],
                placeholder=p.placeholder, defaultValue=p.default_value,
                description=p.description, suffix=p.suffix,
            )
            for p in c.params
        ],
    )

def _lookup(command_id: str) -> CommandSpec:
    try:
        return get_command(command_id)
    except UnknownCommand as e:
        raise HTTPException(status_code=404, detail=e.reason)

@app.get("/api/commands", response_model=List[CommandOut])
def commands():
    return [_command_out(c) for c in list_commands()]

@app.get("/api/commands/{command_id}", response_model=CommandOut)
def command_detail(command_id: str):
    return _command_out(_lookup(command_id))

@app.get("/api/commands/{command_id}/defaults")
def command_defaults(command_id: str) -> dict[str, Any]:
    return default_params(_lookup(command_id))

# workflow field names -> request/response field names
_WIRE_FIELDS = {
    "device_name": "deviceName",
    "phone_number": "phoneNumber",
    "raw_message": "rawMessage",
}

def _wire_errors(errors) -> list[dict[str, str]]:
    out = []
    for e in errors:
        d = e.model_dump()
        d["field"] = _WIRE_FIELDS.get(d["field"], d["field"])
        out.append(d)
    return out

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    if request.url.path != "/api/send-command":
        return await request_validation_exception_handler(request, exc)
    errors = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p != "body") or "body",
            "reason": err["msg"],
            "code": "InvalidRequest",
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=SendCommandResponse(
        accepted=False, rawMessage="", byteLength=0, errors=errors,
    ).model_dump())

@app.post("/api/preview", response_model=PreviewResponse)
def preview_command(req: PreviewRequest):
    res = preview(req.command, req.params)
    # nothing encoded means nothing can be sent
    within = bool(res.raw_message) and check_limit(res.raw_message, settings.sms_byte_limit).within_limit
    return PreviewResponse(
        rawMessage=res.raw_message,
        byteLength=res.byte_length,
        withinLimit=within,
        errors=_wire_errors(res.errors),
    )

@app.get("/api/history", response_model=List[HistoryOut])
def history(limit: int | None = Query(None, ge=1, le=500)):
    rows = store.recent(limit or settings.history_limit)
    return [HistoryOut(**r.model_dump()) for r in rows]

@app.post("/api/send-command", response_model=SendCommandResponse)
def send_command(body: SendCommandRequest):
    req = SubmissionRequest(
        device_name=body.deviceName or "",
        phone_number=body.phoneNumber or "",
        command=body.command or "",
        params=body.params or {},
    )
    try:
        res = submit(req, store)
    except PersistenceFailure as e:
        # the message went out but was not recorded
        return JSONResponse(status_code=500, content=SendCommandResponse(
            accepted=False, rawMessage=e.raw_message, byteLength=e.byte_length,
            errors=[{"field": e.field, "reason": e.reason, "code": e.code}],
        ).model_dump())

    out = SendCommandResponse(
        accepted=res.accepted,
        rawMessage=res.raw_message,
        byteLength=res.byte_length,
        errors=_wire_errors(res.errors),
        recordId=res.record_id,
        status=res.status,
    )
    if not res.accepted:
        return JSONResponse(status_code=422, content=out.model_dump())
    return out
