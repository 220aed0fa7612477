"""SQL-backed history log: the append-only sink for accepted sends and the
"most recent N" query behind ``GET /api/history``."""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from .db import get_session
from .errors import PersistenceFailure
from .models import CommandHistory

log = logging.getLogger("history")


class SqlHistoryStore:
    def __init__(self, bind=None) -> None:
        self._bind = bind

    def append(self, device_name: str, phone_number: str, command: str,
               raw_message: str, status: str) -> CommandHistory:
        rec = CommandHistory(
            device_name=device_name,
            phone_number=phone_number,
            command=command,
            raw_message=raw_message,
            status=status,
        )
        try:
            with get_session(self._bind) as session:
                session.add(rec)
                session.commit()
                session.refresh(rec)
        except SQLAlchemyError as e:
            log.error("failed to record %s to %s: %s", command, phone_number, e)
            raise PersistenceFailure(f"Failed to log command: {e.__class__.__name__}") from e
        return rec

    def recent(self, limit: int = 50) -> list[CommandHistory]:
        with get_session(self._bind) as session:
            stmt = select(CommandHistory).order_by(
                CommandHistory.timestamp.desc(), CommandHistory.id.desc()
            ).limit(limit)
            return list(session.exec(stmt).all())
