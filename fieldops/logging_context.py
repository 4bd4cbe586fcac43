"""Screen-session tagging for log records.

Opening an availability screen sets an ``AVAIL-xxxxxx`` id in a ContextVar.
Every record that passes through a ``SessionIdFilter`` carries it as
``session_id``, so one screen's focus and save requests can be grepped out
of interleaved reconciler and API client logs. Records logged outside a
screen show ``NO_SESSION``.
"""

import logging
from contextvars import ContextVar

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION")


def set_session_id(session_id: str) -> None:
    """Tag log records in the current task with ``session_id``."""
    _session_id.set(session_id)


def get_session_id() -> str:
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Stamps the active screen session on records that lack one."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """``logging.getLogger(name)`` with a single SessionIdFilter installed."""
    session_logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in session_logger.filters):
        session_logger.addFilter(SessionIdFilter())
    return session_logger
