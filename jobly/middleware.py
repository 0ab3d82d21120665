"""
Per-request statement accounting.

Every statement the accessors send is tallied by verb and target table
(``SELECT companies``, ``INSERT jobs`` …) into a ``Counter`` bound to the
current request.  ``TimingMiddleware`` exposes the total as
``X-Query-Count`` and logs the per-resource breakdown at DEBUG.
"""
import logging
import re
import time
from collections import Counter
from contextvars import ContextVar

from sqlalchemy import event
from starlette.types import ASGIApp, Receive, Scope, Send

logger = logging.getLogger(__name__)

_VERB_RE = re.compile(r"^\s*(\w+)")
_TABLE_RE = re.compile(r"\b(?:FROM|INTO|UPDATE)\s+\"?(\w+)", re.IGNORECASE)

# None outside a request: statements run by scripts or tests are not tallied.
statement_counts_var: ContextVar[Counter | None] = ContextVar("statement_counts", default=None)


def statement_key(statement: str) -> str:
    """Return ``"<VERB> <table>"`` for *statement*, e.g. ``"UPDATE jobs"``."""
    verb = _VERB_RE.match(statement)
    table = _TABLE_RE.search(statement)
    return " ".join(
        part for part in (
            verb.group(1).upper() if verb else "?",
            table.group(1) if table else "",
        ) if part
    )


def install_statement_counter(engine) -> None:
    """
    Tally each statement run on *engine* into the current request's counter.

    The counter object is created by the middleware and mutated here, so
    the tally survives the context copies made by the async driver bridge.
    """

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def _tally_statement(conn, cursor, statement, parameters, context, executemany):
        counts = statement_counts_var.get()
        if counts is not None:
            counts[statement_key(statement)] += 1


class TimingMiddleware:
    """
    Pure ASGI middleware adding ``X-Response-Time-Ms`` and
    ``X-Query-Count`` to HTTP responses.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        counts: Counter = Counter()
        token = statement_counts_var.set(counts)
        start = time.perf_counter()
        status_code = 0

        async def send_wrapper(message):
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                headers = list(message.get("headers", []))
                headers.append((b"x-response-time-ms", str(duration_ms).encode()))
                headers.append((b"x-query-count", str(sum(counts.values())).encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            statement_counts_var.reset(token)
            logger.debug(
                "%s %s -> %s in %.2f ms [%s]",
                scope["method"],
                scope["path"],
                status_code,
                (time.perf_counter() - start) * 1000,
                ", ".join(f"{key}={n}" for key, n in sorted(counts.items())) or "no statements",
            )
