from __future__ import annotations

from contextvars import ContextVar, Token


class _QueryTimer:
    __slots__ = ("total_ms",)

    def __init__(self) -> None:
        self.total_ms = 0.0


# Holds a mutable accumulator so time recorded in copied contexts (threadpool
# workers, middleware tasks) is visible to the request that started the timer.
_request_timer: ContextVar[_QueryTimer | None] = ContextVar("request_db_timer", default=None)


def start_db_timer() -> Token:
    return _request_timer.set(_QueryTimer())


def stop_db_timer(token: Token) -> None:
    _request_timer.reset(token)


def record_query_time(elapsed_ms: float) -> None:
    timer = _request_timer.get()
    if timer is not None:
        timer.total_ms += elapsed_ms


def current_db_time_ms() -> float | None:
    timer = _request_timer.get()
    return timer.total_ms if timer is not None else None
