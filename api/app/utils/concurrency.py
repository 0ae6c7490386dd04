"""
Helpers for running independent database reads concurrently.
"""
from typing import Any, Callable
import asyncio

from sqlmodel import Session
from sqlalchemy.engine import Engine
from starlette.concurrency import run_in_threadpool


def _with_session(engine: Engine, fetch: Callable[[Session], Any]) -> Any:
    # Sessions are not thread-safe, so every fetch gets its own
    with Session(engine) as session:
        return fetch(session)


async def gather_fetches(engine: Engine, *fetches: Callable[[Session], Any]) -> list:
    """
    Run each fetch in a worker thread with its own session and wait for all.

    Each fetch takes a Session and must return plain data (schemas, ints),
    not ORM instances, since its session is closed when it returns.

    Returns:
        Results in the same order as the fetches
    """
    return list(
        await asyncio.gather(
            *(run_in_threadpool(_with_session, engine, fetch) for fetch in fetches)
        )
    )
