"""Bridge between the async gateway and synchronous callers."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

T = TypeVar("T")


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Run a gateway coroutine to completion and return its result.

    Outside an event loop the coroutine gets a fresh loop. Inside a running
    loop (e.g. when called from a notebook or an async test) it is run on
    a fresh loop in a worker thread so the caller's loop is not re-entered.

    Example:
        gateway = get_gateway()
        pods = run_sync(gateway.list(ctx, ResourceType.POD, NamespaceSelector.all()))
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, coro).result()
