"""
Runs blocking file operations off the event loop.

Virtual document files are written and removed in a dedicated thread pool so that the
event loop handling editor requests is never blocked by the filesystem.
"""

import asyncio
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import TypeVar

from sensai.util import logging

log = logging.getLogger(__name__)

T = TypeVar("T")

_vdoc_io_pool: ThreadPoolExecutor | None = None
_vdoc_io_pool_lock = threading.Lock()


def _get_pool() -> ThreadPoolExecutor:
    global _vdoc_io_pool
    with _vdoc_io_pool_lock:
        if _vdoc_io_pool is None:
            _vdoc_io_pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="VDocIO")
        return _vdoc_io_pool


async def run_in_executor(func: Callable[..., T], *args: object) -> T:
    """
    Runs the given blocking function with the given arguments in the vdoc I/O thread pool.

    :param func: the function to run
    :param args: positional arguments to pass to the function
    :return: the function's result; exceptions raised by the function propagate
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_get_pool(), func, *args)


def shutdown_executor() -> None:
    """
    Shuts down the vdoc I/O thread pool, waiting for pending file operations to complete.

    Should be called on application shutdown. A later call to :func:`run_in_executor` starts a new pool.
    """
    global _vdoc_io_pool
    with _vdoc_io_pool_lock:
        pool, _vdoc_io_pool = _vdoc_io_pool, None
    if pool is not None:
        pool.shutdown(wait=True, cancel_futures=False)
        log.debug("Vdoc I/O thread pool shut down")
