"""Package-manager detection, toolchain version probes and the registry probe."""

from __future__ import annotations

import asyncio
import socket
import threading
from dataclasses import dataclass

import semantic_version

from ..utils import run_command


@dataclass(frozen=True)
class NpmInfo:
    """Result of probing the installed npm."""

    has_min_npm: bool
    npm_version: str | None


def coerce_version(raw: str | None) -> semantic_version.Version | None:
    """Parse loose version output such as ``v8.11.1`` or ``6.4.1\\n``."""
    if not raw:
        return None
    try:
        return semantic_version.Version.coerce(raw.strip().lstrip("v"))
    except ValueError:
        return None


async def should_use_yarn() -> bool:
    """Return ``True`` if ``yarnpkg`` is available on the PATH."""
    returncode, _, _ = await run_command(["yarnpkg", "--version"])
    return returncode == 0


async def check_npm_version(min_npm: str = "3.0.0") -> NpmInfo:
    """Report the installed npm version and whether it meets *min_npm*."""
    returncode, stdout, _ = await run_command(["npm", "--version"])
    if returncode != 0:
        return NpmInfo(has_min_npm=False, npm_version=None)
    version = coerce_version(stdout)
    if version is None:
        return NpmInfo(has_min_npm=False, npm_version=stdout or None)
    return NpmInfo(
        has_min_npm=version >= semantic_version.Version(min_npm),
        npm_version=str(version),
    )


async def get_node_version() -> str | None:
    """Return the running Node.js version (without the ``v``), if any."""
    returncode, stdout, _ = await run_command(["node", "--version"])
    if returncode != 0:
        return None
    version = coerce_version(stdout)
    return str(version) if version else None


def _lookup(loop: asyncio.AbstractEventLoop, host: str) -> asyncio.Future:
    """Resolve *host* in a daemon thread and settle a future on *loop*.

    Unlike ``loop.getaddrinfo``, the thread is not joined when the loop shuts
    down, so a hung resolver cannot hold up exit after the probe times out.
    """
    future = loop.create_future()

    def _settle(result: object, error: BaseException | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def _resolve() -> None:
        try:
            result, error = socket.getaddrinfo(host, None), None
        except OSError as exc:
            result, error = None, exc
        try:
            loop.call_soon_threadsafe(_settle, result, error)
        except RuntimeError:
            # loop already closed, nobody is waiting for the answer
            return

    threading.Thread(target=_resolve, name=f"dns-probe-{host}", daemon=True).start()
    return future


async def check_if_online(use_yarn: bool, host: str, timeout: float = 5.0) -> bool:
    """Probe whether the package registry can be resolved.

    npm is not probed: it is assumed to be online.  For yarn a single DNS
    lookup of *host* is made; failure or timeout means offline.
    """
    if not use_yarn:
        return True

    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(_lookup(loop, host), timeout=timeout)
    except (socket.gaierror, OSError, asyncio.TimeoutError):
        return False
    return True
