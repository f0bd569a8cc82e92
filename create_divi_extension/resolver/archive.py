"""Read the declared package name out of a ``.tgz`` archive.

The archive is fetched (URL) or copied (local path) into a temporary
directory, unpacked there, and its ``package.json`` is read.  The temporary
directory is always removed afterwards.
"""

from __future__ import annotations

import asyncio
import json
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path, PurePosixPath

import httpx
from rich.markup import escape

from ..models import Degraded, NameResolution, Resolved
from ..utils import console, print_warning
from .reference import tarball_stem


class ArchiveError(Exception):
    """Raised when an archive cannot be fetched, unpacked or read."""


# A truncated gzip stream surfaces as EOFError, corrupt deflate data as zlib.error.
_FETCH_ERRORS = (
    OSError,
    EOFError,
    zlib.error,
    tarfile.TarError,
    httpx.HTTPError,
    httpx.InvalidURL,
)


async def download(url: str, dest: Path, timeout: float = 60.0) -> Path:
    """Stream *url* into *dest*."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=10.0), follow_redirects=True
    ) as client:
        async with client.stream("GET", url) as response:
            response.raise_for_status()
            with dest.open("wb") as fh:
                async for chunk in response.aiter_bytes():
                    fh.write(chunk)
    return dest


def unpack(archive: Path, dest: Path) -> Path:
    """Unpack *archive* into *dest*, dropping the top-level directory.

    npm tarballs keep everything under a single ``package/`` folder; the
    contents of that folder end up directly in *dest*.  Only regular files
    and directories are written, and nothing outside *dest*.
    """
    dest.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "r:*") as tar:
        for member in tar.getmembers():
            parts = PurePosixPath(member.name).parts
            if len(parts) < 2 or member.name.startswith("/") or ".." in parts:
                continue
            target = dest.joinpath(*parts[1:])
            if member.isdir():
                target.mkdir(parents=True, exist_ok=True)
            elif member.isfile():
                source = tar.extractfile(member)
                if source is None:
                    continue
                target.parent.mkdir(parents=True, exist_ok=True)
                with source, target.open("wb") as fh:
                    shutil.copyfileobj(source, fh)
    return dest


def read_package_name(package_dir: Path) -> str:
    """Return the ``name`` field of ``package_dir/package.json``."""
    manifest = package_dir / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ArchiveError(f"cannot read {manifest.name}: {exc}") from exc
    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name:
        raise ArchiveError("package.json has no name")
    return name


async def extract_package_name(location: str, timeout: float = 60.0) -> str:
    """Fetch or copy the archive at *location* and read its package name.

    Raises:
        ArchiveError: On any download, unpack or read failure.
    """
    with tempfile.TemporaryDirectory(prefix="create-divi-extension-") as tmp:
        tmpdir = Path(tmp)
        archive = tmpdir / "package.tgz"
        try:
            if location.startswith("http"):
                await download(location, archive, timeout=timeout)
            else:
                await asyncio.to_thread(shutil.copyfile, location, archive)
            unpacked = await asyncio.to_thread(unpack, archive, tmpdir / "package")
        except _FETCH_ERRORS as exc:
            raise ArchiveError(str(exc) or type(exc).__name__) from exc
        return await asyncio.to_thread(read_package_name, unpacked)


async def resolve_archive_name(location: str, timeout: float = 60.0) -> NameResolution:
    """Best-effort name lookup for an archive.

    A failure does not abort the run: the name is guessed from the filename
    and a :class:`~create_divi_extension.models.Degraded` result is returned.
    """
    try:
        return Resolved(await extract_package_name(location, timeout=timeout))
    except ArchiveError as exc:
        fallback = tarball_stem(location)
        print_warning(f"Could not extract the package name from the archive: {exc}")
        console.print(f'Based on the filename, assuming it is "[cyan]{escape(fallback)}[/cyan]"')
        return Degraded(fallback, str(exc))
