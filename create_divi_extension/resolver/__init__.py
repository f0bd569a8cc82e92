"""Package reference resolution.

Maps a raw ``--scripts-version`` specifier to the package the package
manager installs and to the name the package is known by once installed::

    install_package = get_install_package("1.0.4", "react-scripts")
    resolution = await get_package_name(install_package)
"""

from __future__ import annotations

from ..models import (
    Degraded,
    GitUrl,
    NameResolution,
    Resolved,
    TarballPath,
    TarballUrl,
)
from .archive import ArchiveError, extract_package_name, resolve_archive_name
from .reference import classify, clean_version, get_install_package, git_package_name


async def get_package_name(install_package: str, timeout: float = 60.0) -> NameResolution:
    """Resolve the display/installed name of *install_package*."""
    reference = classify(install_package)
    if isinstance(reference, TarballUrl):
        return await resolve_archive_name(reference.url, timeout=timeout)
    if isinstance(reference, TarballPath):
        return await resolve_archive_name(reference.path, timeout=timeout)
    if isinstance(reference, GitUrl):
        return Resolved(git_package_name(reference.url))
    # SemverTag and PlainName both carry the bare name
    return Resolved(reference.name)


__all__ = [
    "ArchiveError",
    "Degraded",
    "Resolved",
    "classify",
    "clean_version",
    "extract_package_name",
    "get_install_package",
    "get_package_name",
    "git_package_name",
    "resolve_archive_name",
]
