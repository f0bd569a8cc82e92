"""Turn a ``--scripts-version`` specifier into an installable package.

The specifier may be a plain version (``1.0.4``), a fork published on npm
(``my-scripts`` or ``@scope/my-scripts@next``), a ``.tgz`` archive URL or
path, or a ``git+`` URL.
"""

from __future__ import annotations

import re

import semantic_version

from ..models import (
    GitUrl,
    PackageReference,
    PlainName,
    SemverTag,
    TarballPath,
    TarballUrl,
)

_GIT_NAME_RE = re.compile(r"([^/]+)\.git(#.*)?$")


def clean_version(spec: str | None) -> str | None:
    """Return the normalised semantic version in *spec*, or ``None``.

    A leading ``v`` or ``=`` and surrounding whitespace are tolerated, so
    ``" v1.2.3"`` cleans to ``"1.2.3"``.
    """
    if not spec:
        return None
    candidate = spec.strip().lstrip("=v").strip()
    try:
        return str(semantic_version.Version(candidate))
    except ValueError:
        return None


def get_install_package(version_spec: str | None, default_package: str) -> str:
    """Compute the argument handed to the package manager.

    Examples::

        get_install_package(None, "react-scripts")     -> "react-scripts"
        get_install_package("1.0.4", "react-scripts")  -> "react-scripts@1.0.4"
        get_install_package("my-fork", "react-scripts") -> "my-fork"
    """
    version = clean_version(version_spec)
    if version:
        return f"{default_package}@{version}"
    if version_spec:
        return version_spec
    return default_package


def classify(install_package: str) -> PackageReference:
    """Classify an install target, trying each form in priority order."""
    if ".tgz" in install_package:
        if re.match(r"^https?://", install_package):
            return TarballUrl(install_package)
        return TarballPath(install_package)

    if install_package.startswith("git+"):
        url, _, ref = install_package.partition("#")
        return GitUrl(url, ref or None)

    if install_package.find("@", 1) > 0:
        # Do not match @scope/ when stripping off @version or @tag
        name, _, version = install_package[1:].partition("@")
        return SemverTag(install_package[0] + name, version)

    return PlainName(install_package)


def git_package_name(url: str) -> str:
    """Pull the package name out of a git URL.

    ``git+ssh://github.com/mycompany/react-scripts.git#v1.2.3`` gives
    ``react-scripts``.  A URL without a ``.git`` suffix falls back to its
    last path segment.
    """
    match = _GIT_NAME_RE.search(url)
    if match:
        return match.group(1)
    return url.split("#", 1)[0].rstrip("/").rsplit("/", 1)[-1]


def tarball_stem(location: str) -> str:
    """Guess a package name from an archive filename.

    The version suffix is dropped, so ``react-scripts-0.2.0-alpha.1.tgz``
    gives ``react-scripts``.
    """
    filename = location.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    match = re.match(r"^(.+?)(?:-\d+.+)?\.tgz$", filename)
    if match:
        return match.group(1)
    return filename.split(".tgz", 1)[0] or filename
