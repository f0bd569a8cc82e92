"""Data models shared by the bootstrap steps.

``ProjectRequest`` is the validated input handed over by the CLI.  The
package references and name resolutions are small frozen dataclasses; the
orchestrator threads a mutable ``RunContext`` through every step instead of
relying on the process working directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class ProjectRequest(BaseModel):
    """What the user asked for on the command line."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Target project directory")
    verbose: bool = Field(default=False)
    version_spec: str | None = Field(
        default=None, description="Alternative scripts package, version, archive or git URL"
    )


# ---------------------------------------------------------------------------
# Package references
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SemverTag:
    """``name@version`` or ``name@tag``."""

    name: str
    version: str


@dataclass(frozen=True)
class TarballUrl:
    url: str


@dataclass(frozen=True)
class TarballPath:
    path: str


@dataclass(frozen=True)
class GitUrl:
    """A ``git+`` URL with an optional ``#ref`` suffix."""

    url: str
    ref: str | None = None


@dataclass(frozen=True)
class PlainName:
    name: str


PackageReference = Union[SemverTag, TarballUrl, TarballPath, GitUrl, PlainName]


# ---------------------------------------------------------------------------
# Name resolution results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resolved:
    """The package name was read from its source."""

    name: str


@dataclass(frozen=True)
class Degraded:
    """The package name was guessed because the archive could not be read."""

    name: str
    reason: str


NameResolution = Union[Resolved, Degraded]


# ---------------------------------------------------------------------------
# Install and template state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InstallPlan:
    """How the package manager will be invoked."""

    use_yarn: bool
    online: bool
    dependencies: tuple[str, ...]


@dataclass(frozen=True)
class TemplateContext:
    """Naming tokens derived from the project name."""

    prefix: str
    PREFIX: str
    Prefix: str
    app_name: str

    def replacements(self) -> list[tuple[str, str]]:
        """Token/value pairs in the order they must be applied."""
        return [
            ("__Prefix", self.Prefix),
            ("__PREFIX", self.PREFIX),
            ("__prefix", self.prefix),
            ("<NAME>", self.app_name),
            ("<GETTEXT_DOMAIN>", self.app_name),
        ]


@dataclass
class RunContext:
    """Mutable state of a single bootstrap run."""

    root: Path
    app_name: str
    original_directory: Path
    verbose: bool = False
    version_spec: str | None = None
    use_yarn: bool = False
    used_legacy_fallback: bool = False
    install_package: str = ""
    package_name: str = ""
    online: bool = True
    name_resolution: NameResolution | None = None
    template: TemplateContext | None = None
    working_root: Path | None = None
    completed_steps: list[str] = field(default_factory=list)


@dataclass
class RollbackReport:
    """What the rollback controller removed."""

    deleted: list[str] = field(default_factory=list)
    root_removed: bool = False
    working_root: Path | None = None
