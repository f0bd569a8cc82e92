"""Exception hierarchy for a bootstrap run.

Every failure the orchestrator knows how to report derives from
:class:`BootstrapError`.  Whether a failure triggers rollback is decided by
its class, see :attr:`BootstrapError.rollback`.
"""

from __future__ import annotations

from pathlib import Path


class BootstrapError(Exception):
    """Base class for all bootstrap failures."""

    #: Whether generated artifacts are cleaned up when this error aborts a run.
    rollback: bool = True


# ---------------------------------------------------------------------------
# Pre-install validation (nothing to roll back yet)
# ---------------------------------------------------------------------------


class InvalidName(BootstrapError):
    """The project name violates the npm naming policy or yields no prefix."""

    rollback = False

    def __init__(
        self,
        name: str,
        errors: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> None:
        self.name = name
        self.errors = list(errors or [])
        self.warnings = list(warnings or [])
        super().__init__(
            f'Could not create a project called "{name}" because of npm naming restrictions'
        )


class NameCollision(BootstrapError):
    """The project name is identical to one of its own dependencies."""

    rollback = False

    def __init__(self, name: str, reserved: list[str]) -> None:
        self.name = name
        self.reserved = list(reserved)
        super().__init__(
            f"We cannot create a project called {name} because a dependency "
            f"with the same name exists."
        )


class UnsafeDirectory(BootstrapError):
    """The target is not a directory, or already holds files that could conflict."""

    rollback = False

    def __init__(self, root: Path, conflicts: list[str]) -> None:
        self.root = root
        self.conflicts = list(conflicts)
        if self.conflicts:
            message = f"The directory {root} contains files that could conflict."
        else:
            message = f"{root} already exists and is not a directory."
        super().__init__(message)


# ---------------------------------------------------------------------------
# Failures after the target directory has been populated
# ---------------------------------------------------------------------------


class CommandFailure(BootstrapError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int | None = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"{command} has failed.")


class InstallFailure(CommandFailure):
    """The package manager could not install the dependencies."""


class InitScriptFailure(CommandFailure):
    """The installed package's ``scripts/init.js`` failed."""


class MissingDependency(BootstrapError):
    """``package.json`` lacks an entry that the install should have written."""

    def __init__(self, name: str) -> None:
        self.name = name
        if name == "dependencies":
            message = "Missing dependencies in package.json"
        else:
            message = f"Unable to find {name} in package.json"
        super().__init__(message)


class RuntimeIncompatible(BootstrapError):
    """The running Node.js does not satisfy the installed package's engines range."""

    rollback = False

    def __init__(self, current: str, required: str) -> None:
        self.current = current
        self.required = required
        super().__init__(
            f"You are running Node {current}. "
            f"Create Divi Extension requires Node {required} or higher. "
            f"Please update your version of Node."
        )


class UnexpectedError(BootstrapError):
    """Wraps any other exception that escaped a bootstrap step."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"{type(cause).__name__}: {cause}")
