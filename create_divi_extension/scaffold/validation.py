"""Pre-install checks on the project name and the target directory.

``validate_package_name`` follows the rules npm applies to new package names
(``validate-npm-package-name``): problems that make a name unusable are
errors, legacy-only names produce warnings, and a name is only acceptable
for a new project when it has neither.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote

from ..errors import InvalidName, NameCollision, UnsafeDirectory

MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})

NODE_BUILTINS = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "dns", "domain", "events", "fs", "http",
    "http2", "https", "inspector", "module", "net", "os", "path", "perf_hooks",
    "process", "punycode", "querystring", "readline", "repl", "stream",
    "string_decoder", "sys", "timers", "tls", "trace_events", "tty", "url",
    "util", "v8", "vm", "worker_threads", "zlib",
})

# Entries that may already exist in a directory we are about to populate.
VALID_FILES = frozenset({
    ".DS_Store",
    "Thumbs.db",
    ".git",
    ".gitignore",
    ".idea",
    "README.md",
    "LICENSE",
    "web.iml",
    ".hg",
    ".hgignore",
    ".hgcheck",
})

_SCOPED_RE = re.compile(r"^(?:@([^/]+?)[/])?([^/]+?)$")
_SPECIAL_CHARS_RE = re.compile(r"[~'!()*]")


@dataclass
class NameValidation:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid_for_new_packages(self) -> bool:
        return not self.errors and not self.warnings

    @property
    def valid_for_old_packages(self) -> bool:
        return not self.errors


def _url_safe(value: str) -> bool:
    return quote(value, safe="-_.!~*'()") == value


def validate_package_name(name: str) -> NameValidation:
    """Check *name* against npm's package naming rules."""
    result = NameValidation()

    if not name:
        result.errors.append("name length must be greater than zero")
        return result

    if name.startswith("."):
        result.errors.append("name cannot start with a period")
    if name.startswith("_"):
        result.errors.append("name cannot start with an underscore")
    if name.strip() != name:
        result.errors.append("name cannot contain leading or trailing spaces")
    if name.lower() in BLACKLISTED_NAMES:
        result.errors.append(f"{name} is a blacklisted name")

    if name.lower() in NODE_BUILTINS:
        result.warnings.append(f"{name} is a core module name")
    if len(name) > MAX_NAME_LENGTH:
        result.warnings.append(
            f"name can no longer contain more than {MAX_NAME_LENGTH} characters"
        )
    if name.lower() != name:
        result.warnings.append("name can no longer contain capital letters")
    if _SPECIAL_CHARS_RE.search(name.split("/")[-1]):
        result.warnings.append(
            "name can no longer contain special characters (\"~'!()*\")"
        )

    if not _url_safe(name):
        match = _SCOPED_RE.match(name)
        if match and match.group(1):
            user, package = match.group(1), match.group(2)
            if _url_safe(user) and _url_safe(package):
                return result
        result.errors.append("name can only contain URL-friendly characters")

    return result


def check_app_name(app_name: str, reserved: list[str]) -> None:
    """Reject names npm would refuse or that shadow a project dependency.

    Raises:
        InvalidName: If npm would not accept *app_name* for a new package.
        NameCollision: If *app_name* equals one of *reserved*.
    """
    validation = validate_package_name(app_name)
    if not validation.valid_for_new_packages:
        raise InvalidName(app_name, validation.errors, validation.warnings)

    if app_name in reserved:
        raise NameCollision(app_name, sorted(reserved))


def conflicting_files(root: Path) -> list[str]:
    """Entries of *root* that are not known to be harmless."""
    return sorted(entry.name for entry in root.iterdir() if entry.name not in VALID_FILES)


def ensure_safe_to_create(root: Path) -> None:
    """Raise :class:`UnsafeDirectory` unless *root* can become the project directory.

    A missing *root* is fine.  An existing non-directory, or a directory holding
    anything outside :data:`VALID_FILES`, is not.
    """
    if not root.exists():
        return
    if not root.is_dir():
        raise UnsafeDirectory(root, [])
    conflicts = conflicting_files(root)
    if conflicts:
        raise UnsafeDirectory(root, conflicts)
