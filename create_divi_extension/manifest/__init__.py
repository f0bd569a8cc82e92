"""Post-install handling of ``package.json`` files.

Exposes the engines compatibility gate and the dependency rewriter.
"""

from __future__ import annotations

from .compat import check_node_version, read_engine_constraint, satisfies
from .rewriter import Manifest, fix_dependencies, is_valid_range, make_caret_range

__all__ = [
    "Manifest",
    "check_node_version",
    "fix_dependencies",
    "is_valid_range",
    "make_caret_range",
    "read_engine_constraint",
    "satisfies",
]
