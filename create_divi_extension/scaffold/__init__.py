"""Project name checks and scaffold file finalisation.

Quick usage::

    from create_divi_extension.scaffold import derive_template_context, finalize_extension_files

    context = derive_template_context("divi-foo-extension")
    await finalize_extension_files(root, context, config.scaffold_files)
"""

from .tokens import (
    derive_prefix,
    derive_template_context,
    finalize_extension_files,
    renamed_path,
    substitute,
)
from .validation import (
    NameValidation,
    check_app_name,
    conflicting_files,
    ensure_safe_to_create,
    validate_package_name,
)

__all__ = [
    "NameValidation",
    "check_app_name",
    "conflicting_files",
    "derive_prefix",
    "derive_template_context",
    "ensure_safe_to_create",
    "finalize_extension_files",
    "renamed_path",
    "substitute",
    "validate_package_name",
]
