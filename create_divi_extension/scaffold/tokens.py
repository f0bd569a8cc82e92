"""Template token substitution for the generated extension files.

The init script copies PHP scaffold files containing ``__Prefix``-style
tokens.  A short prefix is derived from the project name (``divi-foo-bar``
gives ``foo``) and substituted into each file; two of the files are then
renamed after the project.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from pathlib import Path

from ..errors import InvalidName
from ..models import TemplateContext
from ..utils import console, print_error

SEPARATORS = ("-", "_")

MAIN_FILE = "template.php"
MODULE_FILE = "module/__Prefix_Custom.php"


def derive_prefix(app_name: str, strip_word: str = "divi", length: int = 4) -> str:
    """Derive the lower-case naming prefix from *app_name*.

    Examples::

        derive_prefix("divi-foo-extension") -> "foo"
        derive_prefix("Divi_Shop")          -> "shop"
        derive_prefix("my-module")          -> "my-m"
    """
    prefix = re.sub(rf"^{re.escape(strip_word)}", "", app_name, flags=re.IGNORECASE)
    if prefix[:1] in SEPARATORS:
        prefix = prefix[1:]
    prefix = prefix[:length].lower()
    if prefix[-1:] in SEPARATORS:
        prefix = prefix[:-1]
    return prefix


def derive_template_context(
    app_name: str, strip_word: str = "divi", length: int = 4
) -> TemplateContext:
    """Build the ``prefix``/``PREFIX``/``Prefix`` tokens for *app_name*.

    Raises:
        InvalidName: If no usable prefix remains, e.g. for ``divi`` or ``divi-``.
    """
    prefix = derive_prefix(app_name, strip_word=strip_word, length=length)
    if not prefix or prefix[0] in SEPARATORS:
        raise InvalidName(
            app_name,
            errors=[f"name must contain at least one character after the leading {strip_word!r}"],
        )

    upper = prefix.upper()
    return TemplateContext(
        prefix=prefix,
        PREFIX=upper,
        Prefix=upper[0] + prefix[1:],
        app_name=app_name,
    )


def substitute(text: str, context: TemplateContext) -> str:
    """Replace every token in *text*, in the order the tokens are defined."""
    for token, value in context.replacements():
        text = text.replace(token, value)
    return text


def renamed_path(relative: str, path: Path, context: TemplateContext) -> Path | None:
    """Return the final location of a scaffold file, or ``None`` if it keeps its name."""
    if relative == MAIN_FILE:
        return path.with_name(path.name.replace("template", path.parent.name, 1))
    if relative == MODULE_FILE:
        return path.with_name(path.name.replace("__Prefix", context.Prefix))
    return None


async def _move(source: Path, target: Path) -> bool:
    try:
        await asyncio.to_thread(shutil.move, str(source), str(target))
    except OSError as exc:
        print_error(f"Could not rename {source.name} to {target.name}: {exc}")
        return False
    return True


async def finalize_extension_files(
    root: Path, context: TemplateContext, files: list[str]
) -> list[Path]:
    """Substitute tokens in *files* (relative to *root*) and apply the renames.

    Read or write errors propagate.  A failed rename is reported and the
    file is left under its template name.

    Returns:
        The final paths of all processed files.
    """
    console.print(f"prefix is: [cyan]{context.prefix}[/cyan]")

    final_paths: list[Path] = []
    for relative in files:
        path = root / relative
        data = await asyncio.to_thread(path.read_text, "utf-8")
        await asyncio.to_thread(path.write_text, substitute(data, context), "utf-8")

        target = renamed_path(relative, path, context)
        if target is not None and target != path and await _move(path, target):
            final_paths.append(target)
        else:
            final_paths.append(path)

    return final_paths
