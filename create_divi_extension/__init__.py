"""create-divi-extension: bootstrap a new Divi extension project.

The :class:`~create_divi_extension.orchestrator.Bootstrapper` installs the
scripts package through yarn or npm, rewrites ``package.json``, runs the
package's init script and finalises the PHP scaffold, rolling back the
generated files if any of that fails.
"""

from .config import Config
from .models import ProjectRequest
from .orchestrator import Bootstrapper, main

__version__ = "1.0.0"

__all__ = ["Bootstrapper", "Config", "ProjectRequest", "main"]
