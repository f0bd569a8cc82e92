"""Allow ``python -m create_divi_extension``."""

from .orchestrator import main

main()
