from __future__ import annotations

import logging
from importlib.metadata import version

__version__ = version("clovercov")

logger = logging.getLogger("clovercov")

__all__ = ["__version__", "logger"]
