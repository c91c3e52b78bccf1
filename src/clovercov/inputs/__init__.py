"""Report and change-set readers."""

from .changes import load_changes
from .clover import ingest

__all__ = ["ingest", "load_changes"]
