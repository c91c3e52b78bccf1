"""Central configuration and constants for ``clovercov``."""

from __future__ import annotations

from dataclasses import dataclass

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

# Environment variables consulted (in order) for the workspace prefix.
WORKSPACE_ENVVARS = ("CLOVERCOV_DIR_PREFIX", "GITHUB_WORKSPACE")


@dataclass(frozen=True, slots=True)
class CoreConfig:
    """Options threaded explicitly into ingestion and attribution.

    workspace:
        Absolute checkout prefix recorded in report paths. It is stripped from
        every file path so folder keys are relative and comparable across
        checkouts. ``None`` or ``""`` disables stripping.
    """

    workspace: str | None = None

    @property
    def prefix(self) -> str:
        if not self.workspace:
            return ""
        return self.workspace if self.workspace.endswith("/") else f"{self.workspace}/"

    def strip(self, path: str) -> str:
        """Return *path* with the workspace prefix removed when it starts with it."""
        prefix = self.prefix
        if prefix and path.startswith(prefix):
            return path[len(prefix) :]
        return path


DEFAULT_CONFIG = CoreConfig()


__all__ = ["DEFAULT_CONFIG", "LOG_FORMAT", "WORKSPACE_ENVVARS", "CoreConfig"]
