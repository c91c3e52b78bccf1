from pathlib import Path

from clovercov._meta import logger


def read_text(path: Path) -> str:
    """Read a report or change-set file as UTF-8 text."""
    logger.debug("reading %s", path)
    return path.read_text(encoding="utf-8")


def write_output(text: str, destination: Path | None) -> None:
    """Write output to stdout or a file (PATH or '-' for stdout)."""
    if destination is None or destination == Path("-"):
        print(text)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")
