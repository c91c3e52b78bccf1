"""
Change-set documents.

*A change-set is a JSON array naming the files touched by a pull request,
optionally with the touched lines.* Both shapes below are accepted::

    [{"file": "src/a.ts", "lines": [3, "10-14"]}, {"file": "src/b.ts"}]
    ["src/a.ts", "src/b.ts"]
"""

from __future__ import annotations

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from clovercov.core.changeset import TouchedFile, parse_line_spec, parse_unified_diff
from clovercov.errors import ConfigurationError

# --------------------------------------------------------------------------- #
# Models                                                                      #
# --------------------------------------------------------------------------- #


class ChangedFile(BaseModel):
    file: str = Field(min_length=1)
    lines: list[int | str] | None = None

    @field_validator("lines")
    @classmethod
    def _lines_are_ranges(cls, v: list[int | str] | None) -> list[int | str] | None:
        if v is not None:
            for item in v:
                parse_line_spec(item)
        return v

    def to_touched(self) -> TouchedFile:
        return TouchedFile.from_specs(self.file, self.lines)


_CHANGESET = TypeAdapter(list[ChangedFile | str])


def load_changes(text: str) -> list[TouchedFile]:
    """Validate a JSON change-set document into :class:`TouchedFile` entries."""
    try:
        entries = _CHANGESET.validate_json(text)
    except ValidationError as exc:
        msg = f"invalid change-set document: {exc}"
        raise ConfigurationError(msg) from exc
    return [TouchedFile(file=e) if isinstance(e, str) else e.to_touched() for e in entries]


def load_diff(text: str) -> list[TouchedFile]:
    """Read touched files and lines from a unified diff."""
    return parse_unified_diff(text)


__all__ = ["ChangedFile", "load_changes", "load_diff"]
