"""File identifiers used as the source-file attribute value."""

from __future__ import annotations

from pathlib import Path
from typing import Union


def file_identifier(path: Union[str, Path]) -> str:
    """Return the short identifier for ``path``.

    Plain files are identified by their basename. ``index.*`` files are not
    distinctive on their own, so the parent directory is prefixed, always joined
    with a forward slash. Both ``/`` and ``\\`` separators are accepted.
    """
    raw = path.as_posix() if isinstance(path, Path) else path
    separator = "\\" if "\\" in raw else "/"
    parts = [part for part in raw.split(separator) if part]
    if not parts:
        return raw
    name = parts[-1]
    if name.startswith("index.") and len(parts) >= 2:
        return f"{parts[-2]}/{name}"
    return name


__all__ = ["file_identifier"]
