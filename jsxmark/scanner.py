"""Source discovery for annotation runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .frontend.tree_sitter import dialect_for_path
from .logging import get_logger

logger = get_logger("scanner")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".next",
    ".turbo",
    "dist",
    "build",
    "coverage",
}

# (directory relative to the scan root, rules declared there)
Scope = Tuple[str, Sequence["IgnoreRule"]]


@dataclass(frozen=True)
class IgnoreRule:
    """A gitignore-style pattern, relative to the directory that declared it.

    Patterns containing a slash match the whole relative path; the others match
    the final path segment only. Ignored directories are pruned during the walk
    so their contents never need to be matched.
    """

    pattern: str
    negate: bool = False
    directory_only: bool = False
    rooted: bool = False

    @classmethod
    def parse(cls, line: str) -> Optional["IgnoreRule"]:
        text = line.strip()
        if not text or text.startswith("#"):
            return None
        negate = text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        text = text.rstrip("/")
        rooted = "/" in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(pattern=text, negate=negate, directory_only=directory_only, rooted=rooted)

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.rooted:
            return fnmatchcase(rel_path, self.pattern)
        return fnmatchcase(rel_path.rsplit("/", 1)[-1], self.pattern)


def _load_gitignore(directory: Path) -> List[IgnoreRule]:
    path = directory / ".gitignore"
    if not path.is_file():
        return []
    parsed = (IgnoreRule.parse(line) for line in path.read_text(encoding="utf-8").splitlines())
    return [rule for rule in parsed if rule is not None]


def _gitignored(rel_path: str, is_dir: bool, scopes: Sequence[Scope]) -> bool:
    ignored = False
    for base, rules in scopes:
        if base and not rel_path.startswith(base + "/"):
            continue
        local = rel_path[len(base) + 1 :] if base else rel_path
        for rule in rules:
            if rule.matches(local, is_dir):
                ignored = not rule.negate
    return ignored


class SourceScanner:
    """Finds JSX/TSX sources below a directory.

    Every ``.gitignore`` met on the way down applies to its own subtree, and the
    configured ``exclude_paths`` patterns apply relative to the scan root.
    """

    def __init__(self, exclude_paths: Iterable[str] = ()) -> None:
        parsed = (IgnoreRule.parse(pattern) for pattern in exclude_paths)
        self._excludes = [rule for rule in parsed if rule is not None and not rule.negate]

    def scan(self, target: Path) -> List[Path]:
        """Return annotatable files under ``target`` (or ``target`` itself)."""
        target = target.expanduser()
        if not target.exists():
            raise FileNotFoundError(f"Path not found: {target}")
        if target.is_file():
            return [target] if dialect_for_path(target) else []
        return sorted(self._iter_files(target))

    def _skip(self, rel_path: str, is_dir: bool, scopes: Sequence[Scope]) -> bool:
        if any(rule.matches(rel_path, is_dir) for rule in self._excludes):
            return True
        return _gitignored(rel_path, is_dir, scopes)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        scopes_by_dir: Dict[str, List[Scope]] = {}
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = current.relative_to(root).as_posix() if current != root else ""

            parent = rel_dir.rpartition("/")[0] if rel_dir else None
            scopes = list(scopes_by_dir.get(parent, [])) if parent is not None else []
            rules = _load_gitignore(current)
            if rules:
                scopes.append((rel_dir, rules))
            scopes_by_dir[rel_dir] = scopes

            kept = []
            for name in sorted(dirnames):
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if name in _EXCLUDED_DIRS or self._skip(rel_path, True, scopes):
                    logger.debug("Pruned %s", rel_path)
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in filenames:
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if dialect_for_path(filename) is None:
                    continue
                if self._skip(rel_path, False, scopes):
                    continue
                yield current / filename


__all__ = ["IgnoreRule", "SourceScanner"]
