"""Tag classification for JSX element names."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Set

from ..models import ImportBinding

_FRAMEWORK_MODULES = {"react"}
_FRAGMENT_EXPORT = "Fragment"
_COMPONENT_BASES = {"Component", "PureComponent"}


class TagKind(str, Enum):
    ANONYMOUS_FRAGMENT = "anonymous_fragment"
    NAMED_FRAGMENT = "named_fragment"
    COMPONENT = "component"
    COMPONENT_PATH = "component_path"
    MARKUP = "markup"


@dataclass(frozen=True)
class TagClass:
    """Classification result; ``name`` is the tag as written (empty for ``<>``)."""

    kind: TagKind
    name: str = ""

    @property
    def is_fragment(self) -> bool:
        return self.kind in (TagKind.ANONYMOUS_FRAGMENT, TagKind.NAMED_FRAGMENT)

    @property
    def is_component(self) -> bool:
        return self.kind in (TagKind.COMPONENT, TagKind.COMPONENT_PATH)


@dataclass
class FrameworkBindings:
    """Local names that resolve to framework identities in one file.

    ``React`` and ``Fragment`` are always known so that files relying on a
    global or automatic runtime classify the same way as files importing them.
    """

    namespaces: Set[str] = field(default_factory=lambda: {"React"})
    fragments: Set[str] = field(default_factory=lambda: {_FRAGMENT_EXPORT})
    component_bases: Set[str] = field(default_factory=lambda: set(_COMPONENT_BASES))

    @classmethod
    def from_imports(cls, imports: Iterable[ImportBinding]) -> "FrameworkBindings":
        bindings = cls()
        for binding in imports:
            if binding.source not in _FRAMEWORK_MODULES:
                continue
            if binding.imported in ("default", "*"):
                bindings.namespaces.add(binding.local)
            elif binding.imported == _FRAGMENT_EXPORT:
                bindings.fragments.add(binding.local)
            elif binding.imported in _COMPONENT_BASES:
                bindings.component_bases.add(binding.local)
        return bindings

    def is_fragment_name(self, name: str) -> bool:
        if name in self.fragments:
            return True
        namespace, _, member = name.rpartition(".")
        return member == _FRAGMENT_EXPORT and namespace in self.namespaces

    def is_component_base(self, name: Optional[str]) -> bool:
        if not name:
            return False
        if name in self.component_bases:
            return True
        namespace, _, member = name.rpartition(".")
        return member in _COMPONENT_BASES and namespace in self.namespaces


def classify_tag(tag: Optional[str], bindings: Optional[FrameworkBindings] = None) -> TagClass:
    """Classify a tag name as fragment, component reference or plain markup."""
    if tag is None or tag == "":
        return TagClass(TagKind.ANONYMOUS_FRAGMENT)
    bindings = bindings or FrameworkBindings()
    if bindings.is_fragment_name(tag):
        return TagClass(TagKind.NAMED_FRAGMENT, tag)
    if ":" in tag:
        return TagClass(TagKind.MARKUP, tag)
    if "." in tag:
        return TagClass(TagKind.COMPONENT_PATH, tag)
    # Only a lowercase initial marks an intrinsic element.
    if tag[0].islower():
        return TagClass(TagKind.MARKUP, tag)
    return TagClass(TagKind.COMPONENT, tag)


def is_component_name(name: str) -> bool:
    return bool(name) and name[0].isupper()


__all__ = ["FrameworkBindings", "TagClass", "TagKind", "classify_tag", "is_component_name"]
