"""Idempotent attribute injection on element nodes."""

from __future__ import annotations

from ..models import Attribute, ElementNode


def set_attribute(element: ElementNode, key: str, value: str) -> None:
    """Set ``key`` to ``value`` on ``element``.

    An existing attribute with the same name keeps its position and only has
    its value replaced. New attributes go after every existing entry, spreads
    included, so they win under JSX last-write-wins semantics.
    """
    existing = element.get_attribute(key)
    if existing is not None:
        existing.value = value
        return
    element.attributes.append(Attribute(name=key, value=value))


__all__ = ["set_attribute"]
