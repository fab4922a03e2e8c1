"""Annotation walk over a component's returned element tree."""

from __future__ import annotations

from enum import Enum

from ..models import (
    ComponentEntry,
    Conditional,
    ElementNode,
    Expression,
    Logical,
    MappedList,
    SourceContext,
)
from .attributes import set_attribute
from .registry import render_roots
from .tags import FrameworkBindings, TagKind, classify_tag


class Position(str, Enum):
    ROOT = "root"
    NESTED = "nested"


class AnnotationWalker:
    """Attaches provenance attributes to the elements a component renders.

    Root elements get the component identity. Component references, at the
    root or nested, also get their own element identity; plain nested markup
    is left alone. Named
    fragments hide their whole subtree; anonymous fragments pass their position
    on to each child.
    """

    def __init__(self, context: SourceContext, bindings: FrameworkBindings) -> None:
        self.context = context
        self.bindings = bindings
        self.annotated = 0

    def walk(self, entry: ComponentEntry) -> None:
        if not entry.eligible:
            return
        for root in render_roots(entry):
            self._visit(root, Position.ROOT, entry.name)

    def _visit(self, node: Expression, position: Position, component: str) -> None:
        if isinstance(node, ElementNode):
            self._visit_element(node, position, component)
        elif isinstance(node, Conditional):
            for branch in node.branches:
                self._visit(branch, position, component)
        elif isinstance(node, Logical):
            for operand in node.operands:
                self._visit(operand, position, component)
        elif isinstance(node, MappedList):
            for render in node.renders:
                self._visit(render, position, component)

    def _visit_element(self, element: ElementNode, position: Position, component: str) -> None:
        tag = classify_tag(element.tag, self.bindings)
        if tag.kind is TagKind.NAMED_FRAGMENT:
            return
        if tag.kind is TagKind.ANONYMOUS_FRAGMENT:
            self._visit_children(element, position, component)
            return

        names = self.context.attributes
        reference = tag.is_component and tag.name not in self.context.ignored_names
        if position is Position.ROOT:
            if reference and names.element != names.component:
                set_attribute(element, names.element, tag.name)
            set_attribute(element, names.component, component)
            set_attribute(element, names.source_file, self.context.file_id)
            self.annotated += 1
        elif reference:
            set_attribute(element, names.element, tag.name)
            set_attribute(element, names.source_file, self.context.file_id)
            self.annotated += 1
        self._visit_children(element, Position.NESTED, component)

    def _visit_children(self, element: ElementNode, position: Position, component: str) -> None:
        for child in element.children:
            self._visit(child, position, component)


__all__ = ["AnnotationWalker", "Position"]
