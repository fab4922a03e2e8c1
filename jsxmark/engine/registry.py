"""Component discovery over a module's top-level definitions."""

from __future__ import annotations

from typing import AbstractSet, Dict, Iterable, Iterator, List, Optional

from ..logging import get_logger
from ..models import (
    ClassDefinition,
    ComponentEntry,
    ComponentKind,
    Conditional,
    Definition,
    DefinitionForm,
    ElementNode,
    Expression,
    FunctionDefinition,
    Logical,
    MappedList,
    SourceModule,
)
from .tags import FrameworkBindings, is_component_name

logger = get_logger("engine.registry")

_FORM_KINDS = {
    DefinitionForm.FUNCTION_DECLARATION: ComponentKind.FUNCTION,
    DefinitionForm.FUNCTION_EXPRESSION: ComponentKind.FUNCTION,
    DefinitionForm.ARROW_FUNCTION: ComponentKind.ARROW,
}


def yields_elements(expression: Expression) -> bool:
    """Return True when the expression can evaluate to element output."""
    if isinstance(expression, ElementNode):
        return True
    if isinstance(expression, Conditional):
        return any(yields_elements(branch) for branch in expression.branches)
    if isinstance(expression, Logical):
        return any(yields_elements(operand) for operand in expression.operands)
    if isinstance(expression, MappedList):
        return any(yields_elements(render) for render in expression.renders)
    return False


def _returns_elements(returns: Optional[Iterable[Expression]]) -> bool:
    if not returns:
        return False
    return any(yields_elements(value) for value in returns)


class ComponentRegistry:
    """Components of a single module in definition order.

    Every definition is kept for walking; a redefined name resolves to the last
    definition on lookup.
    """

    def __init__(self, entries: Iterable[ComponentEntry] = ()) -> None:
        self._entries: List[ComponentEntry] = []
        self._by_name: Dict[str, ComponentEntry] = {}
        for entry in entries:
            if entry.name in self._by_name:
                logger.debug("Component %s is defined more than once; lookups use the last", entry.name)
            self._entries.append(entry)
            self._by_name[entry.name] = entry

    @classmethod
    def scan(
        cls,
        module: SourceModule,
        ignored_names: AbstractSet[str] = frozenset(),
        bindings: Optional[FrameworkBindings] = None,
    ) -> "ComponentRegistry":
        bindings = bindings or FrameworkBindings.from_imports(module.imports)
        entries: List[ComponentEntry] = []
        for definition in module.definitions:
            entry = _entry_for(definition, bindings)
            if entry is None:
                continue
            if entry.name in ignored_names:
                logger.debug("Component %s is ignored", entry.name)
                entry = ComponentEntry(entry.name, entry.kind, entry.node, eligible=False)
            entries.append(entry)
        return cls(entries)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ComponentEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, name: str) -> Optional[ComponentEntry]:
        return self._by_name.get(name)

    def eligible(self) -> List[ComponentEntry]:
        return [entry for entry in self._entries if entry.eligible]


def _entry_for(definition: Definition, bindings: FrameworkBindings) -> Optional[ComponentEntry]:
    if isinstance(definition, FunctionDefinition):
        if not is_component_name(definition.name):
            return None
        if not _returns_elements(definition.returns):
            return None
        return ComponentEntry(definition.name, _FORM_KINDS[definition.form], definition)
    if isinstance(definition, ClassDefinition):
        if not bindings.is_component_base(definition.superclass):
            return None
        if not _returns_elements(definition.render_returns):
            return None
        return ComponentEntry(definition.name, ComponentKind.CLASS, definition)
    return None


def render_roots(entry: ComponentEntry) -> List[Expression]:
    """Return the expressions a component hands back from its render body."""
    node = entry.node
    if isinstance(node, ClassDefinition):
        return list(node.render_returns or [])
    return list(node.returns)


__all__ = ["ComponentRegistry", "render_roots", "yields_elements"]
