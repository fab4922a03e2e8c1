"""Rewrites ``styled(Component)`` calls into self-annotating render functions."""

from __future__ import annotations

from typing import Iterable, Sequence, Set

from ..logging import get_logger
from ..models import (
    CallSite,
    ElementNode,
    Identifier,
    ImportBinding,
    RenderFunction,
    SourceContext,
    SpreadAttribute,
)
from .attributes import set_attribute
from .registry import ComponentRegistry

logger = get_logger("engine.wrappers")

DEFAULT_STYLED_MODULES = ("@emotion/styled", "styled-components")
_WRAPPER_NAME = "styled"
_PARAMETER = "props"


def wrapper_names(
    imports: Iterable[ImportBinding], modules: Sequence[str] = DEFAULT_STYLED_MODULES
) -> Set[str]:
    """Local names that refer to a styling-wrapper entry point."""
    names = {_WRAPPER_NAME}
    for binding in imports:
        if binding.source not in modules:
            continue
        if binding.imported in ("default", _WRAPPER_NAME):
            names.add(binding.local)
    return names


class WrapperRewriter:
    """Replaces the bare component argument of wrapper calls."""

    def __init__(
        self, context: SourceContext, registry: ComponentRegistry, wrappers: Set[str]
    ) -> None:
        self.context = context
        self.registry = registry
        self.wrappers = wrappers
        self.rewritten = 0

    def rewrite(self, calls: Iterable[CallSite]) -> None:
        for call in calls:
            argument = call.argument
            if not isinstance(argument, Identifier) or not self._should_rewrite(call.callee, argument.name):
                continue
            call.argument = self._render_function(argument.name)
            self.rewritten += 1
            logger.debug("Rewrote %s(%s)", call.callee, argument.name)

    def _should_rewrite(self, callee: str, name: str) -> bool:
        if callee not in self.wrappers:
            return False
        entry = self.registry.get(name)
        return entry is not None and entry.eligible

    def _render_function(self, name: str) -> RenderFunction:
        names = self.context.attributes
        element = ElementNode(tag=name, self_closing=True)
        set_attribute(element, names.element, name)
        set_attribute(element, names.source_file, self.context.file_id)
        element.attributes.append(SpreadAttribute(_PARAMETER))
        return RenderFunction(parameter=_PARAMETER, body=element)


__all__ = ["DEFAULT_STYLED_MODULES", "WrapperRewriter", "wrapper_names"]
