"""Annotation engine: registry, walker and wrapper rewriting over a parsed module."""

from __future__ import annotations

from typing import Sequence

from ..logging import get_logger
from ..models import AnnotationReport, SourceContext, SourceModule
from .attributes import set_attribute
from .registry import ComponentRegistry
from .tags import FrameworkBindings, TagClass, TagKind, classify_tag
from .walker import AnnotationWalker, Position
from .wrappers import DEFAULT_STYLED_MODULES, WrapperRewriter, wrapper_names

logger = get_logger("engine")


def annotate_module(
    module: SourceModule,
    context: SourceContext,
    *,
    rewrite_styled: bool = True,
    styled_modules: Sequence[str] = DEFAULT_STYLED_MODULES,
) -> AnnotationReport:
    """Annotate every eligible component of ``module`` in place."""
    bindings = FrameworkBindings.from_imports(module.imports)
    registry = ComponentRegistry.scan(module, context.ignored_names, bindings)
    logger.debug(
        "%s: %d component(s) found, %d eligible",
        context.file_id,
        len(registry),
        len(registry.eligible()),
    )

    walker = AnnotationWalker(context, bindings)
    for entry in registry:
        walker.walk(entry)

    rewritten = 0
    if rewrite_styled:
        rewriter = WrapperRewriter(context, registry, wrapper_names(module.imports, styled_modules))
        rewriter.rewrite(module.calls)
        rewritten = rewriter.rewritten

    return AnnotationReport(
        file_id=context.file_id,
        components=list(registry),
        annotated_elements=walker.annotated,
        rewritten_wrappers=rewritten,
    )


__all__ = [
    "AnnotationWalker",
    "ComponentRegistry",
    "FrameworkBindings",
    "Position",
    "TagClass",
    "TagKind",
    "WrapperRewriter",
    "annotate_module",
    "classify_tag",
    "set_attribute",
    "wrapper_names",
]
