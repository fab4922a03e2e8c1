"""Serialises an annotated module back to source text."""

from __future__ import annotations

from typing import Iterator, List, Tuple

from ..models import (
    Attribute,
    ElementNode,
    Expression,
    Identifier,
    Opaque,
    RenderFunction,
    SourceModule,
    SpreadAttribute,
    Text,
)

Edit = Tuple[int, int, str]


def render_module(module: SourceModule) -> str:
    """Return the module source with every pending edit applied.

    Untouched regions are copied byte for byte, so formatting and comments
    survive and a module without changes renders to its original text.
    """
    output = module.source
    # Applied back to front; edits sharing an offset keep their collection order.
    ordered = sorted(
        enumerate(collect_edits(module)),
        key=lambda item: (item[1][0], item[1][1], item[0]),
        reverse=True,
    )
    for _, (start, end, text) in ordered:
        output = output[:start] + text.encode("utf-8") + output[end:]
    return output.decode("utf-8")


def collect_edits(module: SourceModule) -> List[Edit]:
    edits: List[Edit] = []
    for element in module.elements:
        edits.extend(_element_edits(element))
    for call in module.calls:
        if isinstance(call.argument, RenderFunction) and call.argument_span is not None:
            start, end = call.argument_span
            edits.append((start, end, render_expression(call.argument)))
    return edits


def _element_edits(element: ElementNode) -> Iterator[Edit]:
    if element.insert_at is None:
        return
    inserted: List[str] = []
    for attribute in element.attributes:
        if not isinstance(attribute, Attribute) or not attribute.changed:
            continue
        if attribute.is_new:
            inserted.append(" " + render_attribute(attribute))
        elif attribute.value_span is not None:
            start, end = attribute.value_span
            yield (start, end, _quote(attribute.value))
        elif attribute.name_end is not None:
            yield (attribute.name_end, attribute.name_end, "=" + _quote(attribute.value))
    if inserted:
        yield (element.insert_at, element.insert_at, "".join(inserted))


def render_attribute(attribute: Attribute | SpreadAttribute) -> str:
    if isinstance(attribute, SpreadAttribute):
        return "{..." + attribute.expression + "}"
    if attribute.value is None:
        return attribute.name
    return f"{attribute.name}={_quote(attribute.value)}"


def render_element(element: ElementNode) -> str:
    """Render an element built in memory (no source offsets)."""
    tag = element.tag or ""
    attributes = "".join(" " + render_attribute(attribute) for attribute in element.attributes)
    if element.self_closing and not element.children:
        return f"<{tag}{attributes} />"
    children = "".join(render_expression(child, nested=True) for child in element.children)
    return f"<{tag}{attributes}>{children}</{tag}>"


def render_expression(expression: Expression, *, nested: bool = False) -> str:
    if isinstance(expression, ElementNode):
        return render_element(expression)
    if isinstance(expression, RenderFunction):
        return f"({expression.parameter}) => {render_element(expression.body)}"
    if isinstance(expression, Text):
        return expression.text
    if isinstance(expression, (Identifier, Opaque)):
        text = expression.name if isinstance(expression, Identifier) else expression.text
        return "{" + text + "}" if nested else text
    raise TypeError(f"Cannot render {type(expression).__name__} without source text")


def _quote(value: str | None) -> str:
    return '"' + (value or "").replace('"', "&quot;") + '"'


__all__ = ["collect_edits", "render_element", "render_expression", "render_module"]
