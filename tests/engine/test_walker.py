"""Tests for jsxmark.engine.walker."""

from __future__ import annotations

import copy

from jsxmark.engine.registry import ComponentRegistry
from jsxmark.engine.tags import FrameworkBindings
from jsxmark.engine.walker import AnnotationWalker
from jsxmark.models import (
    AttributeNames,
    Conditional,
    ImportBinding,
    Logical,
    MappedList,
    Opaque,
    SourceContext,
    SourceModule,
)
from tests._fixtures.elements import arrow, attrs, el, fragment, func, text

CONTEXT = SourceContext(file_id="test.jsx")


def _root(name: str) -> dict:
    return {"data-component": name, "data-source-file": "test.jsx"}


def _nested(name: str) -> dict:
    return {"data-element": name, "data-source-file": "test.jsx"}


def _annotate(*definitions, context=CONTEXT, imports=()) -> AnnotationWalker:  # type: ignore[no-untyped-def]
    module = SourceModule(definitions=list(definitions), imports=list(imports))
    bindings = FrameworkBindings.from_imports(module.imports)
    registry = ComponentRegistry.scan(module, context.ignored_names, bindings)
    walker = AnnotationWalker(context, bindings)
    for entry in registry:
        walker.walk(entry)
    return walker


def test_root_markup_gets_component_identity_only() -> None:
    heading = el("h2", Opaque("t"))
    root = el("div", heading, className="card")

    _annotate(func("Card", root))

    assert attrs(root) == {"className": "card", **_root("Card")}
    assert attrs(heading) == {}


def test_anonymous_root_fragment_annotates_each_child_as_root() -> None:
    first = el("p", text("A"))
    second = el("div", text("B"))
    root = fragment(first, second)

    _annotate(arrow("Another", root))

    assert attrs(root) == {}
    assert attrs(first) == _root("Another")
    assert attrs(second) == _root("Another")


def test_named_fragment_subtree_is_never_visited() -> None:
    hidden = [el("h1", text("X")), el("Button"), el("p")]
    inner_anonymous = fragment(el("h2"), el("Card"))
    root = el(
        "div",
        el("Fragment", hidden[0]),
        el("React.Fragment", el("Fragment", hidden[1]), inner_anonymous),
        el("Fragment", Conditional([hidden[2], Opaque("null")])),
    )

    _annotate(func("EdgeCases", root))

    assert attrs(root) == _root("EdgeCases")
    for node in hidden:
        assert attrs(node) == {}
    for child in inner_anonymous.children:
        assert attrs(child) == {}  # type: ignore[arg-type]


def test_named_fragment_at_root_hides_everything() -> None:
    heading = el("h1", text("X"))
    root = el("Fragment", heading)

    _annotate(func("Wrapped", fragment(root)))

    assert attrs(root) == {}
    assert attrs(heading) == {}


def test_aliased_fragment_is_opaque() -> None:
    heading = el("h1")
    root = el("div", el("F", heading), el("R.Fragment", el("Card")))

    _annotate(
        func("Aliased", root),
        imports=[
            ImportBinding(local="F", imported="Fragment", source="react"),
            ImportBinding(local="R", imported="default", source="react"),
        ],
    )

    assert attrs(heading) == {}
    assert attrs(root.children[1].children[0]) == {}  # type: ignore[union-attr]


def test_anonymous_fragment_in_nested_position_stays_nested() -> None:
    markup = el("h3")
    component = el("Card")
    root = el("div", fragment(markup, component))

    _annotate(func("MyComponent", root))

    assert attrs(markup) == {}
    assert attrs(component) == _nested("Card")


def test_nested_component_references_get_element_identity() -> None:
    tab = el("Tab", text("Tab 1"))
    tab_list = el("Tab.List", tab)
    header = el("Components.UI.Card.Header", text("Title"))
    plain = el("section", el("span"), header)
    root = el("div", el("Tab.Group", tab_list), plain)

    _annotate(arrow("MemberExpressionComponent", root))

    assert attrs(root.children[0]) == _nested("Tab.Group")  # type: ignore[arg-type]
    assert attrs(tab_list) == _nested("Tab.List")
    assert attrs(tab) == _nested("Tab")
    assert attrs(header) == _nested("Components.UI.Card.Header")
    assert attrs(plain) == {}


def test_root_component_reference_gets_both_identities() -> None:
    root = el("Layout", el("Sidebar"))

    _annotate(func("Page", root))

    assert attrs(root) == {**_nested("Layout"), **_root("Page")}
    assert attrs(root.children[0]) == _nested("Sidebar")  # type: ignore[arg-type]


def test_ignored_component_is_left_untouched() -> None:
    child = el("Button")
    root = el("div", child)

    walker = _annotate(
        func("Ignored", root),
        context=SourceContext(file_id="test.jsx", ignored_names=frozenset({"Ignored"})),
    )

    assert attrs(root) == {}
    assert attrs(child) == {}
    assert walker.annotated == 0


def test_ignored_reference_is_skipped_but_descended_into() -> None:
    inner = el("Icon")
    ignored = el("Tooltip", inner)
    root = el("div", ignored)

    _annotate(
        func("Toolbar", root),
        context=SourceContext(file_id="test.jsx", ignored_names=frozenset({"Tooltip"})),
    )

    assert attrs(ignored) == {}
    assert attrs(inner) == _nested("Icon")


def test_conditional_returns_are_both_roots() -> None:
    loading = el("Spinner")
    ready = el("div")

    _annotate(func("Status", Conditional([loading, ready])))

    assert attrs(loading) == {**_nested("Spinner"), **_root("Status")}
    assert attrs(ready) == _root("Status")


def test_embedded_expressions_keep_their_position() -> None:
    rows = el("Row")
    conditional_markup = el("span")
    fallback = el("Empty")
    root = el(
        "ul",
        MappedList([rows]),
        Logical("&&", [Opaque("open"), conditional_markup]),
        Logical("||", [Opaque("items.length"), fallback]),
    )
    root_logical = el("p")

    _annotate(func("List", root), func("Maybe", Logical("&&", [Opaque("show"), root_logical])))

    assert attrs(rows) == _nested("Row")
    assert attrs(conditional_markup) == {}
    assert attrs(fallback) == _nested("Empty")
    assert attrs(root_logical) == _root("Maybe")


def test_multiple_returns_are_all_roots() -> None:
    early = el("Spinner")
    late = el("div")

    _annotate(func("Loader", early, late))

    assert attrs(early) == {**_nested("Spinner"), **_root("Loader")}
    assert attrs(late) == _root("Loader")


def test_walker_is_idempotent() -> None:
    root = el("div", el("Card"), fragment(el("Tab.List")))
    definition = func("Screen", root)

    _annotate(definition)
    first = copy.deepcopy(root)
    _annotate(definition)

    assert root == first
    assert attrs(root) == _root("Screen")


def test_walker_uses_configured_attribute_names() -> None:
    button = el("CustomButton")
    root = el("div", el("h1"), button)
    context = SourceContext(
        file_id="test.jsx",
        attributes=AttributeNames(
            component="data-sentry-component",
            element="data-sentry-element",
            source_file="data-sentry-source-file",
        ),
    )

    _annotate(arrow("SentryComponent", root), context=context)

    assert attrs(root) == {
        "data-sentry-component": "SentryComponent",
        "data-sentry-source-file": "test.jsx",
    }
    assert attrs(button) == {
        "data-sentry-element": "CustomButton",
        "data-sentry-source-file": "test.jsx",
    }


def test_ignored_reference_at_root_gets_component_identity_only() -> None:
    root = el("Tooltip", el("span"))

    _annotate(
        func("Hint", root),
        context=SourceContext(file_id="test.jsx", ignored_names=frozenset({"Tooltip"})),
    )

    assert attrs(root) == _root("Hint")


def test_non_lowercase_tags_are_component_references() -> None:
    icon = el("_Icon")
    tag = el("$Tag")
    root = el("div", icon, tag)

    _annotate(func("Toolbar", root))

    assert attrs(icon) == _nested("_Icon")
    assert attrs(tag) == _nested("$Tag")


def test_redefined_component_annotates_both_definitions() -> None:
    first = el("div")
    second = el("span")

    _annotate(func("Card", first), arrow("Card", second))

    assert attrs(first) == _root("Card")
    assert attrs(second) == _root("Card")
