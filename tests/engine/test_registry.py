"""Tests for jsxmark.engine.registry."""

from __future__ import annotations

from jsxmark.engine.registry import ComponentRegistry, yields_elements
from jsxmark.models import (
    ComponentKind,
    Conditional,
    DefinitionForm,
    ImportBinding,
    Logical,
    MappedList,
    Opaque,
    SourceModule,
)
from tests._fixtures.elements import arrow, el, func, klass


def _scan(*definitions, ignored=frozenset(), imports=()):  # type: ignore[no-untyped-def]
    module = SourceModule(definitions=list(definitions), imports=list(imports))
    return ComponentRegistry.scan(module, ignored)


def test_registry_records_each_definition_kind() -> None:
    registry = _scan(
        func("Card", el("div")),
        arrow("Badge", el("span")),
        func("Panel", el("section"), form=DefinitionForm.FUNCTION_EXPRESSION),
        klass("Page", "React.Component", el("main")),
    )

    kinds = {entry.name: entry.kind for entry in registry}
    assert kinds == {
        "Card": ComponentKind.FUNCTION,
        "Badge": ComponentKind.ARROW,
        "Panel": ComponentKind.FUNCTION,
        "Page": ComponentKind.CLASS,
    }
    assert all(entry.eligible for entry in registry)


def test_registry_skips_lowercase_and_non_element_definitions() -> None:
    registry = _scan(
        func("helper", el("div")),
        arrow("Compute", Opaque("1 + 2")),
        func("Empty"),
        klass("Store", "EventEmitter", el("div")),
        klass("NoRender", "Component"),
    )

    assert len(registry) == 0


def test_registry_marks_ignored_names_non_eligible() -> None:
    registry = _scan(func("Ignored", el("div")), func("Kept", el("div")), ignored={"Ignored"})

    ignored = registry.get("Ignored")
    assert ignored is not None and ignored.eligible is False
    assert [entry.name for entry in registry.eligible()] == ["Kept"]
    assert "Ignored" in registry


def test_registry_resolves_aliased_component_base() -> None:
    registry = _scan(
        klass("Widget", "Base", el("div")),
        imports=[ImportBinding(local="Base", imported="PureComponent", source="react")],
    )

    entry = registry.get("Widget")
    assert entry is not None
    assert entry.kind is ComponentKind.CLASS


def test_yields_elements_looks_through_embedded_expressions() -> None:
    assert yields_elements(Conditional([Opaque("null"), el("div")]))
    assert yields_elements(Logical("&&", [Opaque("ok"), el("div")]))
    assert yields_elements(MappedList([el("li")]))
    assert not yields_elements(Logical("||", [Opaque("a"), Opaque("b")]))
    assert not yields_elements(Opaque("null"))


def test_redefined_name_keeps_every_definition_for_walking() -> None:
    first = func("Card", el("div"))
    second = arrow("Card", el("span"))

    registry = _scan(first, second)

    assert len(registry) == 2
    assert [entry.node for entry in registry] == [first, second]
    assert registry.get("Card").node is second  # type: ignore[union-attr]
    assert "Card" in registry
