"""Tests for jsxmark.engine.tags."""

from __future__ import annotations

import pytest

from jsxmark.engine.tags import FrameworkBindings, TagKind, classify_tag
from jsxmark.models import ImportBinding


@pytest.mark.parametrize(
    ("tag", "kind"),
    [
        (None, TagKind.ANONYMOUS_FRAGMENT),
        ("Fragment", TagKind.NAMED_FRAGMENT),
        ("React.Fragment", TagKind.NAMED_FRAGMENT),
        ("div", TagKind.MARKUP),
        ("svg:rect", TagKind.MARKUP),
        ("Card", TagKind.COMPONENT),
        ("_Icon", TagKind.COMPONENT),
        ("$Tag", TagKind.COMPONENT),
        ("Tab.List", TagKind.COMPONENT_PATH),
        ("Components.UI.Card.Header", TagKind.COMPONENT_PATH),
    ],
)
def test_classify_tag_defaults(tag: str | None, kind: TagKind) -> None:
    assert classify_tag(tag).kind is kind


def test_component_path_keeps_full_dotted_name() -> None:
    result = classify_tag("Components.UI.Card.Header")
    assert result.name == "Components.UI.Card.Header"
    assert result.is_component
    assert not result.is_fragment


def test_fragment_aliases_resolve_through_imports() -> None:
    bindings = FrameworkBindings.from_imports(
        [
            ImportBinding(local="R", imported="default", source="react"),
            ImportBinding(local="Frag", imported="Fragment", source="react"),
            ImportBinding(local="NS", imported="*", source="react"),
        ]
    )

    assert classify_tag("Frag", bindings).kind is TagKind.NAMED_FRAGMENT
    assert classify_tag("R.Fragment", bindings).kind is TagKind.NAMED_FRAGMENT
    assert classify_tag("NS.Fragment", bindings).kind is TagKind.NAMED_FRAGMENT
    assert classify_tag("React.Fragment", bindings).kind is TagKind.NAMED_FRAGMENT


def test_fragment_member_of_other_namespace_is_a_component() -> None:
    bindings = FrameworkBindings.from_imports(
        [ImportBinding(local="UI", imported="default", source="my-ui-library")]
    )

    result = classify_tag("UI.Fragment", bindings)

    assert result.kind is TagKind.COMPONENT_PATH
    assert result.name == "UI.Fragment"


def test_component_bases_accept_aliases_and_namespaces() -> None:
    bindings = FrameworkBindings.from_imports(
        [
            ImportBinding(local="Base", imported="Component", source="react"),
            ImportBinding(local="R", imported="default", source="react"),
        ]
    )

    assert bindings.is_component_base("Component")
    assert bindings.is_component_base("PureComponent")
    assert bindings.is_component_base("Base")
    assert bindings.is_component_base("R.Component")
    assert bindings.is_component_base("React.PureComponent")
    assert not bindings.is_component_base("Base.Component")
    assert not bindings.is_component_base("Error")
    assert not bindings.is_component_base(None)
