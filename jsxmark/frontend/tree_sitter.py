"""Tree-sitter powered JSX frontend."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_language

from ..logging import get_logger
from ..models import (
    Attribute,
    CallSite,
    ClassDefinition,
    Conditional,
    DefinitionForm,
    ElementNode,
    Expression,
    FunctionDefinition,
    Identifier,
    ImportBinding,
    Logical,
    MappedList,
    Opaque,
    SourceModule,
    SpreadAttribute,
    Text,
)

logger = get_logger("frontend")

_DIALECT_BY_SUFFIX = {
    ".jsx": "javascript",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".tsx": "tsx",
}

_FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
    "method_definition",
}
_FUNCTION_VALUE_FORMS = {
    "arrow_function": DefinitionForm.ARROW_FUNCTION,
    "function_expression": DefinitionForm.FUNCTION_EXPRESSION,
    "function": DefinitionForm.FUNCTION_EXPRESSION,
}
_CLASS_TYPES = {"class_declaration", "abstract_class_declaration", "class"}
_ELEMENT_TYPES = {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}
_NAME_TYPES = {"identifier", "member_expression", "nested_identifier", "jsx_namespace_name"}
_SUPERCLASS_TYPES = {"identifier", "member_expression", "nested_identifier"}
_TS_WRAPPER_TYPES = {"as_expression", "satisfies_expression", "non_null_expression"}
_LOGICAL_OPERATORS = {"&&", "||", "??"}
_MAP_METHODS = {"map", "flatMap"}


class SourceParseError(RuntimeError):
    """Raised when tree-sitter reports syntax errors in a source file."""


class UnsupportedSourceError(RuntimeError):
    """Raised when no JSX grammar is known for a file."""


def dialect_for_path(path: Union[str, Path]) -> Optional[str]:
    """Return the grammar name used for ``path`` or ``None`` when unsupported."""
    return _DIALECT_BY_SUFFIX.get(Path(path).suffix.lower())


class JsxFrontend:
    """Parses JSX/TSX into the element model consumed by the engine."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    def parse(self, source: Union[str, bytes], *, dialect: str = "javascript") -> SourceModule:
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._get_parser(dialect).parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            line = _first_error_line(root)
            raise SourceParseError(f"Syntax error near line {line}")
        return _Lowering(source_bytes, dialect).lower(root)

    def parse_file(self, path: Path) -> SourceModule:
        dialect = dialect_for_path(path)
        if dialect is None:
            raise UnsupportedSourceError(f"No JSX grammar for {path.name}")
        return self.parse(path.read_bytes(), dialect=dialect)

    def _get_parser(self, dialect: str) -> Parser:
        parser = self._parsers.get(dialect)
        if parser is not None:
            return parser
        parser = Parser(get_language(dialect))
        self._parsers[dialect] = parser
        logger.debug("Loaded %s grammar", dialect)
        return parser


class _Lowering:
    """Single-use translation of one syntax tree into a ``SourceModule``."""

    def __init__(self, source: bytes, dialect: str) -> None:
        self.source = source
        self.module = SourceModule(source=source, dialect=dialect)

    def lower(self, root: Node) -> SourceModule:
        for child in _named(root):
            self._lower_statement(child)
        for call in _iter_type(root, "call_expression"):
            site = self._call_site(call)
            if site is not None:
                self.module.calls.append(site)
        return self.module

    def _text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    # statements -----------------------------------------------------------

    def _lower_statement(self, node: Node) -> None:
        kind = node.type
        if kind == "import_statement":
            self._lower_import(node)
        elif kind == "export_statement":
            declaration = node.child_by_field_name("declaration") or node.child_by_field_name("value")
            if declaration is not None:
                self._lower_statement(declaration)
        elif kind in ("function_declaration", "function_expression", "function"):
            name = node.child_by_field_name("name")
            if name is not None:
                self.module.definitions.append(
                    FunctionDefinition(
                        name=self._text(name),
                        form=DefinitionForm.FUNCTION_DECLARATION,
                        returns=self._function_returns(node),
                    )
                )
        elif kind in _CLASS_TYPES:
            self._lower_class(node)
        elif kind in ("lexical_declaration", "variable_declaration"):
            for declarator in _named(node):
                if declarator.type == "variable_declarator":
                    self._lower_declarator(declarator)

    def _lower_import(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        source = self._text(source_node)[1:-1]
        clause = _first_of_type(node, "import_clause")
        if clause is None:
            return
        for part in _named(clause):
            if part.type == "identifier":
                self._add_import(self._text(part), "default", source)
            elif part.type == "namespace_import":
                local = _first_of_type(part, "identifier")
                if local is not None:
                    self._add_import(self._text(local), "*", source)
            elif part.type == "named_imports":
                for specifier in _named(part):
                    if specifier.type != "import_specifier":
                        continue
                    name = specifier.child_by_field_name("name")
                    alias = specifier.child_by_field_name("alias")
                    if name is None:
                        continue
                    imported = self._text(name).strip("'\"")
                    local = self._text(alias) if alias is not None else imported
                    self._add_import(local, imported, source)

    def _add_import(self, local: str, imported: str, source: str) -> None:
        self.module.imports.append(ImportBinding(local=local, imported=imported, source=source))

    def _lower_declarator(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        value = node.child_by_field_name("value")
        if name is None or value is None or name.type != "identifier":
            return
        form = _FUNCTION_VALUE_FORMS.get(value.type)
        if form is None:
            return
        self.module.definitions.append(
            FunctionDefinition(
                name=self._text(name), form=form, returns=self._function_returns(value)
            )
        )

    def _lower_class(self, node: Node) -> None:
        name = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name is None or body is None:
            return
        heritage = _first_of_type(node, "class_heritage")
        superclass = self._superclass(heritage) if heritage is not None else None
        render_returns: Optional[List[Expression]] = None
        for member in _named(body):
            function = self._render_member(member)
            if function is not None:
                render_returns = self._function_returns(function)
        self.module.definitions.append(
            ClassDefinition(name=self._text(name), superclass=superclass, render_returns=render_returns)
        )

    def _render_member(self, member: Node) -> Optional[Node]:
        if member.type == "method_definition":
            name = member.child_by_field_name("name")
            if name is not None and self._text(name) == "render":
                return member
        elif member.type in ("field_definition", "public_field_definition"):
            name = member.child_by_field_name("property") or member.child_by_field_name("name")
            value = member.child_by_field_name("value")
            if (
                name is not None
                and value is not None
                and self._text(name) == "render"
                and value.type in _FUNCTION_VALUE_FORMS
            ):
                return value
        return None

    def _superclass(self, heritage: Node) -> Optional[str]:
        for node in _walk(heritage):
            if node is not heritage and node.type in _SUPERCLASS_TYPES:
                return "".join(self._text(node).split())
        return None

    def _function_returns(self, function: Node) -> List[Expression]:
        body = function.child_by_field_name("body")
        if body is None:
            return []
        if body.type != "statement_block":
            return [self._lower_expression(body)]
        returns: List[Expression] = []
        for statement in _iter_returns(body):
            argument = _first_named(statement)
            if argument is not None:
                returns.append(self._lower_expression(argument))
        return returns

    # expressions ----------------------------------------------------------

    def _lower_expression(self, node: Node) -> Expression:
        kind = node.type
        if kind in _ELEMENT_TYPES:
            return self._lower_element(node)
        if kind == "parenthesized_expression" or kind in _TS_WRAPPER_TYPES:
            inner = _first_named(node)
            return self._lower_expression(inner) if inner is not None else Opaque(self._text(node))
        if kind == "ternary_expression":
            branches = [node.child_by_field_name("consequence"), node.child_by_field_name("alternative")]
            return Conditional([self._lower_expression(branch) for branch in branches if branch is not None])
        if kind == "binary_expression":
            operator = node.child_by_field_name("operator")
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if (
                operator is not None
                and left is not None
                and right is not None
                and self._text(operator) in _LOGICAL_OPERATORS
            ):
                return Logical(
                    self._text(operator), [self._lower_expression(left), self._lower_expression(right)]
                )
        if kind == "call_expression":
            mapped = self._lower_mapped(node)
            if mapped is not None:
                return mapped
        if kind == "identifier":
            return Identifier(self._text(node))
        return Opaque(self._text(node))

    def _lower_mapped(self, node: Node) -> Optional[MappedList]:
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None or function.type != "member_expression":
            return None
        method = function.child_by_field_name("property")
        if method is None or self._text(method) not in _MAP_METHODS:
            return None
        renders: List[Expression] = []
        for argument in _named(arguments):
            if argument.type in _FUNCTION_VALUE_FORMS:
                renders.extend(self._function_returns(argument))
        return MappedList(renders)

    def _lower_element(self, node: Node) -> ElementNode:
        if node.type == "jsx_self_closing_element":
            opening: Optional[Node] = node
            child_nodes: List[Node] = []
        elif node.type == "jsx_fragment":
            opening = None
            child_nodes = list(_named(node))
        else:
            opening = _first_of_type(node, "jsx_opening_element")
            child_nodes = [
                child
                for child in _named(node)
                if child.type not in ("jsx_opening_element", "jsx_closing_element")
            ]

        tag: Optional[str] = None
        attributes: List[Union[Attribute, SpreadAttribute]] = []
        insert_at: Optional[int] = None
        if opening is not None:
            name = opening.child_by_field_name("name")
            if name is not None:
                tag = "".join(self._text(name).split())
            for part in _named(opening):
                if part.type == "jsx_attribute":
                    attributes.append(self._lower_attribute(part))
                elif part.type == "jsx_expression":
                    attributes.append(SpreadAttribute(self._spread_text(part)))
            insert_at = _attribute_insert_offset(opening)

        element = ElementNode(
            tag=tag,
            attributes=attributes,
            children=[self._lower_child(child) for child in child_nodes],
            self_closing=node.type == "jsx_self_closing_element",
            insert_at=insert_at,
        )
        self.module.elements.append(element)
        return element

    def _lower_attribute(self, node: Node) -> Attribute:
        parts = list(_named(node))
        name = parts[0]
        value = parts[1] if len(parts) > 1 else None
        source_value: Optional[str] = None
        if value is not None and value.type == "string":
            source_value = self._text(value)[1:-1]
        return Attribute(
            name=self._text(name),
            value=source_value,
            source_value=source_value,
            value_span=(value.start_byte, value.end_byte) if value is not None else None,
            name_end=name.end_byte,
        )

    def _spread_text(self, node: Node) -> str:
        inner = _first_named(node)
        if inner is None:
            return ""
        text = self._text(inner)
        return text[3:].strip() if text.startswith("...") else text

    def _lower_child(self, node: Node) -> Expression:
        if node.type in _ELEMENT_TYPES:
            return self._lower_element(node)
        if node.type == "jsx_expression":
            inner = _first_named(node)
            if inner is None or inner.type == "spread_element":
                return Opaque(self._text(node))
            return self._lower_expression(inner)
        return Text(self._text(node))

    def _call_site(self, node: Node) -> Optional[CallSite]:
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None or function.type != "identifier":
            return None
        values = list(_named(arguments))
        if len(values) != 1:
            return None
        argument = values[0]
        lowered: Expression
        if argument.type == "identifier":
            lowered = Identifier(self._text(argument))
        else:
            lowered = Opaque(self._text(argument))
        return CallSite(
            callee=self._text(function),
            argument=lowered,
            argument_span=(argument.start_byte, argument.end_byte),
        )


def _named(node: Node) -> Iterator[Node]:
    for child in node.named_children:
        if child.type != "comment":
            yield child


def _first_named(node: Node) -> Optional[Node]:
    return next(_named(node), None)


def _first_of_type(node: Node, kind: str) -> Optional[Node]:
    for child in node.children:
        if child.type == kind:
            return child
    return None


def _walk(node: Node) -> Iterator[Node]:
    yield node
    for child in node.children:
        yield from _walk(child)


def _iter_type(node: Node, kind: str) -> Iterator[Node]:
    for candidate in _walk(node):
        if candidate.type == kind:
            yield candidate


def _iter_returns(block: Node) -> Iterable[Node]:
    for child in _named(block):
        if child.type == "return_statement":
            yield child
        elif child.type in _FUNCTION_TYPES or child.type in _CLASS_TYPES:
            continue
        else:
            yield from _iter_returns(child)


def _attribute_insert_offset(opening: Node) -> int:
    """Offset just past the tag name or last attribute."""
    # Named children only: grammars differ on whether "/>" is one token or two.
    offset = opening.start_byte + 1
    for child in _named(opening):
        offset = child.end_byte
    return offset


def _first_error_line(root: Node) -> int:
    for node in _walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
    return root.start_point[0] + 1


__all__ = [
    "JsxFrontend",
    "SourceParseError",
    "UnsupportedSourceError",
    "dialect_for_path",
]
