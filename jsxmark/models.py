"""Core data models shared across jsxmark components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple, Union


@dataclass(frozen=True)
class AttributeNames:
    """Reserved attribute keys emitted on annotated elements."""

    component: str = "data-component"
    element: str = "data-element"
    source_file: str = "data-source-file"


@dataclass(frozen=True)
class SourceContext:
    """Per-file inputs for a single annotation pass."""

    file_id: str
    ignored_names: FrozenSet[str] = frozenset()
    attributes: AttributeNames = field(default_factory=AttributeNames)


@dataclass
class Attribute:
    """Named JSX attribute.

    ``source_value`` is the literal string found in the parsed file (``None``
    for attributes without a string literal value). Attributes created during
    annotation have no ``name_end`` offset.
    """

    name: str
    value: Optional[str]
    source_value: Optional[str] = None
    value_span: Optional[Tuple[int, int]] = None
    name_end: Optional[int] = None

    @property
    def is_new(self) -> bool:
        return self.name_end is None

    @property
    def changed(self) -> bool:
        return self.is_new or self.value != self.source_value


@dataclass
class SpreadAttribute:
    """Opaque ``{...expr}`` attribute entry."""

    expression: str


@dataclass
class Text:
    """Literal text between elements."""

    text: str


@dataclass
class ElementNode:
    """JSX element or fragment.

    ``tag`` is ``None`` for the anonymous ``<>`` fragment; otherwise it is the
    tag as written, e.g. ``div``, ``Card``, ``Tab.List`` or ``svg:rect``.
    """

    tag: Optional[str]
    attributes: List[Union[Attribute, SpreadAttribute]] = field(default_factory=list)
    children: List["Expression"] = field(default_factory=list)
    self_closing: bool = False
    insert_at: Optional[int] = None

    def get_attribute(self, name: str) -> Optional[Attribute]:
        for attribute in self.attributes:
            if isinstance(attribute, Attribute) and attribute.name == name:
                return attribute
        return None


@dataclass
class Conditional:
    """Ternary expression; only the branches matter for annotation."""

    branches: List["Expression"]


@dataclass
class Logical:
    """Short-circuit expression (``&&``, ``||`` or ``??``)."""

    operator: str
    operands: List["Expression"]


@dataclass
class MappedList:
    """``items.map(cb)`` style call; ``renders`` are the callbacks' returned values."""

    renders: List["Expression"]


@dataclass
class Identifier:
    name: str


@dataclass
class RenderFunction:
    """Single-parameter arrow function rendering one element."""

    parameter: str
    body: ElementNode


@dataclass
class Opaque:
    """Any expression the engine does not look into."""

    text: str = ""


Expression = Union[
    ElementNode, Text, Conditional, Logical, MappedList, Identifier, RenderFunction, Opaque
]


class DefinitionForm(str, Enum):
    FUNCTION_DECLARATION = "function_declaration"
    ARROW_FUNCTION = "arrow_function"
    FUNCTION_EXPRESSION = "function_expression"


@dataclass
class FunctionDefinition:
    """Top-level function, or function value bound to a variable."""

    name: str
    form: DefinitionForm
    returns: List[Expression] = field(default_factory=list)


@dataclass
class ClassDefinition:
    """Top-level class; ``render_returns`` is ``None`` when there is no render member."""

    name: str
    superclass: Optional[str]
    render_returns: Optional[List[Expression]] = None


Definition = Union[FunctionDefinition, ClassDefinition]


@dataclass
class ImportBinding:
    """Local name introduced by an import statement.

    ``imported`` is ``"default"`` for default imports, ``"*"`` for namespace
    imports and the exported name otherwise.
    """

    local: str
    imported: str
    source: str


@dataclass
class CallSite:
    """Call of a plain identifier with exactly one argument."""

    callee: str
    argument: Expression
    argument_span: Optional[Tuple[int, int]] = None


@dataclass
class SourceModule:
    """Parsed source file as seen by the annotation engine."""

    source: bytes = b""
    dialect: str = "javascript"
    imports: List[ImportBinding] = field(default_factory=list)
    definitions: List[Definition] = field(default_factory=list)
    calls: List[CallSite] = field(default_factory=list)
    elements: List[ElementNode] = field(default_factory=list)


class ComponentKind(str, Enum):
    FUNCTION = "function"
    ARROW = "arrow"
    CLASS = "class"


@dataclass(frozen=True)
class ComponentEntry:
    """Component found by the registry."""

    name: str
    kind: ComponentKind
    node: Definition
    eligible: bool = True


@dataclass
class AnnotationReport:
    """Summary of one annotation pass."""

    file_id: str
    components: List[ComponentEntry] = field(default_factory=list)
    annotated_elements: int = 0
    rewritten_wrappers: int = 0
