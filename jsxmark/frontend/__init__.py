"""Parsing and printing collaborators around the annotation engine."""

from __future__ import annotations

from .printer import render_element, render_expression, render_module
from .tree_sitter import JsxFrontend, SourceParseError, UnsupportedSourceError, dialect_for_path

__all__ = [
    "JsxFrontend",
    "SourceParseError",
    "UnsupportedSourceError",
    "dialect_for_path",
    "render_element",
    "render_expression",
    "render_module",
]
