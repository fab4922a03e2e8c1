"""jsxmark: annotate JSX components with provenance attributes."""

from __future__ import annotations

from .engine import annotate_module
from .models import AnnotationReport, AttributeNames, SourceContext
from .orchestrator import Orchestrator

__all__ = ["AnnotationReport", "AttributeNames", "Orchestrator", "SourceContext", "annotate_module"]
__version__ = "0.1.0"
