"""Pipeline orchestration: scan, parse, annotate, print."""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .config import JsxMarkConfig
from .engine import annotate_module
from .frontend import JsxFrontend, SourceParseError, UnsupportedSourceError, render_module
from .logging import get_logger
from .models import AnnotationReport, SourceContext
from .paths import file_identifier
from .scanner import SourceScanner


@dataclass
class TransformResult:
    """Annotated text for one source plus the engine's report."""

    output: str
    report: AnnotationReport
    changed: bool


@dataclass
class FileOutcome:
    """Result of processing a single file."""

    path: Path
    result: Optional[TransformResult] = None
    diff: str = ""
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.result is not None and self.result.changed


@dataclass
class RunSummary:
    """Outcomes of a multi-file run."""

    outcomes: List[FileOutcome] = field(default_factory=list)

    @property
    def changed(self) -> List[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.changed]

    @property
    def failed(self) -> List[FileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.error is not None]


class Orchestrator:
    """Coordinates annotation of files according to a configuration."""

    def __init__(
        self,
        config: JsxMarkConfig | None = None,
        frontend: JsxFrontend | None = None,
        scanner: SourceScanner | None = None,
    ) -> None:
        self.config = config or JsxMarkConfig(root=Path.cwd())
        self.frontend = frontend or JsxFrontend()
        self.scanner = scanner or SourceScanner(self.config.exclude_paths)
        self.logger = get_logger("orchestrator")

    def context_for(self, filename: str | Path) -> SourceContext:
        return SourceContext(
            file_id=file_identifier(filename),
            ignored_names=frozenset(self.config.ignored_components),
            attributes=self.config.attributes.names(),
        )

    def transform_source(
        self, source: str, filename: str | Path, *, dialect: str = "javascript"
    ) -> TransformResult:
        """Annotate ``source`` as if it were read from ``filename``."""
        module = self.frontend.parse(source, dialect=dialect)
        report = annotate_module(
            module,
            self.context_for(filename),
            rewrite_styled=self.config.rewrite_styled,
            styled_modules=self.config.styled_modules,
        )
        output = render_module(module)
        return TransformResult(output=output, report=report, changed=output != source)

    def transform_file(self, path: Path) -> TransformResult:
        module = self.frontend.parse_file(path)
        report = annotate_module(
            module,
            self.context_for(path),
            rewrite_styled=self.config.rewrite_styled,
            styled_modules=self.config.styled_modules,
        )
        output = render_module(module)
        return TransformResult(output=output, report=report, changed=output.encode("utf-8") != module.source)

    def run(self, paths: Sequence[str | Path], *, write: bool = False) -> RunSummary:
        """Annotate every source below ``paths``; files are rewritten only when ``write``."""
        summary = RunSummary()
        for target in paths:
            files = self.scanner.scan(Path(target))
            self.logger.debug("Scanner discovered %d file(s) under %s", len(files), target)
            for path in files:
                summary.outcomes.append(self._process(path, write=write))

        self.logger.info(
            "Processed %d file(s): %d changed, %d failed",
            len(summary.outcomes),
            len(summary.changed),
            len(summary.failed),
        )
        return summary

    def _process(self, path: Path, *, write: bool) -> FileOutcome:
        try:
            result = self.transform_file(path)
        except (SourceParseError, UnsupportedSourceError, UnicodeDecodeError) as exc:
            self.logger.warning("Skipping %s: %s", path, exc)
            return FileOutcome(path=path, error=str(exc))
        except OSError as exc:
            self.logger.warning("Unable to read %s: %s", path, exc)
            return FileOutcome(path=path, error=str(exc))

        outcome = FileOutcome(path=path, result=result)
        if not result.changed:
            self.logger.debug("%s already annotated", path)
            return outcome

        original = path.read_text(encoding="utf-8")
        outcome.diff = _unified_diff(original, result.output, path)
        if write:
            path.write_text(result.output, encoding="utf-8")
            self.logger.info(
                "Annotated %s (%d element(s), %d wrapper(s))",
                path,
                result.report.annotated_elements,
                result.report.rewritten_wrappers,
            )
        return outcome


def _unified_diff(before: str, after: str, path: Path) -> str:
    return "".join(
        difflib.unified_diff(
            before.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{path.as_posix()}",
            tofile=f"b/{path.as_posix()}",
        )
    )


__all__ = ["FileOutcome", "Orchestrator", "RunSummary", "TransformResult"]
