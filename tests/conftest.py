from __future__ import annotations

from pathlib import Path

import pytest

from jsxmark.frontend import JsxFrontend
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture(scope="session")
def frontend() -> JsxFrontend:
    """Share one frontend so grammars load once per session."""
    return JsxFrontend()
