from __future__ import annotations

from pathlib import Path

import pytest

from cmakegen.logging import reset_logging
from tests._fixtures.workspace_builder import WorkspaceBuilder


@pytest.fixture(autouse=True)
def _release_log_handlers():
    """Close handlers a test installed so log files never stay open between tests."""
    yield
    reset_logging()


@pytest.fixture
def workspace_builder(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a reusable workspace builder rooted at the pytest tmp_path."""
    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def scenario_a(workspace_builder: WorkspaceBuilder) -> WorkspaceBuilder:
    """Workspace with a root entry point and two header-bearing subdirectories."""
    workspace_builder.write(
        {
            "main.cpp": """
                #include "calc.h"
                #include "log.h"

                int main(int argc, char** argv) {
                    log_line("start");
                    return add(1, 2) == 3 ? 0 : 1;
                }
            """,
            "math/calc.cpp": "int add(int a, int b) { return a + b; }\n",
            "math/calc.h": "int add(int a, int b);\n",
            "utils/log.cpp": "void log_line(const char*) {}\n",
            "utils/log.h": "void log_line(const char* message);\n",
        }
    )
    return workspace_builder
