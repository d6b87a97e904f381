"""
Pytest configuration and shared fixtures for cocinero tests.
"""

import io
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src and the project root (for tests.mocks) to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from cocinero_core.logging import LogConfig, ProvisionLogger  # noqa: E402
from cocinero_core.types import LogLevel  # noqa: E402
from tests.mocks import (  # noqa: E402
    FakeFileSystem,
    FakePackageManager,
    FakeProcessRunner,
    FakeServiceControl,
)


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def recipe_dir(tmp_path: Path) -> Path:
    """Return an empty recipe directory."""
    directory = tmp_path / "recipes" / "web"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def write_recipe(recipe_dir: Path) -> Callable[..., Path]:
    """Fixture to write a recipe.toml (and optional source files)."""

    def _write(content: str, files: dict[str, str] | None = None) -> Path:
        for name, text in (files or {}).items():
            source = recipe_dir / name
            source.parent.mkdir(parents=True, exist_ok=True)
            source.write_text(text)
        path = recipe_dir / "recipe.toml"
        path.write_text(content)
        return path

    return _write


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def fake_process() -> FakeProcessRunner:
    return FakeProcessRunner()


@pytest.fixture
def fake_packages() -> FakePackageManager:
    return FakePackageManager()


@pytest.fixture
def fake_services() -> FakeServiceControl:
    return FakeServiceControl()


# =============================================================================
# Logger Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_output: io.StringIO) -> ProvisionLogger:
    """Debug-level logger writing to an in-memory stream."""
    return ProvisionLogger(LogConfig(level=LogLevel.DEBUG, output=log_output))


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests (hypothesis)")
    config.addinivalue_line("markers", "integration: Real file system and subprocess tests")
    config.addinivalue_line("markers", "cli: CLI tests")
