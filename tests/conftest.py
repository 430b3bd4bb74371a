"""
Pytest configuration and shared fixtures for the buildwatch test suite.

This module provides common fixtures, test utilities, and configuration
for all test modules in the project.
"""

import asyncio
import io
import shutil
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace
from typing import List

import pytest
from rich.console import Console

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "watch": {
            "root": ".",
            "extensions": [".go", ".mod"],
            "recursive": False,
            "health_check_interval": 0.5,
        },
        "commands": {
            "build": {"name": "Compile", "args": ["make", "all"]},
            "test": {"name": "Check", "args": "make test"},
        },
        "output": {"merge_stderr": True, "clear_screen": False},
        "logging": {"level": "debug", "file": "logs/buildwatch.log"},
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Write the sample configuration to a temporary TOML file."""
    import toml

    path = temp_dir / "buildwatch.toml"
    with open(path, "w") as f:
        toml.dump(sample_config_data, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from buildwatch.config import clear_config_cache, set_config_path

    set_config_path(None)
    clear_config_cache()


# ============================================================================
# Process Fixtures
# ============================================================================


def python_command(code: str) -> List[str]:
    """Argument list running ``code`` in a fresh Python interpreter."""
    return [sys.executable, "-c", code]


@pytest.fixture
def py():
    """Provide the python_command helper to tests."""
    return python_command


# ============================================================================
# Display and Watcher Fixtures
# ============================================================================


@pytest.fixture
def console_output():
    """A rich Console writing plain text into a buffer."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=200, highlight=False, color_system=None)
    return SimpleNamespace(console=console, buffer=buffer)


class FakeWatcher:
    """Stand-in for SourceWatcher exposing the same queues."""

    def __init__(self):
        self.events = asyncio.Queue()
        self.errors = asyncio.Queue()


@pytest.fixture
def fake_watcher():
    return FakeWatcher()


async def wait_until(predicate, timeout: float = 10.0, interval: float = 0.02) -> bool:
    """Poll ``predicate`` on the running loop until it holds or ``timeout`` passes."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(interval)
    return predicate()


@pytest.fixture
def wait_for():
    return wait_until
