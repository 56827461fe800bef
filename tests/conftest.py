"""
Shared pytest fixtures and configuration.
"""

import logging
import shutil
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from minifold.core.resolver import ResolvedPlan
from minifold.utils.logger import get_logger


SAMPLE_JS = "function add(a, b) {\n    // sum two numbers\n    return a + b;\n}\n"
SAMPLE_CSS = "body {\n    color: red;\n    margin: 0px;\n}\n"


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by a test so later tests start from a quiet logger."""
    yield
    logger = get_logger()
    logger._cleanup_handlers()
    logger.get_logger().setLevel(logging.WARNING)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path)


@pytest.fixture
def sample_js():
    return SAMPLE_JS


@pytest.fixture
def sample_css():
    return SAMPLE_CSS


@pytest.fixture
def chdir_temp(temp_dir, monkeypatch):
    """Run the test from inside temp_dir so relative paths land there."""
    monkeypatch.chdir(temp_dir)
    return temp_dir


@pytest.fixture
def write_file(temp_dir):
    """Create a file under temp_dir with the given relative name and content."""

    def _write(name: str, content: str = SAMPLE_JS) -> Path:
        path = temp_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def fake_popen(mocker):
    """Patch subprocess.Popen with a process finishing with the given streams."""

    def _factory(stdout: str = "", stderr: str = "", returncode: int = 0, side_effect=None):
        process = MagicMock()
        process.pid = 4242
        process.returncode = returncode
        process.communicate.return_value = (stdout, stderr)
        mock_popen = mocker.patch("minifold.core.process_executor.subprocess.Popen", return_value=process)
        if side_effect is not None:

            def _popen(cmd, **kwargs):
                side_effect(cmd, **kwargs)
                return process

            mock_popen.side_effect = _popen
        return mock_popen

    return _factory


@pytest.fixture
def memory_plan():
    """Build an in-memory ResolvedPlan for a compressor."""

    def _plan(compressor: str, content: str = SAMPLE_JS, **kwargs) -> ResolvedPlan:
        return ResolvedPlan(compressor=compressor, content=content, **kwargs)

    return _plan
