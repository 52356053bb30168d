"""Pytest configuration and fixtures."""

import io
import os

import pytest

from aiagen.core import GenerationRequest, Settings, UploadedFile
from aiagen.generator import AiaGenerator
from aiagen.planner import RequirementParser


# ============================================================================
# Pytest Hooks
# ============================================================================

def pytest_configure(config):
    """Configure pytest with environment variables."""
    os.environ["AIA_LOG_LEVEL"] = "DEBUG"
    os.environ["AIA_JSON_LOGS"] = "false"


# ============================================================================
# Core Fixtures
# ============================================================================

@pytest.fixture
def workspace_dir(tmp_path):
    """Parent directory for scratch workspaces."""
    return tmp_path / "workspaces"


@pytest.fixture
def settings(workspace_dir):
    """Test settings with an isolated workspace directory."""
    return Settings(workspace_dir=workspace_dir)


@pytest.fixture
def generator(settings):
    """Generator writing into the test workspace directory."""
    return AiaGenerator(settings)


@pytest.fixture
def parser():
    return RequirementParser()


# ============================================================================
# Data Fixtures
# ============================================================================

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def make_upload():
    """Factory for in-memory uploads."""

    def _make(filename: str, content: bytes = PNG_BYTES) -> UploadedFile:
        return UploadedFile(filename=filename, stream=io.BytesIO(content))

    return _make


@pytest.fixture
def make_request():
    """Factory for validated requests."""

    def _make(**overrides) -> GenerationRequest:
        fields = {"project_name": "Demo", "user_id": "dev1"}
        fields.update(overrides)
        return GenerationRequest(**fields)

    return _make


@pytest.fixture
def demo_request(make_request):
    """The two-button, red-background scenario."""
    return make_request(
        requirements="make 2 buttons, on button1 click set screen1.backgroundcolor to red",
        search_prompt="coffee",
    )
