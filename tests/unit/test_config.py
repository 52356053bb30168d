"""Tests for settings loading."""

from pathlib import Path

import pytest

from aiagen.core import Settings


@pytest.mark.unit
def test_defaults(monkeypatch):
    for name in ("AIA_API_PORT", "AIA_MAX_EXTENSION_FILES", "AIA_EXTENSION_NAMESPACE"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)

    assert settings.api_host == "127.0.0.1"
    assert settings.api_port == 4000
    assert settings.extension_namespace == "com.appybuilder"
    assert settings.default_search_prompt == "Enter search term"
    assert settings.max_extension_files == 10
    assert settings.max_design_images == 5
    assert settings.workspace_dir.name == "aiagen"


@pytest.mark.unit
def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("AIA_API_PORT", "8080")
    monkeypatch.setenv("AIA_WORKSPACE_DIR", str(tmp_path))
    monkeypatch.setenv("AIA_EXTENSION_NAMESPACE", "io.example")
    settings = Settings(_env_file=None)

    assert settings.api_port == 8080
    assert settings.workspace_dir == Path(tmp_path)
    assert settings.extension_namespace == "io.example"


@pytest.mark.unit
def test_invalid_port_rejected(monkeypatch):
    monkeypatch.setenv("AIA_API_PORT", "70000")
    with pytest.raises(ValueError):
        Settings(_env_file=None)
