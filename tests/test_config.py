"""
Tests for the configuration module.
"""

import tempfile
from pathlib import Path

import pytest

import profile_pulse.config
from profile_pulse.config import (
    DEFAULT_CACHE_DIR,
    DEFAULT_CACHE_TTL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    get_cache_dir,
    get_cache_ttl,
    get_page_size,
    get_request_timeout,
    get_tool_config,
    get_verify_ssl,
    is_cache_enabled,
    load_config_file,
    set_cache_dir,
    set_cache_ttl,
    set_page_size,
    set_verify_ssl,
)

ENV_VARS = (
    "PROFILE_PULSE_PAGE_SIZE",
    "PROFILE_PULSE_TIMEOUT",
    "PROFILE_PULSE_CACHE_DIR",
    "PROFILE_PULSE_CACHE_TTL",
)


@pytest.fixture
def temp_project_root(monkeypatch):
    """Create a temporary project root with no overrides in effect."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(profile_pulse.config, "_PAGE_SIZE", None)
    monkeypatch.setattr(profile_pulse.config, "_CACHE_DIR", None)
    monkeypatch.setattr(profile_pulse.config, "_CACHE_TTL", None)
    monkeypatch.setattr(profile_pulse.config, "VERIFY_SSL", True)

    with tempfile.TemporaryDirectory() as tmpdir:
        tmpdir_path = Path(tmpdir)

        # Patch PROJECT_ROOT
        original_root = profile_pulse.config.PROJECT_ROOT
        profile_pulse.config.PROJECT_ROOT = tmpdir_path

        yield tmpdir_path

        # Restore
        profile_pulse.config.PROJECT_ROOT = original_root


def test_defaults_without_config(temp_project_root):
    """Test built-in defaults when no config file exists."""
    assert get_tool_config() == {}
    assert get_page_size() == DEFAULT_PAGE_SIZE
    assert get_request_timeout() == DEFAULT_TIMEOUT
    assert get_cache_dir() == DEFAULT_CACHE_DIR
    assert get_cache_ttl() == DEFAULT_CACHE_TTL
    assert is_cache_enabled() is True


def test_settings_from_pyproject(temp_project_root):
    """Test loading settings from pyproject.toml."""
    (temp_project_root / "pyproject.toml").write_text(
        """
[tool.profile-pulse]
page_size = 30
timeout = 2.5

[tool.profile-pulse.cache]
directory = "/tmp/pulse-cache"
ttl_seconds = 60
enabled = false
"""
    )

    assert get_page_size() == 30
    assert get_request_timeout() == 2.5
    assert get_cache_dir() == Path("/tmp/pulse-cache")
    assert get_cache_ttl() == 60
    assert is_cache_enabled() is False


def test_local_config_takes_priority(temp_project_root):
    """Test that .profile-pulse.toml takes priority over pyproject.toml."""
    (temp_project_root / "pyproject.toml").write_text(
        """
[tool.profile-pulse]
page_size = 30
"""
    )
    (temp_project_root / ".profile-pulse.toml").write_text(
        """
[tool.profile-pulse]
page_size = 50
"""
    )

    assert get_page_size() == 50


def test_page_size_is_clamped(temp_project_root):
    """Test that page sizes outside 1..100 are clamped."""
    (temp_project_root / "pyproject.toml").write_text(
        """
[tool.profile-pulse]
page_size = 500
"""
    )
    assert get_page_size() == 100

    set_page_size(0)
    assert get_page_size() == 1


def test_environment_overrides_config(temp_project_root, monkeypatch):
    """Test that environment variables win over config files."""
    (temp_project_root / "pyproject.toml").write_text(
        """
[tool.profile-pulse]
page_size = 30

[tool.profile-pulse.cache]
ttl_seconds = 60
"""
    )
    monkeypatch.setenv("PROFILE_PULSE_PAGE_SIZE", "10")
    monkeypatch.setenv("PROFILE_PULSE_CACHE_TTL", "120")
    monkeypatch.setenv("PROFILE_PULSE_CACHE_DIR", str(temp_project_root / "env"))
    monkeypatch.setenv("PROFILE_PULSE_TIMEOUT", "4")

    assert get_page_size() == 10
    assert get_cache_ttl() == 120
    assert get_cache_dir() == temp_project_root / "env"
    assert get_request_timeout() == 4.0


def test_invalid_environment_values_are_ignored(temp_project_root, monkeypatch):
    """Test that unparsable environment values fall through."""
    monkeypatch.setenv("PROFILE_PULSE_PAGE_SIZE", "lots")
    monkeypatch.setenv("PROFILE_PULSE_CACHE_TTL", "soon")

    assert get_page_size() == DEFAULT_PAGE_SIZE
    assert get_cache_ttl() == DEFAULT_CACHE_TTL


def test_setters_take_priority(temp_project_root, monkeypatch):
    """Test that explicitly set values win over everything else."""
    monkeypatch.setenv("PROFILE_PULSE_PAGE_SIZE", "10")
    monkeypatch.setenv("PROFILE_PULSE_CACHE_TTL", "120")

    set_page_size(25)
    set_cache_ttl(5)
    set_cache_dir(temp_project_root / "explicit")

    assert get_page_size() == 25
    assert get_cache_ttl() == 5
    assert get_cache_dir() == temp_project_root / "explicit"


def test_verify_ssl_toggle(temp_project_root):
    """Test the global SSL verification flag."""
    assert get_verify_ssl() is True
    set_verify_ssl(False)
    assert get_verify_ssl() is False


def test_load_config_file_missing(temp_project_root):
    assert load_config_file(temp_project_root / "missing.toml") == {}


def test_load_config_file_invalid(temp_project_root):
    """Test that a broken TOML file raises ValueError."""
    broken = temp_project_root / "pyproject.toml"
    broken.write_text("[tool.profile-pulse\npage_size = ")

    with pytest.raises(ValueError, match="Failed to load config"):
        load_config_file(broken)
