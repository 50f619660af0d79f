"""
Configuration management for Profile Pulse.

Settings are resolved from (highest priority first):
1. Values set explicitly through the setters below (CLI flags)
2. PROFILE_PULSE_* environment variables
3. .profile-pulse.toml (local config)
4. pyproject.toml [tool.profile-pulse] (project-level config)
5. Built-in defaults
"""

import os
import tomllib
from pathlib import Path
from typing import Any

# project_root is the parent directory of profile_pulse/
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Global configuration for SSL verification
# Default: True (verify SSL certificates)
# Can be set to False by CLI --insecure flag
VERIFY_SSL = True

# GitHub caps per_page at 100 for every endpoint we call
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 10.0

# Cache configuration
# Default cache directory: ~/.cache/profile-pulse
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "profile-pulse"
# Default TTL: 6 hours (in seconds)
DEFAULT_CACHE_TTL = 6 * 60 * 60

# Global settings (can be overridden)
_CACHE_DIR: Path | None = None
_CACHE_TTL: int | None = None
_PAGE_SIZE: int | None = None


def load_config_file(config_path: Path) -> dict:
    """Load a TOML configuration file."""
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def get_tool_config() -> dict[str, Any]:
    """
    Return the [tool.profile-pulse] table.

    .profile-pulse.toml wins over pyproject.toml; the two are not merged.

    Returns:
        The tool configuration table, or an empty dict.
    """
    local_config_path = PROJECT_ROOT / ".profile-pulse.toml"
    if local_config_path.exists():
        config = load_config_file(local_config_path)
        section = config.get("tool", {}).get("profile-pulse", {})
        if section:
            return section

    pyproject_path = PROJECT_ROOT / "pyproject.toml"
    if pyproject_path.exists():
        config = load_config_file(pyproject_path)
        return config.get("tool", {}).get("profile-pulse", {})

    return {}


def set_verify_ssl(verify: bool) -> None:
    """
    Set the SSL verification setting globally.

    Args:
        verify: Whether to verify SSL certificates.
    """
    global VERIFY_SSL
    VERIFY_SSL = verify


def get_verify_ssl() -> bool:
    """Get the current SSL verification setting."""
    return VERIFY_SSL


def _clamp_page_size(value: int) -> int:
    return max(1, min(MAX_PAGE_SIZE, value))


def get_page_size() -> int:
    """
    Get the page size used for list and search requests.

    Priority:
    1. Explicitly set value via set_page_size()
    2. PROFILE_PULSE_PAGE_SIZE environment variable
    3. page_size in the tool config
    4. Default: 100

    The result is always clamped to 1..100.
    """
    if _PAGE_SIZE is not None:
        return _PAGE_SIZE

    env_page_size = os.getenv("PROFILE_PULSE_PAGE_SIZE")
    if env_page_size:
        try:
            return _clamp_page_size(int(env_page_size))
        except ValueError:
            pass

    config = get_tool_config()
    if "page_size" in config:
        return _clamp_page_size(int(config["page_size"]))

    return DEFAULT_PAGE_SIZE


def set_page_size(size: int) -> None:
    """Set the page size explicitly (clamped to 1..100)."""
    global _PAGE_SIZE
    _PAGE_SIZE = _clamp_page_size(size)


def get_request_timeout() -> float:
    """
    Get the HTTP request timeout in seconds.

    Reads PROFILE_PULSE_TIMEOUT, then timeout in the tool config.
    """
    env_timeout = os.getenv("PROFILE_PULSE_TIMEOUT")
    if env_timeout:
        try:
            return float(env_timeout)
        except ValueError:
            pass

    config = get_tool_config()
    if "timeout" in config:
        return float(config["timeout"])

    return DEFAULT_TIMEOUT


def get_cache_dir() -> Path:
    """
    Get the cache directory path.

    Priority:
    1. Explicitly set value via set_cache_dir()
    2. PROFILE_PULSE_CACHE_DIR environment variable
    3. [tool.profile-pulse.cache] directory
    4. Default: ~/.cache/profile-pulse

    Returns:
        Path to the cache directory.
    """
    if _CACHE_DIR is not None:
        return _CACHE_DIR

    env_cache_dir = os.getenv("PROFILE_PULSE_CACHE_DIR")
    if env_cache_dir:
        return Path(env_cache_dir).expanduser()

    cache_config = get_tool_config().get("cache", {})
    if "directory" in cache_config:
        return Path(cache_config["directory"]).expanduser()

    return DEFAULT_CACHE_DIR


def set_cache_dir(path: Path | str) -> None:
    """
    Set the cache directory path explicitly.

    Args:
        path: Path to the cache directory.
    """
    global _CACHE_DIR
    _CACHE_DIR = Path(path).expanduser()


def get_cache_ttl() -> int:
    """
    Get the cache TTL (Time To Live) in seconds.

    Priority:
    1. Explicitly set value via set_cache_ttl()
    2. PROFILE_PULSE_CACHE_TTL environment variable
    3. [tool.profile-pulse.cache] ttl_seconds
    4. Default: 21600 (6 hours)
    """
    if _CACHE_TTL is not None:
        return _CACHE_TTL

    env_cache_ttl = os.getenv("PROFILE_PULSE_CACHE_TTL")
    if env_cache_ttl:
        try:
            return int(env_cache_ttl)
        except ValueError:
            pass

    cache_config = get_tool_config().get("cache", {})
    if "ttl_seconds" in cache_config:
        return int(cache_config["ttl_seconds"])

    return DEFAULT_CACHE_TTL


def set_cache_ttl(seconds: int) -> None:
    """Set the cache TTL (Time To Live) explicitly."""
    global _CACHE_TTL
    _CACHE_TTL = seconds


def is_cache_enabled() -> bool:
    """
    Check if cache is enabled.

    Reads [tool.profile-pulse.cache] enabled; defaults to True.
    """
    cache_config = get_tool_config().get("cache", {})
    if "enabled" in cache_config:
        return bool(cache_config["enabled"])

    return True
