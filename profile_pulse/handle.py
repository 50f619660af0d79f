"""Extraction of a GitHub handle from free-form input."""

import re

# GitHub handles: alphanumerics and single inner hyphens, at most 39 chars
HANDLE_PATTERN = re.compile(r"^@?([a-zA-Z0-9](?:[a-zA-Z0-9]|-(?=[a-zA-Z0-9])){0,38})$")
PROFILE_URL_PATTERN = re.compile(r"github\.com/([^/?#\s]+)", re.IGNORECASE)


def extract_username(text: str) -> str | None:
    """
    Extract a GitHub username from user input.

    Accepts ``octocat``, ``@octocat`` and anything containing
    ``github.com/octocat`` (with or without scheme, trailing path or query).

    Args:
        text: Raw input.

    Returns:
        The username, or None if none could be found.
    """
    trimmed = text.strip()
    if not trimmed:
        return None

    match = PROFILE_URL_PATTERN.search(trimmed)
    if match:
        candidate = match.group(1)
        handle = HANDLE_PATTERN.match(candidate)
        return handle.group(1) if handle else None

    match = HANDLE_PATTERN.match(trimmed)
    if match:
        return match.group(1)

    return None
