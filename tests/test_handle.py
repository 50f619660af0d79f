"""
Tests for username extraction.
"""

import pytest

from profile_pulse.handle import extract_username


@pytest.mark.parametrize(
    "text, expected",
    [
        ("octocat", "octocat"),
        ("@octocat", "octocat"),
        ("  octocat  ", "octocat"),
        ("https://github.com/octocat", "octocat"),
        ("http://www.github.com/octocat/", "octocat"),
        ("github.com/octocat?tab=repositories", "octocat"),
        ("https://GitHub.com/Octo-Cat/hello-world", "Octo-Cat"),
        ("https://github.com/@octocat", "octocat"),
        ("a", "a"),
        ("a" * 39, "a" * 39),
    ],
)
def test_extracts_username(text, expected):
    assert extract_username(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "",
        "   ",
        "-octocat",
        "octocat-",
        "octo--cat",
        "octo cat",
        "a" * 40,
        "https://example.com/octocat",
        "https://github.com/-bad-",
    ],
)
def test_rejects_invalid_input(text):
    assert extract_username(text) is None
