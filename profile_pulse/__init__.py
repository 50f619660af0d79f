"""Profile Pulse: developer activity analytics for GitHub profiles."""

__version__ = "0.1.0"
