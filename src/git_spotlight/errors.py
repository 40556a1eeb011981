"""Error types raised by the outer helpers; the core reports failures by return value."""

from __future__ import annotations


class SpotlightError(Exception):
    """Base error for git-spotlight."""

    pass


class InvalidDurationError(SpotlightError, ValueError):
    """Duration text could not be turned into a cutoff timestamp."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(reason)
        self.text = text
        self.reason = reason


class ReportSourceError(SpotlightError):
    """A blame report or diff could not be read from its source."""

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Cannot read {source}: {reason}")
        self.source = source
        self.reason = reason


class ConfigError(SpotlightError):
    """Settings failed validation."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid value for {field}: {value!r} ({reason})")
        self.field = field
        self.value = value
        self.reason = reason
