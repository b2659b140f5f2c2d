"""Typed errors raised by the client.

Why a small hierarchy:
- The CLI maps each family to an exit code (config / input / remote API).
- Programmatic callers can catch `CoolifyError` and inspect `status_code`
  without parsing messages.

The core never prints or exits; it only raises these.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class Violation:
    """A single failed constraint, addressed by its wire field path."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.reason}"


class CoolifyError(Exception):
    """Base class for every error raised by the client."""


class ConfigurationError(CoolifyError):
    """Base URL or API token missing when building a client."""


class SchemaValidationError(CoolifyError):
    """A value failed schema validation.

    Raised directly for local input checks (before any network call) and
    wrapped into `ApiError` when a server response breaks the contract.
    """

    def __init__(self, violations: Sequence[Violation]) -> None:
        self.violations: list[Violation] = list(violations)
        count = len(self.violations)
        noun = "error" if count == 1 else "errors"
        details = "; ".join(str(v) for v in self.violations)
        super().__init__(f"{count} validation {noun}: {details}")


class ApiError(CoolifyError):
    """Remote API, response-contract or transport failure.

    `status_code` is `None` when no HTTP response was obtained (network
    error, malformed JSON) or when a 2xx body failed validation.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        violations: Sequence[Violation] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.violations: list[Violation] = list(violations or [])

    def __repr__(self) -> str:
        return f"ApiError(message={self.message!r}, status_code={self.status_code!r}, code={self.code!r})"
