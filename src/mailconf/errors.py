"""Mailconf exception hierarchy.

Shared across the validation engine, the command bridge, and the forms
so every module raises and catches the same types.

Field validation failures are *not* exceptions. They are recorded in a
form's error state and rendered next to the input. Everything here is
either a transport failure or a programming defect.
"""

from collections.abc import Mapping


class MailconfError(Exception):
    """Base for all mailconf-specific errors."""


class ConfigurationError(MailconfError):
    """Raised when configuration is invalid.

    Also raised when a command name is registered twice on a bridge.
    """


class RuleDefinitionError(MailconfError):
    """A rule list or rule check violates the rule contract.

    Raised for duplicate rule names within one field's rule list and for
    checks that do not return a ``(bool, str)`` pair. This is a bug in
    the form definition, never a user-facing validation outcome.
    """


class CommandError(MailconfError):
    """A backend command failed in transport or in the native layer."""

    def __init__(self, command: str, detail: str) -> None:
        self.command = command
        self.detail = detail
        super().__init__(f"{command}: {detail}")


class CommandNotFound(CommandError):  # noqa: N818 — mirrors the backend's wording
    """No handler is registered for the command name."""

    def __init__(self, command: str) -> None:
        super().__init__(command, "command not registered")


class CommandTimeout(CommandError):  # noqa: N818 — mirrors the backend's wording
    """The command did not complete within ``BridgeConfig.command_timeout``."""

    def __init__(self, command: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(command, f"timed out after {timeout:g}s")


class FormInvalid(MailconfError):  # noqa: N818 — reads naturally at call sites
    """Submission refused because the form has failing rules.

    ``errors`` is a snapshot of the form's error state at submit time.
    """

    def __init__(self, errors: Mapping[str, Mapping[str, str]]) -> None:
        self.errors = {field: dict(messages) for field, messages in errors.items()}
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Form has invalid fields: {fields}")
