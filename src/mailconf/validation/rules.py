"""Built-in validation rules for mailconf forms.

A rule is a named check. Each check has the signature::

    def check(value: FieldValue) -> tuple[bool, str]:
        '''Return (is_valid, message).'''

The message is returned whether or not the value is valid, so the engine
can record it on failure without asking the rule twice.

Rules are built by factories that close over their configuration::

    def max_length(n: int) -> Rule:
        def check(value: FieldValue) -> RuleResponse:
            return len(_text(value)) <= n, f"Must be at most {n} characters"
        return Rule("max-length", check)

Custom rules follow the same protocol — any ``Rule(name, check)`` whose
check is total and side-effect free works with ``FormValidation.validate()``.
"""

import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import NamedTuple, TypeAlias

# Values a form field can hold
FieldValue: TypeAlias = str | int | float | bool | None

# (is_valid, message)
RuleResponse: TypeAlias = tuple[bool, str]

Check: TypeAlias = Callable[[FieldValue], RuleResponse]


class Rule(NamedTuple):
    """A named check. Unpacks as ``(name, check)``.

    The name identifies the rule within a field's error map, so two rules
    in the same field list must not share a name.
    """

    name: str
    check: Check


def _text(value: FieldValue) -> str:
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def required(message: str = "Field is required") -> Rule:
    """Field must be present and non-blank once stringified and trimmed."""

    def check(value: FieldValue) -> RuleResponse:
        return value is not None and str(value).strip() != "", message

    return Rule("required", check)


def required_if(condition: bool, message: str = "Field is required") -> Rule:
    """Field must be non-empty when *condition* holds.

    *condition* is captured here, when the rule is built. It is not
    re-evaluated on each check. Whitespace counts as content.
    """

    def check(value: FieldValue) -> RuleResponse:
        if condition:
            return _text(value) != "", message
        return True, message

    return Rule("required-if", check)


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_DIGIT_RE = re.compile(r"[0-9]")


def is_number(message: str = "Field is not a number") -> Rule:
    """Value must be truthy and contain at least one digit.

    Falsy values fail first, so ``0`` is reported as not a number.
    """

    def check(value: FieldValue) -> RuleResponse:
        if not value:
            return False, message
        return _DIGIT_RE.search(str(value)) is not None, message

    return Rule("is-number", check)


def port_number(value: FieldValue) -> int | None:
    """Parse a port field value as a whole number, or ``None`` if it is not one.

    Accepts ints, whole floats (``993.0``), and digit strings with
    surrounding whitespace. Range is not checked here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def port(message: str = "Must be a port between 1 and 65535") -> Rule:
    """Value must be a whole number in the TCP port range."""

    def check(value: FieldValue) -> RuleResponse:
        number = port_number(value)
        return number is not None and 1 <= number <= 65535, message

    return Rule("port", check)


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def min_length(n: int, message: str | None = None) -> Rule:
    """String form must be at least *n* characters."""
    text = message or f"Must be at least {n} characters"

    def check(value: FieldValue) -> RuleResponse:
        return len(_text(value)) >= n, text

    return Rule("min-length", check)


def max_length(n: int, message: str | None = None) -> Rule:
    """String form must be at most *n* characters."""
    text = message or f"Must be at most {n} characters"

    def check(value: FieldValue) -> RuleResponse:
        return len(_text(value)) <= n, text

    return Rule("max-length", check)


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern — checks structure, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(message: str = "Must be a valid email address") -> Rule:
    """Value must look like an email address (basic format check)."""

    def check(value: FieldValue) -> RuleResponse:
        return _EMAIL_RE.match(_text(value)) is not None, message

    return Rule("email", check)


def matches(pattern: str, message: str | None = None) -> Rule:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)
    text = message or f"Must match pattern: {pattern}"

    def check(value: FieldValue) -> RuleResponse:
        return compiled.match(_text(value)) is not None, text

    return Rule("matches", check)


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: str, message: str | None = None) -> Rule:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)
    text = message or f"Must be one of: {', '.join(sorted(allowed))}"

    def check(value: FieldValue) -> RuleResponse:
        return _text(value) in allowed, text

    return Rule("one-of", check)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

RULES: Mapping[str, Callable[..., Rule]] = MappingProxyType(
    {
        "required": required,
        "required-if": required_if,
        "is-number": is_number,
        "port": port,
        "min-length": min_length,
        "max-length": max_length,
        "email": email,
        "matches": matches,
        "one-of": one_of,
    }
)
