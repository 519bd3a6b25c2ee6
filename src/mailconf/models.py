"""Account, settings, and connection payloads.

Frozen dataclasses mirroring what the native command layer sends and
accepts. Passwords never live on ``Account``; the backend keeps them in the
system keychain and only accepts them on create, update, and connection test.

``from_payload()`` maps a backend dict onto a model. It uses dataclass field
introspection — no metaclass magic — and coerces ``int``, ``bool``, and
``str`` fields, since form inputs arrive as strings.
"""

import dataclasses
import types
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar, get_args, get_origin, get_type_hints


class Color(StrEnum):
    """Account accent colors offered by the account form."""

    SKY = "sky"
    RED = "red"
    ORANGE = "orange"
    AMBER = "amber"
    YELLOW = "yellow"
    LIME = "lime"
    EMERALD = "emerald"
    TEAL = "teal"
    CYAN = "cyan"
    BLUE = "blue"
    INDIGO = "indigo"
    VIOLET = "violet"
    PURPLE = "purple"
    PINK = "pink"


@dataclass(frozen=True, slots=True)
class Account:
    """A stored account as returned by ``cmd_find_account``/``cmd_list_accounts``."""

    id: int
    name: str
    server: str
    port: int
    color: str
    active: bool
    username: str
    mailbox: str


@dataclass(frozen=True, slots=True)
class NewAccount:
    """Attributes for ``cmd_create_account``."""

    name: str
    server: str
    port: int
    color: str
    username: str
    password: str
    mailbox: str
    active: bool = True


@dataclass(frozen=True, slots=True)
class AccountUpdate:
    """Attributes for ``cmd_update_account``.

    ``password`` of ``None`` (or blank) keeps the stored password.
    """

    name: str
    server: str
    port: int
    color: str
    username: str
    mailbox: str
    password: str | None = None


@dataclass(frozen=True, slots=True)
class Settings:
    """Application settings. ``None`` means "not set yet"."""

    notifications: bool | None = None
    sound: bool | None = None
    preview: bool | None = None


@dataclass(frozen=True, slots=True)
class ConnectionCreds:
    """Credentials for ``cmd_test_connection``."""

    server: str
    port: int
    username: str
    password: str
    mailbox: str


# ---------------------------------------------------------------------------
# Payload mapping
# ---------------------------------------------------------------------------

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})

# Scalar types we know how to coerce from payload values.
_COERCIBLE: dict[type, Any] = {
    int: lambda v: int(v) if v != "" else 0,
    bool: lambda v: v.strip().lower() in _TRUE_STRINGS if isinstance(v, str) else bool(v),
    str: str,
}


def _coercion_map(cls: type) -> dict[str, type | None]:
    """Build a {field_name: target_type} map; ``None`` means pass through."""
    hints = get_type_hints(cls)
    result: dict[str, type | None] = {}
    for f in dataclasses.fields(cls):
        annotation = hints[f.name]
        # Unwrap Optional (X | None) — coerce to the non-None branch
        if get_origin(annotation) is types.UnionType:
            args = [a for a in get_args(annotation) if a is not type(None)]
            annotation = args[0] if len(args) == 1 else None
        result[f.name] = annotation if annotation in _COERCIBLE else None
    return result


def _coerce(value: Any, target: type | None) -> Any:
    # Exact type match: a bool in an int field is still converted
    if target is None or value is None or type(value) is target:
        return value
    return _COERCIBLE[target](value)


T = TypeVar("T")


def from_payload(cls: type[T], payload: dict[str, Any]) -> T:
    """Map a backend payload dict onto a model dataclass.

    Unknown keys are ignored. Raises ``TypeError`` if a required field is
    missing and ``ValueError`` if a value cannot be coerced.
    """
    if not dataclasses.is_dataclass(cls):
        msg = f"{cls.__name__} is not a dataclass"
        raise TypeError(msg)

    coercion = _coercion_map(cls)
    filtered = {k: _coerce(v, coercion[k]) for k, v in payload.items() if k in coercion}
    return cls(**filtered)


def to_payload(model: Any) -> dict[str, Any]:
    """Plain dict for a command payload. ``None`` fields are omitted."""
    return {
        f.name: value
        for f in dataclasses.fields(model)
        if (value := getattr(model, f.name)) is not None
    }
