"""Account, settings, and connection-test forms.

A form holds the current field values, owns one ``FormValidation``, and
builds its rule lists fresh on every validation call. Views bind inputs to
``values``, call ``validate_field()`` on blur and ``submit()`` on save::

    form = AccountForm()
    form.set("name", "Work")
    form.validate_field("name")
    form.validation.errors  # {} once the name is filled in

    account_id = await form.submit(bridge)

``submit()`` always validates every field first, so a brand-new form, which
reports valid before anything is touched, cannot be saved empty.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from mailconf.api.accounts import create_account, update_account
from mailconf.api.connection import test_connection
from mailconf.api.settings import update_settings
from mailconf.bridge import CommandBridge
from mailconf.config import BridgeConfig
from mailconf.errors import FormInvalid
from mailconf.models import (
    Account,
    AccountUpdate,
    Color,
    ConnectionCreds,
    NewAccount,
    Settings,
)
from mailconf.validation import (
    FieldValue,
    FormValidation,
    Rule,
    is_number,
    one_of,
    port,
    port_number,
    required,
    required_if,
    use_form_validation,
)

logger = logging.getLogger("mailconf.forms")


class _Form(ABC):
    """Shared value binding and validation plumbing."""

    fields: tuple[str, ...] = ()

    def __init__(self, values: Mapping[str, FieldValue]) -> None:
        self.values: dict[str, FieldValue] = {name: values.get(name) for name in self.fields}
        self.validation: FormValidation = use_form_validation()

    @abstractmethod
    def validation_spec(self) -> dict[str, list[Rule]]:
        """Rule lists per field, built fresh for each validation call."""

    def set(self, field_name: str, value: FieldValue) -> None:
        """Bind a new value. Does not validate; call ``validate_field()``."""
        if field_name not in self.values:
            msg = f"{type(self).__name__} has no field {field_name!r}"
            raise KeyError(msg)
        self.values[field_name] = value

    def validate_field(self, field_name: str) -> bool:
        """Re-validate one field, leaving the others' messages alone.

        Returns True when that field has no failing rule.
        """
        rules = self.validation_spec()[field_name]
        self.validation.validate(self.values, {field_name: rules})
        return field_name not in self.validation.errors

    def validate_all(self) -> bool:
        self.validation.validate(self.values, self.validation_spec())
        return self.validation.is_valid_form

    @property
    def errors(self) -> dict[str, dict[str, str]]:
        return self.validation.errors

    def _require_valid(self) -> None:
        if not self.validate_all():
            logger.info("%s refused: invalid %s", type(self).__name__, sorted(self.errors))
            raise FormInvalid(self.errors)

    def _text(self, field_name: str) -> str:
        value = self.values[field_name]
        return "" if value is None else str(value).strip()

    def _port(self) -> int:
        number = port_number(self.values["port"])
        if number is None:
            msg = f"Not a port number: {self.values['port']!r}"
            raise ValueError(msg)
        return number


# ---------------------------------------------------------------------------
# Connection test
# ---------------------------------------------------------------------------


class ConnectionTestForm(_Form):
    """IMAP credentials to try before saving an account."""

    fields = ("server", "port", "username", "password", "mailbox")

    def validation_spec(self) -> dict[str, list[Rule]]:
        return {
            "server": [required()],
            "port": [required(), is_number(), port()],
            "username": [required()],
            "password": [required()],
            "mailbox": [required()],
        }

    def to_creds(self) -> ConnectionCreds:
        return ConnectionCreds(
            server=self._text("server"),
            port=self._port(),
            username=self._text("username"),
            password=str(self.values["password"]),
            mailbox=self._text("mailbox"),
        )

    async def submit(self, bridge: CommandBridge) -> Any:
        """Start a connection test. The outcome arrives as an event.

        Raises ``FormInvalid`` if any field fails validation.
        """
        self._require_valid()
        return await test_connection(bridge, self.to_creds())


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


class AccountForm(_Form):
    """Create or edit an account.

    Editing starts from an existing ``Account``; the password field starts
    blank and only needs a value when creating.
    """

    fields = ("name", "server", "port", "color", "username", "password", "mailbox")

    def __init__(self, account: Account | None = None, config: BridgeConfig | None = None) -> None:
        config = config or BridgeConfig()
        self.account_id = account.id if account is not None else None
        if account is None:
            values: dict[str, FieldValue] = {
                "name": "",
                "server": "",
                "port": config.default_port,
                "color": config.default_color,
                "username": "",
                "password": "",
                "mailbox": config.default_mailbox,
            }
        else:
            values = {
                "name": account.name,
                "server": account.server,
                "port": account.port,
                "color": account.color,
                "username": account.username,
                "password": "",
                "mailbox": account.mailbox,
            }
        super().__init__(values)

    @property
    def is_new(self) -> bool:
        return self.account_id is None

    def validation_spec(self) -> dict[str, list[Rule]]:
        return {
            "name": [required()],
            "server": [required()],
            "port": [required(), is_number(), port()],
            "color": [one_of(*Color, message="Pick a color from the list")],
            "username": [required()],
            "password": [required_if(self.is_new)],
            "mailbox": [required()],
        }

    def to_new_account(self) -> NewAccount:
        return NewAccount(
            name=self._text("name"),
            server=self._text("server"),
            port=self._port(),
            color=self._text("color"),
            username=self._text("username"),
            password=str(self.values["password"]),
            mailbox=self._text("mailbox"),
        )

    def to_update(self) -> AccountUpdate:
        password = self.values["password"]
        return AccountUpdate(
            name=self._text("name"),
            server=self._text("server"),
            port=self._port(),
            color=self._text("color"),
            username=self._text("username"),
            mailbox=self._text("mailbox"),
            password=str(password) if password and str(password).strip() else None,
        )

    def connection_test_form(self) -> ConnectionTestForm:
        """A connection test form prefilled with this form's values."""
        return ConnectionTestForm(self.values)

    async def submit(self, bridge: CommandBridge) -> int | None:
        """Create or update the account.

        Returns the new id when creating and ``None`` when updating.
        Raises ``FormInvalid`` if any field fails validation.
        """
        self._require_valid()
        if self.account_id is None:
            account_id = await create_account(bridge, self.to_new_account())
            logger.info("Created account %s", account_id)
            self.account_id = account_id
            self.values["password"] = ""
            return account_id
        await update_account(bridge, self.account_id, self.to_update())
        logger.info("Updated account %s", self.account_id)
        return None


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class SettingsForm(_Form):
    """Notification, sound, and preview toggles. Unset toggles start off."""

    fields = ("notifications", "sound", "preview")

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        super().__init__(
            {
                "notifications": bool(settings.notifications),
                "sound": bool(settings.sound),
                "preview": bool(settings.preview),
            }
        )

    def validation_spec(self) -> dict[str, list[Rule]]:
        toggle = one_of("True", "False", message="Must be on or off")
        return {name: [toggle] for name in self.fields}

    def to_settings(self) -> Settings:
        return Settings(
            notifications=self.values["notifications"] is True,
            sound=self.values["sound"] is True,
            preview=self.values["preview"] is True,
        )

    async def submit(self, bridge: CommandBridge) -> Settings | None:
        """Save the toggles. Raises ``FormInvalid`` on a non-boolean value."""
        self._require_valid()
        return await update_settings(bridge, self.to_settings())
