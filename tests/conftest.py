"""Shared fixtures: a bridge wired to an in-memory native layer."""

from typing import Any

import pytest

from mailconf.bridge import CommandBridge
from mailconf.config import BridgeConfig


class FakeBackend:
    """In-memory stand-in for the native command layer.

    Registers the same command names the real layer exposes. Passwords
    are kept apart from account rows, the way the keychain keeps them.
    """

    def __init__(self, bridge: CommandBridge) -> None:
        self.bridge = bridge
        self.accounts: dict[int, dict[str, Any]] = {}
        self.passwords: dict[int, str] = {}
        self.settings: dict[str, Any] | None = None
        self.tested: list[dict[str, Any]] = []
        self._next_id = 1

        bridge.register("cmd_create_account", self.create_account)
        bridge.register("cmd_update_account", self.update_account)
        bridge.register("cmd_delete_account", self.delete_account)
        bridge.register("cmd_find_account", self.find_account)
        bridge.register("cmd_list_accounts", self.list_accounts)
        bridge.register("cmd_update_settings", self.update_settings)
        bridge.register("cmd_fetch_settings", self.fetch_settings)
        bridge.register("cmd_test_connection", self.check_connection)

    def create_account(self, attrs: dict[str, Any]) -> int:
        attrs = dict(attrs)
        account_id = self._next_id
        self._next_id += 1
        self.passwords[account_id] = attrs.pop("password")
        self.accounts[account_id] = {**attrs, "id": account_id, "active": True}
        return account_id

    def update_account(self, id: int, attrs: dict[str, Any]) -> None:  # noqa: A002
        if id not in self.accounts:
            msg = f"no account {id}"
            raise LookupError(msg)
        attrs = dict(attrs)
        password = attrs.pop("password", None)
        self.accounts[id].update(attrs)
        if password is not None and password.strip():
            self.passwords[id] = password

    def delete_account(self, id: int) -> None:  # noqa: A002
        if self.accounts.pop(id, None) is None:
            msg = f"no account {id}"
            raise LookupError(msg)
        self.passwords.pop(id, None)

    def find_account(self, id: int) -> dict[str, Any] | None:  # noqa: A002
        row = self.accounts.get(id)
        return dict(row) if row is not None else None

    def list_accounts(self) -> list[dict[str, Any]]:
        return [dict(self.accounts[k]) for k in sorted(self.accounts, reverse=True)]

    def update_settings(self, attrs: dict[str, Any]) -> dict[str, Any]:
        self.settings = {**(self.settings or {}), **attrs}
        return dict(self.settings)

    def fetch_settings(self) -> dict[str, Any] | None:
        return dict(self.settings) if self.settings is not None else None

    def check_connection(self, attrs: dict[str, Any]) -> None:
        self.tested.append(attrs)
        result = "OK" if attrs["password"] == "secret" else "Authentication failed"
        self.bridge.emit_sync(self.bridge.config.connection_test_event, result)


@pytest.fixture
def bridge() -> CommandBridge:
    return CommandBridge(BridgeConfig(command_timeout=5.0))


@pytest.fixture
def backend(bridge: CommandBridge) -> FakeBackend:
    return FakeBackend(bridge)
