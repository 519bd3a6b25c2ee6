"""Account commands."""

from typing import Any

from mailconf.bridge import CommandBridge
from mailconf.models import Account, AccountUpdate, NewAccount, from_payload, to_payload


async def create_account(bridge: CommandBridge, attrs: NewAccount) -> int:
    """Store a new account. Returns its id."""
    account_id = await bridge.invoke("cmd_create_account", {"attrs": to_payload(attrs)})
    return int(account_id)


async def update_account(bridge: CommandBridge, id: int, attrs: AccountUpdate) -> None:  # noqa: A002
    """Update an account. A blank password keeps the stored one."""
    payload = to_payload(attrs)
    if not (attrs.password or "").strip():
        payload.pop("password", None)
    await bridge.invoke("cmd_update_account", {"id": id, "attrs": payload})


async def delete_account(bridge: CommandBridge, id: int) -> None:  # noqa: A002
    await bridge.invoke("cmd_delete_account", {"id": id})


async def find_account(bridge: CommandBridge, id: int) -> Account | None:  # noqa: A002
    row: dict[str, Any] | None = await bridge.invoke("cmd_find_account", {"id": id})
    if row is None:
        return None
    return from_payload(Account, row)


async def list_accounts(bridge: CommandBridge) -> list[Account]:
    """All accounts, in the order the backend returns them (newest first)."""
    rows: list[dict[str, Any]] = await bridge.invoke("cmd_list_accounts")
    return [from_payload(Account, row) for row in rows or ()]
