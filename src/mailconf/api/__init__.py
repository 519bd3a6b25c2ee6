"""Typed wrappers over the backend commands.

Each function marshals its arguments into the payload a named command
expects and maps the result back onto ``mailconf.models``::

    from mailconf.api import list_accounts

    accounts = await list_accounts(bridge)
"""

from mailconf.api.accounts import (
    create_account,
    delete_account,
    find_account,
    list_accounts,
    update_account,
)
from mailconf.api.connection import on_test_connection_response, test_connection
from mailconf.api.settings import fetch_settings, update_settings

__all__ = [
    "create_account",
    "delete_account",
    "fetch_settings",
    "find_account",
    "list_accounts",
    "on_test_connection_response",
    "test_connection",
    "update_account",
    "update_settings",
]
