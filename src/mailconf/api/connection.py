"""Connection test command and its result event.

The backend answers ``cmd_test_connection`` asynchronously: the command
returns immediately and the outcome arrives later as an event carrying
``"OK"`` or the server's error message. Subscribe before invoking.
"""

from collections.abc import Callable
from typing import Any

from mailconf.bridge import CommandBridge, Unlisten
from mailconf.models import ConnectionCreds, to_payload


async def test_connection(bridge: CommandBridge, creds: ConnectionCreds) -> Any:
    return await bridge.invoke("cmd_test_connection", {"attrs": to_payload(creds)})


async def on_test_connection_response(
    bridge: CommandBridge,
    callback: Callable[[str], None],
) -> Unlisten:
    """Call *callback* with each connection test result until unlistened."""
    return await bridge.listen(bridge.config.connection_test_event, callback)
