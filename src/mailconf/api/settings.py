"""Settings commands."""

from mailconf.bridge import CommandBridge
from mailconf.models import Settings, from_payload, to_payload


async def update_settings(bridge: CommandBridge, attrs: Settings) -> Settings | None:
    """Persist *attrs*. Returns the stored settings if the backend echoes them."""
    row = await bridge.invoke("cmd_update_settings", {"attrs": to_payload(attrs)})
    if row is None:
        return None
    return from_payload(Settings, row)


async def fetch_settings(bridge: CommandBridge) -> Settings | None:
    """Current settings, or ``None`` before any have been saved."""
    row = await bridge.invoke("cmd_fetch_settings")
    if row is None:
        return None
    return from_payload(Settings, row)
