"""Bridge configuration.

One ``BridgeConfig`` is shared by a bridge and the forms built around it:
command timeout, the connection-test event name, and the values a new
account form starts with.
"""

from dataclasses import dataclass

from mailconf.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class BridgeConfig:
    """Command bridge and form defaults. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = BridgeConfig(command_timeout=5.0, default_port=143)
    """

    # Commands
    command_timeout: float = 30.0  # Seconds before a command is abandoned

    # Events
    connection_test_event: str = "connection_test_result"

    # New account defaults
    default_port: int = 993  # IMAP over TLS
    default_mailbox: str = "INBOX"
    default_color: str = "sky"

    def __post_init__(self) -> None:
        if self.command_timeout <= 0:
            msg = f"command_timeout must be positive, got {self.command_timeout!r}"
            raise ConfigurationError(msg)
        if not self.connection_test_event:
            msg = "connection_test_event must not be empty"
            raise ConfigurationError(msg)
