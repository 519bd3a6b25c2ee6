"""Command bridge — named backend commands and backend events.

The native layer exposes operations as named commands (``cmd_create_account``,
``cmd_fetch_settings``, ...) that take a dict of keyword arguments and return
a value or fail. It also pushes events (``connection_test_result``) that the
forms listen for.

``CommandBridge`` is the in-process side of that boundary:

- ``register()``/``command()`` bind a handler to a command name.
- ``invoke()`` dispatches by name, bounded by ``BridgeConfig.command_timeout``.
  Sync handlers run in an anyio worker thread so they never block the loop.
  Any handler failure surfaces as ``CommandError``.
- ``listen()``/``emit_sync()`` deliver events to per-event listeners.

Usage::

    bridge = CommandBridge()

    @bridge.command("cmd_list_accounts")
    def list_accounts() -> list[dict]:
        return store.all()

    accounts = await bridge.invoke("cmd_list_accounts")

Thread safety:
    - The command table is only written during setup
    - The listener table is guarded by a Lock so events may be emitted
      from worker threads
"""

import functools
import inspect
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

import anyio

from mailconf.config import BridgeConfig
from mailconf.errors import CommandError, CommandNotFound, CommandTimeout, ConfigurationError

logger = logging.getLogger("mailconf.bridge")

EventCallback: TypeAlias = Callable[[Any], None]
Unlisten: TypeAlias = Callable[[], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class CommandDef:
    """A registered command: its name and the handler that serves it."""

    name: str
    handler: Callable[..., Any]


def _run_sync(func: Callable[..., Any], arguments: dict[str, Any]) -> Awaitable[Any]:
    """Run a blocking handler in an anyio worker thread."""
    return anyio.to_thread.run_sync(
        functools.partial(func, **arguments),
        abandon_on_cancel=True,
    )


class CommandBridge:
    """Named-command dispatch plus an event channel to the native layer."""

    __slots__ = ("_commands", "_config", "_listeners", "_lock")

    def __init__(self, config: BridgeConfig | None = None) -> None:
        self._config = config or BridgeConfig()
        self._commands: dict[str, CommandDef] = {}
        # event name -> callbacks in registration order
        self._listeners: dict[str, list[EventCallback]] = {}
        self._lock = threading.Lock()

    @property
    def config(self) -> BridgeConfig:
        return self._config

    # -- Commands -------------------------------------------------------------

    def register(self, name: str, handler: Callable[..., Any]) -> None:
        """Bind *handler* to the command *name*.

        Raises ``ConfigurationError`` if the name is already taken.
        """
        if name in self._commands:
            msg = f"Duplicate command name: {name!r}"
            raise ConfigurationError(msg)
        self._commands[name] = CommandDef(name=name, handler=handler)

    def command(self, name: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator form of ``register()``."""

        def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
            self.register(name, handler)
            return handler

        return decorator

    async def invoke(self, name: str, payload: dict[str, Any] | None = None) -> Any:
        """Dispatch a command by name and return its result.

        Raises ``CommandNotFound`` for unknown names, ``CommandTimeout``
        when the handler outlives ``command_timeout``, and ``CommandError``
        (chained to the original exception) for any other failure.
        """
        command = self._commands.get(name)
        if command is None:
            raise CommandNotFound(name)

        arguments = payload or {}
        timeout = self._config.command_timeout
        logger.debug("Invoking %s with fields %s", name, sorted(arguments))

        try:
            with anyio.fail_after(timeout) as scope:
                if inspect.iscoroutinefunction(command.handler):
                    return await command.handler(**arguments)
                return await _run_sync(command.handler, arguments)
        except CommandError:
            raise
        except TimeoutError as exc:
            # Only our own deadline is a CommandTimeout; a handler's socket
            # timeout is an ordinary command failure.
            if not scope.cancelled_caught:
                logger.warning("Command %s failed: %s", name, exc)
                raise CommandError(name, str(exc) or type(exc).__name__) from exc
            logger.warning("Command %s timed out after %ss", name, timeout)
            raise CommandTimeout(name, timeout) from exc
        except Exception as exc:
            logger.warning("Command %s failed: %s", name, exc)
            raise CommandError(name, str(exc) or type(exc).__name__) from exc

    def commands(self) -> list[str]:
        """Registered command names, in registration order."""
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    # -- Events ---------------------------------------------------------------

    async def listen(self, event: str, callback: EventCallback) -> Unlisten:
        """Call *callback* with the payload of every *event*.

        Returns a coroutine function that removes the listener. Calling it
        more than once is harmless.
        """
        with self._lock:
            self._listeners.setdefault(event, []).append(callback)

        async def unlisten() -> None:
            with self._lock:
                callbacks = self._listeners.get(event)
                if callbacks is None or callback not in callbacks:
                    return
                callbacks.remove(callback)
                if not callbacks:
                    del self._listeners[event]

        return unlisten

    def emit_sync(self, event: str, payload: Any) -> None:
        """Deliver *payload* to every listener of *event* (from any thread)."""
        with self._lock:
            callbacks = list(self._listeners.get(event, ()))
        logger.debug("Emitting %s to %d listener(s)", event, len(callbacks))
        for callback in callbacks:
            callback(payload)

    async def emit(self, event: str, payload: Any) -> None:
        """Async version of ``emit_sync()``."""
        self.emit_sync(event, payload)
