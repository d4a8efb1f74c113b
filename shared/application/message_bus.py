"""
Message Bus

Routes lifecycle commands to their handler and domain events to their
subscribers. Apps wire themselves in ``AppConfig.ready()``:

- availability: AddBlockCommand, DeleteBlockCommand
- borrowing: Create / Approve / Reject / DeleteBorrowRequestCommand
- notifications: subscribers for the BorrowRequest* events

Events reach the bus only after the unit of work has committed.
"""

from time import perf_counter
from typing import Any, Callable, Dict, Iterable, List, Mapping, Type
import logging

from shared.domain.base import DomainEvent
from shared.domain.exceptions import DomainError

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Any], Any]
EventHandler = Callable[[DomainEvent], None]


def _name(handler) -> str:
    return getattr(handler, '__qualname__', None) or repr(handler)


class MessageBus:
    """
    Message bus for commands and events

    Commands: exactly one handler per command type
    Events: any number of subscribers per event type, run in
    registration order
    """

    def __init__(self):
        self._command_handlers: Dict[Type, CommandHandler] = {}
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    # ===== Registration =====

    def register_command_handler(self, command_type: Type, handler: CommandHandler):
        if command_type in self._command_handlers:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def register_command_handlers(self, handlers: Mapping[Type, Any]):
        """
        Register the ``handle`` method of every handler object in ``handlers``

        Command types that already have a handler are left as they are, so
        calling this twice for the same app is harmless.
        """
        for command_type, handler in handlers.items():
            if self.has_command_handler(command_type):
                continue
            self.register_command_handler(command_type, handler.handle)

    def has_command_handler(self, command_type: Type) -> bool:
        return command_type in self._command_handlers

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler`` to ``event_type``; subscribing twice is a no-op."""
        subscribers = self._event_handlers.setdefault(event_type, [])
        if handler not in subscribers:
            subscribers.append(handler)
            logger.debug(f"Subscribed {_name(handler)} to {event_type.__name__}")

    def register_event_handlers(self, handlers: Mapping[Type[DomainEvent], Iterable[EventHandler]]):
        for event_type, subscribers in handlers.items():
            for handler in subscribers:
                self.register_event_handler(event_type, handler)

    # ===== Dispatch =====

    def handle_command(self, command: Any) -> Any:
        """
        Run the handler of ``command`` and return its result

        Domain errors reach the caller unchanged; they are refusals, not
        failures, and are logged at info level.
        """
        command_name = type(command).__name__
        handler = self._command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"No handler registered for command {command_name}")

        actor = getattr(command, 'actor_id', None)
        started = perf_counter()
        logger.info(f"Handling command: {command_name} (actor {actor})")
        try:
            result = handler(command)
        except DomainError as e:
            logger.info(f"Command {command_name} refused: {e.code}: {e.detail}")
            raise
        except Exception as e:
            logger.error(f"Error handling command {command_name}: {e}", exc_info=True)
            raise
        logger.debug(f"Command {command_name} handled in {(perf_counter() - started) * 1000:.1f} ms")
        return result

    def publish_events(self, events: List[DomainEvent]):
        """
        Deliver committed events to their subscribers

        A failing subscriber is logged and skipped; the transition that
        raised the event has already committed and is never affected.
        """
        for event in events:
            event_name = type(event).__name__
            subscribers = self._event_handlers.get(type(event), [])
            if not subscribers:
                logger.warning(f"No handlers registered for event {event_name}")
                continue

            logger.info(f"Publishing event: {event_name} (ID: {event.event_id})")
            for handler in subscribers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Error in event handler {_name(handler)} for event {event_name}: {e}",
                        exc_info=True,
                    )


# Process-wide bus the apps register on
message_bus = MessageBus()
