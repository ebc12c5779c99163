"""Application entry point for squawker."""

import argparse
import asyncio
import signal
import sys
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from squawker.application.handlers.event_handlers import (
    EventHandlerRegistry,
    PushEventHandler,
    TokenEventHandler,
)
from squawker.application.services.event_dispatcher import EventDispatcher
from squawker.application.services.ingestion import SquawkIngestionService
from squawker.application.services.subscription_manager import SubscriptionManager
from squawker.config import (
    AppConfig,
    ConfigError,
    ConfigFileNotFoundError,
    load_config,
)
from squawker.domain.entities.event import Event, EventType
from squawker.domain.gateways.topic_transport import TopicTransport
from squawker.infrastructure import (
    AlertBoard,
    ChangeNotifier,
    Database,
    EventQueue,
    SqlitePreferenceStore,
    SqliteSquawkStore,
    SquawkProvider,
    create_transport,
)
from squawker.infrastructure.logging import get_logger, setup_logging
from squawker.presentation.feed import SquawkFeed
from squawker.presentation.http.server import HTTPServer

# Shutdown timeout in seconds
SHUTDOWN_TIMEOUT = 30


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        args: Command line arguments. If None, uses sys.argv.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        description="squawker - Push-fed squawk store with topic subscriptions"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to configuration file (default: config.yaml)",
    )
    return parser.parse_args(args)


def create_dispatcher(
    config: AppConfig,
    provider: SquawkProvider,
    alerts: AlertBoard,
    transport: TopicTransport,
) -> EventDispatcher:
    """Wire the event handlers into a dispatcher."""
    ingestion = SquawkIngestionService(
        provider=provider,
        alerts=alerts,
        config=config.notification,
        logger=get_logger("ingestion"),
    )
    registry = EventHandlerRegistry()
    registry.register(
        EventType.PUSH, PushEventHandler(ingestion, logger=get_logger("push"))
    )
    registry.register(
        EventType.NEW_TOKEN, TokenEventHandler(transport, logger=get_logger("push"))
    )
    return EventDispatcher(registry, logger=get_logger("dispatcher"))


async def run_main_loop(
    event_queue: EventQueue,
    dispatcher: EventDispatcher,
    shutdown_event: asyncio.Event,
    running_check: Callable[[], bool],
    logger: BoundLogger,
) -> None:
    """Run the main event processing loop.

    Args:
        event_queue: EventQueue instance for retrieving events.
        dispatcher: EventDispatcher instance for processing events.
        shutdown_event: Event that signals shutdown.
        running_check: Callable that returns whether the loop should continue.
        logger: Logger instance.
    """
    while running_check():
        dequeue_task = asyncio.create_task(event_queue.dequeue())
        shutdown_task = asyncio.create_task(shutdown_event.wait())

        try:
            done, pending = await asyncio.wait(
                [dequeue_task, shutdown_task],
                return_when=asyncio.FIRST_COMPLETED,
            )

            for task in pending:
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

            if dequeue_task in done:
                event = dequeue_task.result()
                await _process_event(event, dispatcher, event_queue, logger)

            if shutdown_task in done:
                break

        except asyncio.CancelledError:
            dequeue_task.cancel()
            shutdown_task.cancel()
            try:
                await dequeue_task
            except asyncio.CancelledError:
                pass
            try:
                await shutdown_task
            except asyncio.CancelledError:
                pass
            raise


async def _process_event(
    event: Event,
    dispatcher: EventDispatcher,
    event_queue: EventQueue,
    logger: BoundLogger,
) -> None:
    """Process a single event.

    Errors are logged and end only this event's processing.
    """
    try:
        await dispatcher.process(event)
    except Exception as e:
        logger.error("Error processing event", event_id=event.id, error=str(e))
    finally:
        event_queue.mark_done(event)


async def main_async(
    config_path: Path,
    shutdown_timeout: float = SHUTDOWN_TIMEOUT,
) -> int:
    """Async main function.

    Args:
        config_path: Path to configuration file.
        shutdown_timeout: Maximum time in seconds to wait for graceful shutdown.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    # 1. Load configuration
    config = load_config(config_path)

    # 2. Initialize logging
    setup_logging(config.logging)
    logger = get_logger(__name__)
    logger.info("Starting squawker", config_path=str(config_path))

    # 3. Open the database
    database = Database(config.database.url, config.database.schema_version)
    await database.initialize()

    # 4. Initialize components
    toggle_keys = config.following.author_keys
    notifier = ChangeNotifier(logger=get_logger("notifier"))
    store = SqliteSquawkStore(database, notifier)
    provider = SquawkProvider(store)
    preferences = SqlitePreferenceStore(database, logger=get_logger("preferences"))
    alerts = AlertBoard(logger=get_logger("alerts"))
    transport = create_transport(config.transport)
    subscriptions = SubscriptionManager(
        transport, toggle_keys, logger=get_logger("subscriptions")
    )
    preferences.register_listener(subscriptions.on_preference_changed)

    event_queue = EventQueue()
    dispatcher = create_dispatcher(config, provider, alerts, transport)
    feed = SquawkFeed(
        provider,
        notifier,
        preferences,
        toggle_keys,
        logger=get_logger("feed"),
    )
    http_server = HTTPServer(
        config=config.server,
        event_queue=event_queue,
        feed=feed,
        provider=provider,
        preferences=preferences,
        alerts=alerts,
        toggle_keys=toggle_keys,
        logger=get_logger("http_server"),
    )

    # 5. Setup shutdown handling
    running = True
    shutdown_event = asyncio.Event()

    def is_running() -> bool:
        return running

    def signal_handler(sig: signal.Signals) -> None:
        nonlocal running
        logger.info("Received signal, initiating shutdown", signal=sig.name)
        running = False
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler, sig)

    try:
        # 6. Start feed and HTTP server
        feed.start()
        await http_server.start()
        logger.info("squawker started successfully")

        # 7. Run main loop
        await run_main_loop(
            event_queue=event_queue,
            dispatcher=dispatcher,
            shutdown_event=shutdown_event,
            running_check=is_running,
            logger=logger,
        )

    except asyncio.CancelledError:
        logger.info("Main loop cancelled")

    finally:
        # 8. Shutdown
        logger.info("Shutting down")
        try:
            await asyncio.wait_for(http_server.stop(), timeout=shutdown_timeout)
        except TimeoutError:
            logger.warning(
                "Shutdown timed out, forcing termination",
                timeout_seconds=shutdown_timeout,
            )
        await feed.close()
        await subscriptions.close()
        preferences.unregister_listener(subscriptions.on_preference_changed)
        await transport.close()
        await database.close()
        logger.info("squawker stopped")

    return 0


def main() -> None:
    """Main entry point."""
    args = parse_args()
    config_path = args.config

    try:
        exit_code = asyncio.run(main_async(config_path))
        sys.exit(exit_code)
    except ConfigFileNotFoundError:
        print(f"Error: {config_path} not found", file=sys.stderr)
        sys.exit(1)
    except ConfigError as e:
        print(f"Error: Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValidationError as e:
        print(f"Error: Configuration validation error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    main()
