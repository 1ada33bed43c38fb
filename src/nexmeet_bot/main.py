"""Application runner: Telegram bot and HTTP API on one event loop."""

import asyncio
import logging
import signal
import sys
from typing import List, Optional

from dotenv import load_dotenv
from uvicorn import Config, Server

from .agent.interpreter import QueryInterpreter
from .api.app import create_app
from .bot.telegram_bot import TelegramBot
from .config.settings import Settings
from .sessions.store import SessionStore
from .store.gateway import EventGateway


class AsyncApplication:
    """Fully async application class that orchestrates the bot and the API."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.gateway: Optional[EventGateway] = None
        self.interpreter: Optional[QueryInterpreter] = None
        self.sessions: Optional[SessionStore] = None
        self.telegram_bot: Optional[TelegramBot] = None
        self.api_server: Optional[Server] = None
        self.running = False
        self._shutdown_event = asyncio.Event()

    async def initialize(self) -> None:
        """Initialize the gateway, AI interpreter, bot and HTTP server."""
        try:
            logging.info("Initializing application components...")

            self.gateway = EventGateway(self.settings)
            await self.gateway.initialize()

            self.interpreter = QueryInterpreter(self.settings)
            await self.interpreter.initialize()

            self.sessions = SessionStore(ttl_seconds=self.settings.session_ttl_seconds)

            if self.settings.telegram_bot_token:
                self.telegram_bot = TelegramBot(self.settings, self.gateway, self.interpreter, self.sessions)
                await self.telegram_bot.initialize()
            else:
                logging.warning("TELEGRAM_BOT_TOKEN not set, running the HTTP API only")

            app = create_app(self.settings, self.gateway)
            config = Config(
                app=app,
                host=self.settings.host,
                port=self.settings.port,
                log_level=self.settings.log_level.lower(),
            )
            self.api_server = Server(config)

            logging.info("Application initialized successfully")

        except Exception as e:
            logging.error(f"Failed to initialize application: {e}")
            raise

    async def start(self) -> None:
        """Start the application asynchronously."""
        try:
            await self.initialize()
            self.running = True

            self._setup_signal_handlers()

            logging.info(f"Server is running on port {self.settings.port}")

            tasks: List[asyncio.Task] = [asyncio.create_task(self.api_server.serve())]
            if self.telegram_bot:
                tasks.append(asyncio.create_task(self.telegram_bot.start_polling_async()))
            tasks.append(asyncio.create_task(self._shutdown_event.wait()))

            # Stop everything as soon as any service exits or a signal arrives
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)

            for task in done:
                if not task.cancelled() and task.exception():
                    logging.error("Service stopped with an error", exc_info=task.exception())

            if self.api_server:
                self.api_server.should_exit = True
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        except asyncio.CancelledError:
            logging.info("Application cancelled")
        except Exception as e:
            logging.error(f"Failed to start application: {e}")
            raise
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Shutdown the application gracefully."""
        if not self.running:
            return

        logging.info("Initiating graceful shutdown...")
        self.running = False

        try:
            # Shutdown components in reverse order
            if self.telegram_bot:
                await self.telegram_bot.shutdown()

            if self.interpreter:
                await self.interpreter.shutdown()

            if self.gateway:
                await self.gateway.shutdown()

            logging.info("Application shutdown complete")
        except Exception as e:
            logging.error(f"Error during shutdown: {e}")

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            logging.info(f"Received signal {signum}, initiating shutdown...")
            self._shutdown_event.set()

        signal.signal(signal.SIGINT, signal_handler)
        if hasattr(signal, 'SIGTERM'):
            signal.signal(signal.SIGTERM, signal_handler)


def configure_logging(settings: Settings) -> None:
    """Configure root logging for the whole process."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, mode='a'))

    logging.basicConfig(
        level=settings.get_log_level(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    # httpx logs every Telegram long-poll request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def main() -> None:
    """Fully async main function."""
    load_dotenv()

    # Fails fast when SUPABASE_URL or SUPABASE_KEY is missing
    settings = Settings()
    configure_logging(settings)

    app = AsyncApplication(settings)
    await app.start()


def cli() -> None:
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.info("Application interrupted by user")
    except Exception as e:
        logging.error(f"Application failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
