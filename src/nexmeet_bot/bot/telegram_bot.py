"""Telegram bot implementation with polling mechanism."""

import asyncio
import logging
from datetime import datetime, timezone
from functools import partial
from typing import Awaitable, Callable, List, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters
)

from .conversation import Reply, SearchConversation, send_events
from .formatting import format_event_message
from ..agent.interpreter import QueryInterpreter
from ..config.settings import Settings
from ..sessions.models import PendingInteraction
from ..sessions.store import SessionStore
from ..store.gateway import EventGateway
from ..store.models import Event


logger = logging.getLogger(__name__)

ACTIVE_HACKATHONS = "active_hackathons"
PAST_EVENTS = "past_events"
SEARCH_LOCATION = "search_location"
SEARCH_CATEGORY = "search_category"
POPULAR_EVENTS = "popular_events"

MAIN_MENU = InlineKeyboardMarkup([
    [
        InlineKeyboardButton("🎯 Active Hackathons", callback_data=ACTIVE_HACKATHONS),
        InlineKeyboardButton("📜 Past Events", callback_data=PAST_EVENTS),
    ],
    [
        InlineKeyboardButton("🌍 Search by Location", callback_data=SEARCH_LOCATION),
        InlineKeyboardButton("🏷️ Search by Category", callback_data=SEARCH_CATEGORY),
    ],
    [InlineKeyboardButton("📊 Most Popular Events", callback_data=POPULAR_EVENTS)],
])

WELCOME_MESSAGE = """
Welcome to the Event Bot! 🎉

I can help you discover amazing events and hackathons. Here's what you can do:

• Browse active hackathons
• View past events
• Search events by location
• Filter by category
• See popular events

Please select an option from the menu below:
"""

ABOUT_MESSAGE = """
🌟 *Welcome to NexMeet Bot* 🌟

*What's NexMeet?*
NexMeet is your go-to platform for organizing and discovering college and social events. We make event planning fun and hassle-free!

🎯 *Our Mission*
"What's cooler than Networking? Nothing dude." We believe in bringing people together and creating meaningful connections.

🤖 *Why Use NexMeet Bot?*
• Instant access to events right in Telegram
• Save time browsing - get event updates directly
• AI-powered personalized recommendations
• Real-time notifications for new events

✨ *Platform Features*:
• Event Space Discovery
• Multi-category Event Support
• Networking Opportunities
• Personal Growth Tracking
• Registration & Ticket Management
• Selective Invitation System

💡 *Bot Commands*:
1. /start - Open main menu
2. /about - Learn about NexMeet
3. /ask - AI-powered event search

🤝 *Community Partners*:
• Lamit Club
• Delhi NCR DAO
• DevSource
• DevLearn

🌐 *Website*: www.nexmeet.social

Join our vibrant community of event organizers and attendees. Whether you're hosting a technical workshop or looking for creative meetups, NexMeet has you covered!
"""

FETCH_FAILED = "Sorry, there was an error fetching the events. Please try again later."
SELECTION_FAILED = "Sorry, there was an error processing your selection. Please try again."
ASK_FAILED = "Sorry, I couldn't process your request right now. Please try again later."
ASK_USAGE = "Please tell me what you're looking for, e.g. /ask hackathons in Delhi this month"
UNKNOWN_OPTION = "Unknown option, please use /start to see the menu."


class TelegramBot:
    """Telegram bot with polling mechanism, event search and AI-assisted queries."""

    def __init__(
        self,
        settings: Settings,
        gateway: EventGateway,
        interpreter: QueryInterpreter,
        sessions: SessionStore,
    ):
        """Initialize the Telegram bot.

        Args:
            settings: Application configuration
            gateway: Read access to the events table
            interpreter: The AI agent used by /ask
            sessions: Pending follow-up questions per chat
        """
        self.settings = settings
        self.gateway = gateway
        self.interpreter = interpreter
        self.sessions = sessions
        self.render = partial(
            format_event_message,
            event_url_base=settings.event_url_base,
            currency_symbol=settings.currency_symbol,
        )
        self.conversation = SearchConversation(sessions, gateway, self.render)
        self.application: Optional[Application] = None
        self.initialized = False

    async def initialize(self) -> None:
        """Initialize the Telegram bot application."""
        if not self.settings.telegram_bot_token:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is not configured")

        try:
            logger.info("Initializing Telegram bot...")

            self.application = Application.builder().token(self.settings.telegram_bot_token).build()

            self.application.add_handler(CommandHandler("start", self.start_command))
            self.application.add_handler(CommandHandler("about", self.about_command))
            self.application.add_handler(CommandHandler("ask", self.ask_command))
            self.application.add_handler(CallbackQueryHandler(self.handle_callback))

            # Free text answers pending location/category questions
            self.application.add_handler(
                MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_message)
            )

            self.application.add_error_handler(self.error_handler)

            self.initialized = True
            logger.info("Telegram bot initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize Telegram bot: {e}")
            raise

    async def start_polling_async(self) -> None:
        """Start the bot polling for messages."""
        if not self.initialized or not self.application:
            raise RuntimeError("Bot not initialized")

        logger.info("Starting Telegram bot polling...")
        try:
            # Manual lifecycle management since the event loop is already running
            await self.application.initialize()
            await self.application.start()
            await self.application.updater.start_polling(
                poll_interval=self.settings.polling_interval,
                timeout=self.settings.request_timeout
            )

            try:
                while self.initialized:
                    await asyncio.sleep(1)
            except asyncio.CancelledError:
                logger.info("Polling cancelled")

        except asyncio.CancelledError:
            logger.info("Polling cancelled")
        except Exception as e:
            logger.error(f"Error during async polling: {e}")
            raise
        finally:
            try:
                if self.application:
                    await self.application.updater.stop()
                    await self.application.stop()
                    await self.application.shutdown()
            except Exception as e:
                logger.error(f"Error during polling cleanup: {e}")

    async def shutdown(self) -> None:
        """Stop the polling loop."""
        if self.initialized:
            logger.info("Stopping Telegram bot...")
            self.initialized = False  # This will trigger the polling loop to exit
            logger.info("Telegram bot shutdown complete")

    @staticmethod
    def _reply_to(chat_id: int, context: ContextTypes.DEFAULT_TYPE) -> Reply:
        return partial(context.bot.send_message, chat_id)

    async def start_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /start command."""
        reply = self._reply_to(update.effective_chat.id, context)
        try:
            await reply(WELCOME_MESSAGE, reply_markup=MAIN_MENU)
        except Exception as e:
            logger.error(f"Error sending welcome message: {e}")
            await reply("Sorry, there was an error showing the menu. Please try /start again.")

    async def about_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /about command."""
        reply = self._reply_to(update.effective_chat.id, context)
        try:
            await reply(ABOUT_MESSAGE, parse_mode=ParseMode.MARKDOWN)
        except Exception as e:
            logger.error(f"Error sending about message: {e}")
            await reply("Sorry, there was an error showing the about information. Please try again.")

    async def ask_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle /ask: interpret the query with AI, then search descriptions."""
        chat_id = update.effective_chat.id
        reply = self._reply_to(chat_id, context)

        parts = (update.message.text or "").split(maxsplit=1)
        query = parts[1].strip() if len(parts) > 1 else ""
        if not query:
            await reply(ASK_USAGE)
            return

        try:
            logger.info(f"AI search from chat {chat_id}: {query[:50]}...")
            await reply("🤖 Processing your request with AI...")

            interpretation = await self.interpreter.interpret(query)
            await reply(f"💡 {interpretation}")
            await reply("🔍 Searching for matching events...")

            # The raw query drives the search; the interpretation is informational
            events = await self.gateway.search_by_text(query)

            if not events:
                await reply("📭 I couldn't find any events matching your criteria.")
                return
            await reply(f"✨ Found {len(events)} events that might interest you:")
            await send_events(reply, events, self.render)

        except Exception as e:
            logger.error(f"Error processing AI query from chat {chat_id}: {e}")
            await reply(ASK_FAILED)

    async def handle_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle main menu button presses."""
        callback_query = update.callback_query
        if update.effective_chat is None:
            # Callbacks from inline messages carry no chat to reply in
            logger.warning(f"Callback query without a chat: {callback_query.data}")
            await callback_query.answer(SELECTION_FAILED)
            return

        chat_id = update.effective_chat.id
        reply = self._reply_to(chat_id, context)
        action = callback_query.data

        try:
            await callback_query.answer()
            now = datetime.now(timezone.utc)

            if action == ACTIVE_HACKATHONS:
                await reply("🔍 Searching for active hackathons...")
                await self._send_listing(
                    reply, lambda: self.gateway.list_active(now),
                    "No active hackathons found at the moment."
                )
            elif action == PAST_EVENTS:
                await reply("🔍 Fetching past events...")
                await self._send_listing(reply, lambda: self.gateway.list_past(now), "No past events found.")
            elif action == SEARCH_LOCATION:
                await self.conversation.prompt(chat_id, PendingInteraction.AWAITING_LOCATION, reply)
            elif action == SEARCH_CATEGORY:
                await self.conversation.prompt(chat_id, PendingInteraction.AWAITING_CATEGORY, reply)
            elif action == POPULAR_EVENTS:
                await reply("🔍 Finding the most popular events...")
                await self._send_listing(reply, self.gateway.list_popular, "No events found.")
            else:
                logger.warning(f"Unknown callback action from chat {chat_id}: {action}")
                await reply(UNKNOWN_OPTION)

        except Exception as e:
            logger.error(f"Error handling callback query: {e}")
            await reply(SELECTION_FAILED)

    async def _send_listing(
        self,
        reply: Reply,
        fetch: Callable[[], Awaitable[List[Event]]],
        empty_message: str,
    ) -> None:
        try:
            events = await fetch()
            if not events:
                await reply(empty_message)
                return
            await send_events(reply, events, self.render)
        except Exception as e:
            logger.error(f"Error fetching events: {e}")
            await reply(FETCH_FAILED)

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle incoming text messages."""
        if not update.message or not update.message.text:
            return

        chat_id = update.effective_chat.id
        handled = await self.conversation.handle_text(
            chat_id, update.message.text, self._reply_to(chat_id, context)
        )
        if handled:
            logger.info(f"Answered pending search for chat {chat_id}")

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle errors that occur during bot operation."""
        logger.error(f"Bot error - Update: {update}, Context: {context.error}")

        if isinstance(update, Update) and update.effective_chat:
            try:
                await context.bot.send_message(
                    chat_id=update.effective_chat.id,
                    text="Sorry, I encountered an unexpected error. Please try again later."
                )
            except Exception as e:
                logger.error(f"Failed to send error message: {e}")

    def is_ready(self) -> bool:
        """Check if the bot is ready to process messages."""
        return self.initialized and self.application is not None
