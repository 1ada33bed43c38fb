"""Pydantic AI agent that interprets free-text event queries with Mistral."""

import logging
from typing import Optional

from pydantic_ai import Agent
from pydantic_ai.models import Model

from ..config.settings import Settings


logger = logging.getLogger(__name__)

QUERY_PROMPT = (
    'Given this event query: "{query}", help me understand what kind of events '
    "the user is looking for. Consider factors like timing, category, and location."
)


class InterpretationError(Exception):
    """The AI service could not interpret a query."""


class QueryInterpreter:
    """Explains the intent behind a user's event query.

    The explanation is informational only; it is never used to build the
    store query.
    """

    def __init__(self, settings: Settings, model: Optional[Model] = None):
        """Initialize the interpreter.

        Args:
            settings: Application configuration settings
            model: Model to use instead of Mistral, e.g. a TestModel
        """
        self.settings = settings
        self.model = model
        self.agent: Optional[Agent] = None
        self.initialized = False

    async def initialize(self) -> None:
        """Create the agent, building the Mistral model if none was given."""
        try:
            if self.model is None:
                if not self.settings.mistral_api_key:
                    logger.warning("MISTRAL_API_KEY not set, AI-assisted search disabled")
                    return

                logger.info(f"Initializing query interpreter with {self.settings.mistral_model_name}...")
                from pydantic_ai.models.mistral import MistralModel
                from pydantic_ai.providers.mistral import MistralProvider

                self.model = MistralModel(
                    self.settings.mistral_model_name,
                    provider=MistralProvider(api_key=self.settings.mistral_api_key),
                )

            self.agent = Agent(model=self.model)
            self.initialized = True
            logger.info("Query interpreter initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize query interpreter: {e}")
            raise

    async def shutdown(self) -> None:
        """Release the agent."""
        self.agent = None
        self.initialized = False
        logger.info("Query interpreter shutdown complete")

    async def interpret(self, query: str) -> str:
        """Ask the model what kind of events the query describes.

        Args:
            query: The user's raw query text

        Returns:
            Natural-language explanation of the user's intent

        Raises:
            InterpretationError: If the agent is unavailable or the call fails
        """
        if not self.is_ready():
            raise InterpretationError("AI service is not configured")

        try:
            result = await self.agent.run(QUERY_PROMPT.format(query=query))
        except Exception as e:
            logger.error(f"Failed to interpret query '{query[:50]}': {e}", exc_info=True)
            raise InterpretationError(str(e)) from e

        response = result.output
        if len(response) > self.settings.max_response_length:
            response = response[:self.settings.max_response_length - 3] + "..."
            logger.warning(f"Interpretation truncated to {self.settings.max_response_length} characters")
        return response

    def is_ready(self) -> bool:
        """Check if the interpreter can serve requests."""
        return self.initialized and self.agent is not None
