"""
Abstract base client for structured-generation providers.

Defines the interface that provider adapters (Claude, Gemini, ...) implement.
The resilience layer only ever calls ``generate``; transport, request
shaping and response parsing all live in the concrete adapter.
"""

from abc import ABC, abstractmethod
import structlog

from llm_resilience.models.llm_models import LLMGenerationRequest, LLMGenerationResponse


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for structured-generation clients.

    Responsibilities:
    - Send one generation request to the provider
    - Parse the response into LLMGenerationResponse
    - Raise LLMClientError subclasses (or errors ``to_llm_error`` understands)

    Does NOT handle:
    - Retries, backoff or circuit breaking (that's ResilientLLMClient's job)
    """

    def __init__(self, provider: str, default_model: str | None = None, timeout: int = 60):
        """
        Initialize base client.

        Args:
            provider: Provider name (e.g., "claude", "gemini")
            default_model: Model used when a request doesn't name one
            timeout: Request timeout in seconds
        """
        self.provider = provider
        self.default_model = default_model
        self.timeout = timeout

        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            provider=provider,
            default_model=default_model,
            timeout=timeout,
        )

    @abstractmethod
    async def generate(self, request: LLMGenerationRequest) -> LLMGenerationResponse:
        """
        Perform a single structured-generation call.

        Args:
            request: Standardized generation request

        Returns:
            LLMGenerationResponse with generated text and metadata

        Raises:
            LLMClientError: Any provider or transport failure
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the provider is reachable.

        Returns:
            True if healthy, False otherwise. Should not raise.
        """

    async def close(self) -> None:
        """Release connections. Default implementation does nothing."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"provider={self.provider}, "
            f"timeout={self.timeout}s)"
        )
