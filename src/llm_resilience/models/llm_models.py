"""
LLM-specific data models for the request/response cycle.

These models describe a single structured-generation call. They are what a
concrete BaseLLMClient receives and returns; the resilience layer itself
treats them as opaque.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, ConfigDict


class LLMGenerationRequest(BaseModel):
    """
    Standardized structured-generation request.

    ``format_schema`` is the JSON Schema the provider is asked to honour.
    ``content`` is appended to the prompt by providers that take a single
    text input.
    """
    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., description="Instruction prompt")
    content: Optional[str] = Field(default=None, description="Content to process, if separate from the prompt")
    model: Optional[str] = Field(default=None, description="Model identifier (provider default when None)")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: Optional[int] = Field(default=None, ge=1, description="Maximum tokens to generate")
    format_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON Schema for structured output"
    )

    def full_prompt(self) -> str:
        """Prompt with the content block appended, for single-input providers."""
        if self.content:
            return f"{self.prompt}\n\nContent to process:\n{self.content}"
        return self.prompt


class LLMGenerationResponse(BaseModel):
    """
    Structured-generation response with audit metadata.

    ``data`` holds the parsed structured output when the provider returns it.
    """
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., description="Raw generated text")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Parsed structured output")
    model_version: str = Field(..., description="Actual model version used")
    finish_reason: str = Field(..., description="Why generation stopped: 'stop', 'length', 'error', etc.")
    prompt_tokens: Optional[int] = Field(default=None, ge=0, description="Tokens in prompt")
    completion_tokens: Optional[int] = Field(default=None, ge=0, description="Tokens in completion")
    latency_ms: int = Field(..., ge=0, description="Generation latency in milliseconds")
    raw_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific metadata (for debugging)"
    )

    @property
    def usage_tokens(self) -> Optional[int]:
        """Total tokens when both counts are known."""
        if self.prompt_tokens is None or self.completion_tokens is None:
            return None
        return self.prompt_tokens + self.completion_tokens
