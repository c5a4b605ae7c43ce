"""Vertex AI Gemini client."""

import asyncio
import logging
from typing import Any

from google import genai
from google.genai import types

from vertex_mcp.config.loader import VertexConfig
from vertex_mcp.tools.base import BackendError, SamplingConfig

logger = logging.getLogger(__name__)


class GeminiClient:
    """Client for Gemini text generation on Vertex AI.

    One generation config, thinking config included, serves every tool;
    the recency-hinted query gets the same ThinkingConfig as the others.
    """

    def __init__(
        self,
        config: VertexConfig,
        sampling: SamplingConfig | None = None,
        timeout: float = 90.0,
        client: Any = None,
    ):
        self.config = config
        self.sampling = sampling or SamplingConfig()
        self.timeout = timeout
        self._client = client or genai.Client(
            vertexai=True,
            project=config.project_id,
            location=config.location,
        )
        self._generation_config = types.GenerateContentConfig(
            temperature=self.sampling.temperature,
            top_p=self.sampling.top_p,
            max_output_tokens=self.sampling.max_output_tokens,
            thinking_config=types.ThinkingConfig(
                include_thoughts=self.sampling.include_thoughts,
            ),
        )

    @property
    def model_name(self) -> str:
        return self.config.model_name

    async def generate(self, prompt: str) -> str:
        """
        Send a prompt to Gemini and return the text of the first candidate.

        Args:
            prompt: The full prompt text.

        Returns:
            The generated text.

        Raises:
            BackendError: On timeout, SDK/transport errors or an empty response.
        """
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.config.model_name,
                    contents=prompt,
                    config=self._generation_config,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise BackendError(f"generation timed out after {self.timeout:g}s") from e
        except Exception as e:
            raise BackendError(f"failed to generate content: {e}") from e

        return extract_text(response)


def extract_text(response: Any) -> str:
    """Pull the first part's text out of a generate_content response."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        raise BackendError("no candidates in response")

    content = candidates[0].content
    if content is None or not content.parts:
        raise BackendError("no parts in response")

    text = content.parts[0].text
    if text is None:
        raise BackendError("no text in response")
    return text
