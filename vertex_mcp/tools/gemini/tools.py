"""Gemini provider tools."""

import logging
from typing import Any

from vertex_mcp.mcp.models import Tool
from vertex_mcp.tools.base import (
    TextGenerator,
    ToolHandler,
    get_tool_metadata,
    optional_string,
    require_string,
    tool,
)

logger = logging.getLogger(__name__)

# Prompt hint standing in for real search grounding, which the Vertex AI
# generation endpoint does not offer for these models.
RECENCY_INSTRUCTION = "Please provide current, up-to-date information if available. "

REVIEW_RUBRIC = """Please analyze:
1. Code quality and best practices
2. Potential bugs or issues
3. Performance considerations
4. Security concerns
5. Readability and maintainability
6. Specific improvements you'd recommend

Provide your response in JSON format with this structure:
{
  "summary": "Brief overall assessment",
  "quality_score": "1-10 rating",
  "issues": [
    {"severity": "high|medium|low", "type": "bug|style|performance|security", "description": "...", "suggestion": "..."}
  ],
  "strengths": ["strength 1", "strength 2"],
  "recommendations": ["recommendation 1", "recommendation 2"]
}"""

PROMPT_SCHEMA = {
    "type": "object",
    "properties": {
        "prompt": {
            "type": "string",
            "description": "The prompt or question to send to Gemini",
        },
    },
    "required": ["prompt"],
}


@tool(
    name="gemini_query",
    description=(
        "Query Google's Gemini AI model with any prompt. Best for general questions, "
        "coding assistance, explanations, and creative tasks."
    ),
    input_schema=PROMPT_SCHEMA,
)
async def query_handler(generator: TextGenerator, arguments: dict[str, Any]) -> str:
    """Handle the gemini_query tool call."""
    prompt = require_string(arguments, "prompt")
    return await generator.generate(prompt)


@tool(
    name="gemini_query_with_search",
    description=(
        "Query Google's Gemini AI model optimized for current information. "
        "Use this for queries that need real-time or recent data."
    ),
    input_schema=PROMPT_SCHEMA,
)
async def query_with_search_handler(generator: TextGenerator, arguments: dict[str, Any]) -> str:
    """Handle the gemini_query_with_search tool call."""
    prompt = require_string(arguments, "prompt")
    return await generator.generate(RECENCY_INSTRUCTION + prompt)


def build_review_prompt(code: str, language: str, focus: str = "") -> str:
    """Compose the code review prompt sent to the model."""
    prompt = f"Review the following {language} code and provide detailed feedback.\n\nCode:\n{code}\n\n"
    if focus:
        prompt += f"Focus specifically on: {focus}\n\n"
    return prompt + REVIEW_RUBRIC


@tool(
    name="gemini_code_review",
    description=(
        "Have Gemini review code and provide improvement suggestions. Automatically analyzes "
        "code quality, potential bugs, best practices, and optimization opportunities."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "code": {
                "type": "string",
                "description": "The code to review",
            },
            "language": {
                "type": "string",
                "description": "Programming language (e.g., 'go', 'python', 'javascript')",
            },
            "focus": {
                "type": "string",
                "description": (
                    "Optional: Specific aspects to focus on "
                    "(e.g., 'security', 'performance', 'readability')"
                ),
            },
        },
        "required": ["code", "language"],
    },
)
async def code_review_handler(generator: TextGenerator, arguments: dict[str, Any]) -> str:
    """Handle the gemini_code_review tool call.

    The model is asked for JSON, but its reply is returned verbatim whether
    or not it parses.
    """
    code = require_string(arguments, "code")
    language = require_string(arguments, "language")
    focus = optional_string(arguments, "focus")

    logger.debug(f"Reviewing {len(code)} chars of {language} code (focus={focus!r})")
    return await generator.generate(build_review_prompt(code, language, focus))


# Definition order is the order tools/list reports.
TOOL_HANDLERS: tuple[ToolHandler, ...] = (
    query_handler,
    query_with_search_handler,
    code_review_handler,
)


def tool_definitions() -> list[Tool]:
    """Return the descriptors of all Gemini tools in definition order."""
    return [get_tool_metadata(handler) for handler in TOOL_HANDLERS]  # type: ignore[misc]


def tool_handlers() -> dict[str, ToolHandler]:
    """Return the Gemini tool handlers keyed by tool name."""
    return {get_tool_metadata(handler).name: handler for handler in TOOL_HANDLERS}  # type: ignore[union-attr]
