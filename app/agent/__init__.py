"""Tool adapter exposing the reservation API to an LLM agent."""
from app.agent.api_client import ApiClientError, CourtsApiClient
from app.agent.tools import TOOL_DEFINITIONS, create_tool_handlers

__all__ = ["ApiClientError", "CourtsApiClient", "TOOL_DEFINITIONS", "create_tool_handlers"]
