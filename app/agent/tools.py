"""
Agent tool definitions and their handlers.

Each handler takes the tool arguments and returns a text content block; API
failures come back as ``isError`` results rather than exceptions so the
agent can read them.
"""
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List

from app.agent.api_client import ApiClientError, CourtsApiClient

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]

_RESERVATION_ID = {"type": "string", "description": "The reservation ID"}

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "name": "list_courts",
        "description": "List all available courts",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "list_available_slots",
        "description": "Get time slots for a specific date, showing which are available for booking",
        "inputSchema": {
            "type": "object",
            "properties": {"date": {"type": "string", "description": "Date in YYYY-MM-DD format"}},
            "required": ["date"],
        },
    },
    {
        "name": "get_reservation",
        "description": "Get details of a specific reservation",
        "inputSchema": {
            "type": "object",
            "properties": {"reservation_id": _RESERVATION_ID},
            "required": ["reservation_id"],
        },
    },
    {
        "name": "list_reservations",
        "description": "List all reservations",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "create_reservation",
        "description": "Book a court time slot",
        "inputSchema": {
            "type": "object",
            "properties": {
                "timeSlotId": {"type": "string", "description": "Time slot ID (format: courtId-YYYY-MM-DD-HH:MM)"},
                "courtId": {"type": "string", "description": "Court ID"},
                "playerName": {"type": "string", "description": "Name of the person booking"},
                "playerEmail": {"type": "string", "description": "Email address"},
                "playerPhone": {"type": "string", "description": "Phone number"},
                "players": {"type": "number", "description": "Number of players (1-4, default 1)"},
                "isOpenPlay": {"type": "boolean", "description": "Let other players join this booking"},
                "maxOpenPlayers": {"type": "number", "description": "Open play capacity (default 8)"},
            },
            "required": ["timeSlotId", "courtId", "playerName", "playerEmail", "playerPhone"],
        },
    },
    {
        "name": "update_reservation",
        "description": "Update an existing reservation",
        "inputSchema": {
            "type": "object",
            "properties": {
                "reservation_id": _RESERVATION_ID,
                "playerName": {"type": "string", "description": "Updated name"},
                "playerEmail": {"type": "string", "description": "Updated email"},
                "playerPhone": {"type": "string", "description": "Updated phone"},
                "players": {"type": "number", "description": "Updated player count"},
            },
            "required": ["reservation_id"],
        },
    },
    {
        "name": "join_open_play",
        "description": "Join an open play reservation as an extra player",
        "inputSchema": {
            "type": "object",
            "properties": {
                "reservation_id": _RESERVATION_ID,
                "name": {"type": "string", "description": "Player name"},
                "email": {"type": "string", "description": "Player email"},
                "phone": {"type": "string", "description": "Player phone"},
            },
            "required": ["reservation_id", "name", "email", "phone"],
        },
    },
    {
        "name": "delete_reservation",
        "description": "Cancel/delete a reservation (frees the time slot)",
        "inputSchema": {
            "type": "object",
            "properties": {"reservation_id": _RESERVATION_ID},
            "required": ["reservation_id"],
        },
    },
]


def _success(data: Any) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": json.dumps(data, default=str)}]}


def _error(err: Exception) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": f"Error: {err}"}], "isError": True}


def create_tool_handlers(client: CourtsApiClient) -> Dict[str, ToolHandler]:
    """Map every tool in ``TOOL_DEFINITIONS`` to a handler bound to ``client``."""

    def wrap(call: Callable[[Dict[str, Any]], Awaitable[Any]]) -> ToolHandler:
        async def handler(args: Dict[str, Any]) -> Dict[str, Any]:
            try:
                return _success(await call(args or {}))
            except (ApiClientError, KeyError) as e:
                logger.warning(f"Tool call failed: {e}")
                return _error(e)

        return handler

    def without_id(args: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in args.items() if key != "reservation_id"}

    return {
        "list_courts": wrap(lambda args: client.list_courts()),
        "list_available_slots": wrap(lambda args: client.list_available_slots(args["date"])),
        "get_reservation": wrap(lambda args: client.get_reservation(args["reservation_id"])),
        "list_reservations": wrap(lambda args: client.list_reservations()),
        "create_reservation": wrap(lambda args: client.create_reservation(without_id(args))),
        "update_reservation": wrap(
            lambda args: client.update_reservation(args["reservation_id"], without_id(args))
        ),
        "join_open_play": wrap(
            lambda args: client.join_open_play(args["reservation_id"], without_id(args))
        ),
        "delete_reservation": wrap(lambda args: client.delete_reservation(args["reservation_id"])),
    }
